from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
FIELD_COUNT = 6

# Commas not preceded by a backslash separate fields
_FIELD_SPLIT = re.compile(r"(?<!\\),")
_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def _now() -> datetime:
    return datetime.now()


def escape(text: str) -> str:
    return text.replace(",", "\\,")


def unescape(text: str) -> str:
    return text.replace("\\,", ",")


def format_timestamp(value: Optional[datetime]) -> str:
    return value.strftime(DATETIME_FORMAT) if value is not None else ""


def parse_timestamp(text: str) -> Optional[datetime]:
    """Parse a persisted timestamp; empty text means no timestamp.

    strptime accepts unpadded fields such as ``2024-1-5``, so the value is
    formatted back and compared to reject anything but the exact layout.
    """
    if not text:
        return None
    value = datetime.strptime(text, DATETIME_FORMAT)
    if value.strftime(DATETIME_FORMAT) != text:
        raise ValueError(f"Timestamp not in {DATETIME_FORMAT!r} format: {text!r}")
    return value


def parse_id(text: str) -> int:
    # int() alone would also take padding, underscores and non-ASCII digits
    if not _ID_PATTERN.fullmatch(text):
        raise ValueError(f"Not an integer id: {text!r}")
    return int(text)


def parse_bool(text: str) -> bool:
    lowered = text.lower()
    if lowered not in ("true", "false"):
        raise ValueError(f"Not a boolean: {text!r}")
    return lowered == "true"


class Book:
    """Represents a single book in the library and its issue/return state."""

    def __init__(self, id: int, title: str, author: str) -> None:
        self.id = id
        self.title = title
        self.author = author
        self.issued = False
        self.issued_at: Optional[datetime] = None
        self.returned_at: Optional[datetime] = None

    def issue(self) -> None:
        self.issued = True
        self.issued_at = _now()
        self.returned_at = None

    def return_book(self) -> None:
        # issued_at is kept so the last checkout time stays visible
        self.issued = False
        self.returned_at = _now()

    def __str__(self) -> str:
        status = "Issued" if self.issued else "Available"
        issued_at = format_timestamp(self.issued_at) or "N/A"
        returned_at = format_timestamp(self.returned_at) or "N/A"
        return (
            f"{self.id} - {self.title} by {self.author} [{status}]"
            f" | Issued: {issued_at} | Returned: {returned_at}"
        )

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title={self.title!r}, author={self.author!r}, issued={self.issued!r})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "issued": self.issued,
            "issued_at": format_timestamp(self.issued_at) or None,
            "returned_at": format_timestamp(self.returned_at) or None,
        }

    def to_csv(self) -> str:
        """Serialize to one persistence line: ``id,title,author,issued,issued_at,returned_at``."""
        return ",".join([
            str(self.id),
            escape(self.title),
            escape(self.author),
            "true" if self.issued else "false",
            format_timestamp(self.issued_at),
            format_timestamp(self.returned_at),
        ])

    @staticmethod
    def from_csv(line: str) -> Optional["Book"]:
        """Parse one persistence line. Returns None when the line is malformed."""
        parts = _FIELD_SPLIT.split(line)
        if len(parts) != FIELD_COUNT:
            return None
        try:
            book_id = parse_id(parts[0])
            issued = parse_bool(parts[3])
            issued_at = parse_timestamp(parts[4])
            returned_at = parse_timestamp(parts[5])
        except ValueError:
            return None

        book = Book(book_id, unescape(parts[1]), unescape(parts[2]))
        if issued:
            # issue() clears returned_at; only the checkout time is restored
            book.issue()
            book.issued_at = issued_at
        else:
            book.issued_at = issued_at
            book.returned_at = returned_at
        return book
