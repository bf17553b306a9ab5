import logging
import os
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from book import Book

logger = logging.getLogger(__name__)


class IssueResult(str, Enum):
    ISSUED = "issued"
    NOT_FOUND = "not_found"
    ALREADY_ISSUED = "already_issued"


class ReturnResult(str, Enum):
    RETURNED = "returned"
    NOT_FOUND = "not_found"
    NOT_ISSUED = "not_issued"


class StorageError(Exception):
    """Raised when the backing file cannot be read or written."""


class Library:
    """Manages the collection of books and its flat-file mirror.

    The in-memory list is authoritative once loaded. Every successful mutation
    rewrites the whole file before returning.
    """

    def __init__(self, data_file: Union[str, os.PathLike], autoload: bool = True) -> None:
        self.data_file = Path(data_file)
        self.books: List[Book] = []
        if autoload:
            self.load()

    # ------------------------- Core operations ------------------------- #
    def add_book(self, book: Book) -> None:
        """Append a book and persist. Duplicate ids are accepted."""
        self.books.append(book)
        self.save()

    def list_books(self) -> List[Book]:
        return list(self.books)

    def find_book(self, book_id: int) -> Optional[Book]:
        for book in self.books:
            if book.id == book_id:
                return book
        return None

    def issue_book(self, book_id: int) -> IssueResult:
        book = self.find_book(book_id)
        if book is None:
            return IssueResult.NOT_FOUND
        if book.issued:
            return IssueResult.ALREADY_ISSUED
        book.issue()
        self.save()
        return IssueResult.ISSUED

    def return_book(self, book_id: int) -> ReturnResult:
        book = self.find_book(book_id)
        if book is None:
            return ReturnResult.NOT_FOUND
        if not book.issued:
            return ReturnResult.NOT_ISSUED
        book.return_book()
        self.save()
        return ReturnResult.RETURNED

    def get_statistics(self) -> Dict[str, int]:
        issued = sum(1 for book in self.books if book.issued)
        return {
            "total_books": len(self.books),
            "issued_books": issued,
            "available_books": len(self.books) - issued,
        }

    # ------------------------- Persistence ------------------------- #
    def save(self) -> None:
        """Overwrite the backing file with one line per book.

        A failed write leaves the in-memory list untouched, so memory and disk
        may differ until the next successful save.
        """
        try:
            with open(self.data_file, "w", encoding="utf-8", newline="\n") as f:
                for book in self.books:
                    f.write(book.to_csv() + "\n")
        except OSError as exc:
            logger.error("Failed to save library to %s: %s", self.data_file, exc)
            raise StorageError(f"Could not write {self.data_file}: {exc}") from exc
        logger.debug("Saved %d books to %s", len(self.books), self.data_file)

    def load(self) -> None:
        """Replace the in-memory list with the parsable lines of the backing file."""
        self.books.clear()
        if not self.data_file.exists():
            logger.debug("No data file at %s, starting with an empty library", self.data_file)
            return

        skipped = 0
        try:
            # Decoded per line so one undecodable line is skipped like any other
            with open(self.data_file, "rb") as f:
                for raw in f:
                    try:
                        line = raw.decode("utf-8")
                    except UnicodeDecodeError:
                        skipped += 1
                        continue
                    book = Book.from_csv(line.rstrip("\r\n"))
                    if book is None:
                        skipped += 1
                        continue
                    self.books.append(book)
        except OSError as exc:
            logger.error("Failed to load library from %s: %s", self.data_file, exc)
            raise StorageError(f"Could not read {self.data_file}: {exc}") from exc

        if skipped:
            logger.warning("Skipped %d malformed line(s) in %s", skipped, self.data_file)
        logger.debug("Loaded %d books from %s", len(self.books), self.data_file)
