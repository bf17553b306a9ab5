import os
import json
from typing import List, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from book import Book, format_timestamp
from config import settings

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"
OUTPUT_MODES = {"plain", "json", "rich"}

EMPTY_LIBRARY_MESSAGE = "Library is Empty."

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in OUTPUT_MODES:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    mode = os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()
    return mode if mode in OUTPUT_MODES else "plain"

def print_list_result(books: List[Book]) -> None:
    """Print the book list in the current output mode.
    - plain: one rendered line per book, or 'Library is Empty.'
    - json: JSON array of book dictionaries
    - rich: Rich table
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
        return

    if not books:
        print(EMPTY_LIBRARY_MESSAGE)
        return

    if mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Status")
        table.add_column("Issued", no_wrap=True)
        table.add_column("Returned", no_wrap=True)
        for b in books:
            status = "[yellow]Issued[/]" if b.issued else "[green]Available[/]"
            table.add_row(
                str(b.id), escape(b.title), escape(b.author), status,
                format_timestamp(b.issued_at) or "N/A",
                format_timestamp(b.returned_at) or "N/A",
            )
        _console.print(table)
    else:
        for b in books:
            print(str(b))

def print_stats_result(stats: Dict[str, int]) -> None:
    mode = get_output_mode()

    total = stats.get("total_books", 0)
    issued = stats.get("issued_books", 0)
    available = stats.get("available_books", 0)

    if mode == "json":
        print(json.dumps({"total_books": total, "issued_books": issued, "available_books": available}))
    elif mode == "rich":
        content = (
            f"[bold]Total Books:[/] {total}\n"
            f"[bold]Issued:[/] {issued}\n"
            f"[bold]Available:[/] {available}"
        )
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        print(f"Total Books: {total}")
        print(f"Issued: {issued}")
        print(f"Available: {available}")
