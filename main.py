import logging
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from book import Book
from config import settings
from library import Library, IssueResult, ReturnResult, StorageError
from ui_helpers import set_output_mode, print_list_result, print_stats_result

console = Console()
logger = logging.getLogger(__name__)

ISSUE_MESSAGES = {
    IssueResult.ISSUED: "Book Issued Successfully.",
    IssueResult.NOT_FOUND: "Book Not Found.",
    IssueResult.ALREADY_ISSUED: "Book is Already Issued.",
}

RETURN_MESSAGES = {
    ReturnResult.RETURNED: "Book Returned Successfully.",
    ReturnResult.NOT_FOUND: "Book not Found.",
    ReturnResult.NOT_ISSUED: "This Book wasn't Issued.",
}

MENU_ITEMS = [
    ("1", "Add Book", "➕"),
    ("2", "View All Books", "📚"),
    ("3", "Issue a Book", "📤"),
    ("4", "Return a Book", "📥"),
    ("5", "Exit", "🚪"),
]


def open_library(data_file: str) -> Library:
    """Load the library, falling back to an empty one if the file is unreadable."""
    logger.debug("Using data file %s", data_file)
    try:
        return Library(data_file)
    except StorageError as e:
        print(f"Error loading from file: {e}")
        return Library(data_file, autoload=False)


# --- Operations shared by the menu and the subcommands ---
# A StorageError from the library means the in-memory change was applied
# but the file could not be rewritten.

def add(lib: Library, book: Book) -> None:
    try:
        lib.add_book(book)
    except StorageError as e:
        print(f"Error saving to file: {e}")
    print("Book added.")


def issue(lib: Library, book_id: int) -> IssueResult:
    try:
        result = lib.issue_book(book_id)
    except StorageError as e:
        print(f"Error saving to file: {e}")
        result = IssueResult.ISSUED
    print(ISSUE_MESSAGES[result])
    return result


def return_(lib: Library, book_id: int) -> ReturnResult:
    try:
        result = lib.return_book(book_id)
    except StorageError as e:
        print(f"Error saving to file: {e}")
        result = ReturnResult.RETURNED
    print(RETURN_MESSAGES[result])
    return result


# --- Typer CLI application ---
app = typer.Typer(help="Library management CLI")

@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    data_file: Optional[str] = typer.Option(
        None,
        "--data-file",
        "-f",
        help="Path of the books file (default: LIBRARY_DATA_FILE or books.csv)",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
):
    """Global options; starts the interactive menu when no command is given."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    if output:
        set_output_mode(output)
    ctx.obj = open_library(data_file or settings.data_file)
    if ctx.invoked_subcommand is None:
        run_menu(ctx.obj)

@app.command("list")
def cli_list(ctx: typer.Context):
    """List all books."""
    lib: Library = ctx.obj
    print_list_result(lib.list_books())

@app.command("add")
def cli_add(
    ctx: typer.Context,
    book_id: int = typer.Argument(..., metavar="ID", help="Book ID"),
    title: str = typer.Argument(..., help="Book title"),
    author: str = typer.Argument(..., help="Author name"),
):
    """Add a book."""
    add(ctx.obj, Book(book_id, title, author))

@app.command("issue")
def cli_issue(ctx: typer.Context, book_id: int = typer.Argument(..., metavar="ID", help="Book ID")):
    """Issue a book by ID."""
    issue(ctx.obj, book_id)

@app.command("return")
def cli_return(ctx: typer.Context, book_id: int = typer.Argument(..., metavar="ID", help="Book ID")):
    """Return an issued book by ID."""
    return_(ctx.obj, book_id)

@app.command("find")
def cli_find(ctx: typer.Context, book_id: int = typer.Argument(..., metavar="ID", help="Book ID")):
    """Find a book by ID and show it."""
    lib: Library = ctx.obj
    book = lib.find_book(book_id)
    if book:
        print_list_result([book])
    else:
        print(f"Book with ID {book_id} not found.")

@app.command("stats")
def cli_stats(ctx: typer.Context):
    """Show library statistics."""
    lib: Library = ctx.obj
    print_stats_result(lib.get_statistics())

@app.command("menu")
def cli_menu(ctx: typer.Context):
    """Start the interactive menu."""
    run_menu(ctx.obj)


# --- Interactive menu ---
def render_menu() -> None:
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label, icon in MENU_ITEMS:
        table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

    console.print(Panel(
        table,
        title=settings.app_name,
        border_style="cyan",
        box=box.HEAVY,
        padding=(0, 2),
    ))

def menu_add(lib: Library) -> None:
    book_id = IntPrompt.ask("Enter Book ID", console=console)
    title = Prompt.ask("Enter Book Name", console=console)
    author = Prompt.ask("Enter Author Name", console=console)
    add(lib, Book(book_id, title, author))

def menu_list(lib: Library) -> None:
    print_list_result(lib.list_books())

def menu_issue(lib: Library) -> None:
    issue(lib, IntPrompt.ask("Enter Book ID to Issue", console=console))

def menu_return(lib: Library) -> None:
    return_(lib, IntPrompt.ask("Enter Book ID to Return", console=console))

def run_menu(lib: Library) -> None:
    """Numbered menu loop; runs until option 5 or end of input."""
    actions = {
        1: menu_add,
        2: menu_list,
        3: menu_issue,
        4: menu_return,
    }

    while True:
        render_menu()
        try:
            raw = Prompt.ask("Choose an option", console=console)
            try:
                choice = int(raw.strip())
            except ValueError:
                choice = None

            if choice == 5:
                print("Exiting...")
                break
            action = actions.get(choice)
            if action is None:
                print("Invalid option!")
            else:
                action(lib)
        except EOFError:
            print("Exiting...")
            break
        print()  # blank line between operations

if __name__ == "__main__":
    app()
