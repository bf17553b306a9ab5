import json

from typer.testing import CliRunner

from book import Book
from library import IssueResult, Library, ReturnResult
from main import app, issue, return_

runner = CliRunner()


def invoke(data_file, *args, input=None):
    return runner.invoke(app, ["--data-file", str(data_file), *args], input=input)


def test_list_no_books(data_file):
    result = invoke(data_file, "list")
    assert result.exit_code == 0
    assert "Library is Empty." in result.stdout

def test_add_book(data_file):
    result = invoke(data_file, "add", "1", "Dune", "Herbert")
    assert result.exit_code == 0
    assert "Book added." in result.stdout
    assert data_file.read_text(encoding="utf-8") == "1,Dune,Herbert,false,,\n"

def test_list_books(data_file):
    Library(data_file).add_book(Book(1, "Dune", "Herbert"))

    result = invoke(data_file, "list")
    assert result.exit_code == 0
    assert "1 - Dune by Herbert [Available] | Issued: N/A | Returned: N/A" in result.stdout

def test_list_books_json(data_file):
    Library(data_file).add_book(Book(2, "A, B", "C"))

    result = invoke(data_file, "--output", "json", "list")
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{
        "id": 2, "title": "A, B", "author": "C",
        "issued": False, "issued_at": None, "returned_at": None,
    }]

def test_issue_outcomes(data_file):
    Library(data_file).add_book(Book(1, "Dune", "Herbert"))

    assert "Book Issued Successfully." in invoke(data_file, "issue", "1").stdout
    assert "Book is Already Issued." in invoke(data_file, "issue", "1").stdout
    assert "Book Not Found." in invoke(data_file, "issue", "2").stdout
    assert Library(data_file).find_book(1).issued is True

def test_return_outcomes(data_file):
    Library(data_file).add_book(Book(1, "Dune", "Herbert"))

    assert "This Book wasn't Issued." in invoke(data_file, "return", "1").stdout
    invoke(data_file, "issue", "1")
    assert "Book Returned Successfully." in invoke(data_file, "return", "1").stdout
    assert "Book not Found." in invoke(data_file, "return", "2").stdout
    assert Library(data_file).find_book(1).issued is False

def test_find_book(data_file):
    Library(data_file).add_book(Book(1, "Dune", "Herbert"))

    assert "1 - Dune by Herbert" in invoke(data_file, "find", "1").stdout
    assert "Book with ID 9 not found." in invoke(data_file, "find", "9").stdout

def test_stats(data_file):
    lib = Library(data_file)
    lib.add_book(Book(1, "Dune", "Herbert"))
    lib.add_book(Book(2, "Emma", "Austen"))
    lib.issue_book(1)

    result = invoke(data_file, "stats")
    assert "Total Books: 2" in result.stdout
    assert "Issued: 1" in result.stdout
    assert "Available: 1" in result.stdout

def test_save_error_is_reported(tmp_path):
    result = invoke(tmp_path / "missing" / "books.csv", "add", "1", "Dune", "Herbert")
    assert result.exit_code == 0
    assert "Error saving to file" in result.stdout
    assert "Book added." in result.stdout

def test_issue_save_error_keeps_book_issued(lib, tmp_path, capsys):
    lib.add_book(Book(1, "Dune", "Herbert"))
    # Point the library at a path whose directory does not exist
    lib.data_file = tmp_path / "missing" / "books.csv"

    assert issue(lib, 1) is IssueResult.ISSUED
    out = capsys.readouterr().out
    assert "Error saving to file" in out
    assert "Book Issued Successfully." in out
    assert lib.find_book(1).issued is True

def test_return_save_error_keeps_book_returned(lib, tmp_path, capsys):
    lib.add_book(Book(1, "Dune", "Herbert"))
    lib.issue_book(1)
    lib.data_file = tmp_path / "missing" / "books.csv"

    assert return_(lib, 1) is ReturnResult.RETURNED
    out = capsys.readouterr().out
    assert "Error saving to file" in out
    assert "Book Returned Successfully." in out
    book = lib.find_book(1)
    assert book.issued is False
    assert book.returned_at is not None

def test_undecodable_line_does_not_break_startup(data_file):
    data_file.write_bytes(b"1,Dune,Herbert,false,,\n2,Caf\xe9,X,false,,\n")
    result = invoke(data_file, "list")
    assert result.exit_code == 0
    assert "1 - Dune by Herbert" in result.stdout
    assert "Caf" not in result.stdout

def test_load_error_is_reported(tmp_path):
    result = invoke(tmp_path, "list")
    assert result.exit_code == 0
    assert "Error loading from file" in result.stdout
    assert "Library is Empty." in result.stdout

def test_menu_full_session(data_file):
    session = "\n".join([
        "1", "7", "Dune", "Herbert",   # add
        "2",                           # view
        "3", "7",                      # issue
        "3", "7",                      # issue again
        "4", "99",                     # return unknown
        "4", "7",                      # return
        "5",
    ]) + "\n"
    result = invoke(data_file, "menu", input=session)
    assert result.exit_code == 0
    out = result.stdout
    assert "Book added." in out
    assert "7 - Dune by Herbert [Available]" in out
    assert "Book Issued Successfully." in out
    assert "Book is Already Issued." in out
    assert "Book not Found." in out
    assert "Book Returned Successfully." in out
    assert "Exiting..." in out

    book = Library(data_file).find_book(7)
    assert book.issued is False
    assert book.issued_at is not None
    assert book.returned_at is not None

def test_menu_is_default_command(data_file):
    result = invoke(data_file, input="2\n5\n")
    assert result.exit_code == 0
    assert "Library is Empty." in result.stdout
    assert "Exiting..." in result.stdout

def test_menu_invalid_option(data_file):
    result = invoke(data_file, "menu", input="9\nabc\n5\n")
    assert result.exit_code == 0
    assert result.stdout.count("Invalid option!") == 2

def test_menu_reprompts_for_integer_id(data_file):
    result = invoke(data_file, "menu", input="1\nabc\n3\nEmma\nAusten\n5\n")
    assert result.exit_code == 0
    assert "valid integer" in result.stdout
    assert Library(data_file).find_book(3).title == "Emma"

def test_menu_stops_at_end_of_input(data_file):
    result = invoke(data_file, "menu", input="2\n")
    assert result.exit_code == 0
    assert "Exiting..." in result.stdout
