import pytest

from library import Library
from ui_helpers import OUTPUT_MODE_ENV

@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # Output mode lives in the environment; reset it for every test
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")

@pytest.fixture
def data_file(tmp_path):
    # Unique data file per test
    return tmp_path / "books.csv"

@pytest.fixture
def lib(data_file):
    return Library(data_file)
