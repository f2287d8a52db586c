import pytest

from biblioteca.books import (
    DuplicateCodeError,
    add_book,
    adjust_copies,
    available_copies,
    book_title,
    count_books,
    find_book_by_code,
    find_book_by_title,
    format_book,
    format_book_list,
    list_books,
    titles_equal,
)
from biblioteca.storage import Book, LibraryError, LibraryFile


@pytest.fixture
def db(tmp_path):
    with LibraryFile(tmp_path / "biblioteca.dat") as library:
        yield library


def make_book(code, title="Iracema", copies=2):
    return Book(code, title, "José de Alencar", "Editora", 1, 1865, copies)


def test_titles_equal_ignores_case():
    assert titles_equal("Dom Casmurro", "dom CASMURRO")
    assert not titles_equal("abc", "abcd")
    assert not titles_equal("abc", "abd")


def test_add_and_find_by_code(db):
    book = make_book(5)
    add_book(db, book)
    found = find_book_by_code(db, 5)
    assert found.title == book.title
    assert found.copies == book.copies


def test_missing_code_returns_none(db):
    add_book(db, make_book(1))
    assert find_book_by_code(db, 2) is None


def test_duplicate_code_rejected(db):
    add_book(db, make_book(1))
    with pytest.raises(DuplicateCodeError):
        add_book(db, make_book(1, "Outro"))
    assert db.read_header().total_books == 1


def test_header_updates_per_book(db):
    before = db.read_header()
    add_book(db, make_book(1))
    middle = db.read_header()
    add_book(db, make_book(2))
    after = db.read_header()
    assert after.total_books == before.total_books + 2
    assert after.books_top - middle.books_top == middle.books_top - before.books_top
    assert after.books_head == middle.books_top


def test_list_books_newest_first(db):
    for code in (1, 2, 3):
        add_book(db, make_book(code))
    assert [book.code for book in list_books(db)] == [3, 2, 1]


def test_find_by_title_case_insensitive(db):
    add_book(db, make_book(1, "O Guarani"))
    add_book(db, make_book(2, "Senhora"))
    assert find_book_by_title(db, "o guarani").code == 1
    assert find_book_by_title(db, "Lucíola") is None


def test_count_books(db):
    first = make_book(1, copies=3)
    second = make_book(2, copies=5)
    add_book(db, first)
    add_book(db, second)
    assert count_books(db) == (2, first.copies + second.copies)


def test_adjust_copies(db):
    add_book(db, make_book(1, copies=3))
    adjust_copies(db, 1, -1)
    assert available_copies(db, 1) == 2
    adjust_copies(db, 1, 1)
    assert available_copies(db, 1) == 3


def test_adjust_missing_book_raises(db):
    with pytest.raises(LibraryError):
        adjust_copies(db, 9, 1)


def test_available_copies_missing(db):
    assert available_copies(db, 42) is None


def test_book_title(db):
    add_book(db, make_book(1, "Senhora"))
    assert book_title(db, 1) == "Senhora"
    assert book_title(db, 2) is None


def test_format_book():
    text = format_book(make_book(7, "Senhora"))
    assert "Título: Senhora\n" in text
    assert "Autor: José de Alencar\n" in text
    assert text.startswith("\n--- DADOS DO LIVRO ---\n")


def test_format_book_list(db):
    assert format_book_list(db) == "Nenhum livro cadastrado.\n"
    add_book(db, make_book(1, "Senhora", copies=4))
    text = format_book_list(db)
    assert "Título: Senhora | Autor: José de Alencar | Exemplares: 4\n" in text