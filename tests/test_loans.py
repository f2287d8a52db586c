import pytest

from biblioteca.books import add_book, find_book_by_code
from biblioteca.dates import is_valid_date
from biblioteca.loans import (
    LoanError,
    active_loans,
    format_active_loans,
    lend_book,
    return_book,
)
from biblioteca.storage import Book, LibraryFile, User
from biblioteca.users import add_user

USER_CODE = 10
BOOK_CODE = 1
COPIES = 2
TITLE = "Dom Casmurro"
NAME = "Maria"


@pytest.fixture
def db(tmp_path):
    with LibraryFile(tmp_path / "lib.dat") as library:
        add_book(library, Book(BOOK_CODE, TITLE, "Machado", "Garnier", 1, 1899, COPIES))
        add_user(library, User(USER_CODE, NAME))
        yield library


def copies(db):
    return find_book_by_code(db, BOOK_CODE).copies


def test_lend_takes_a_copy_and_records_loan(db):
    loan = lend_book(db, USER_CODE, BOOK_CODE, "01/02/2024", "")
    assert loan.user_code == USER_CODE
    assert loan.book_code == BOOK_CODE
    assert loan.loan_date == "01/02/2024"
    assert loan.active
    assert copies(db) == COPIES - 1
    assert db.read_header().total_loans == 1
    assert active_loans(db) == [loan]


def test_lend_without_date_uses_today(db):
    loan = lend_book(db, USER_CODE, BOOK_CODE)
    assert is_valid_date(loan.loan_date)


def test_lend_with_return_date_keeps_copies(db):
    loan = lend_book(db, USER_CODE, BOOK_CODE, "01/02/2024", "05/02/2024")
    assert not loan.active
    assert copies(db) == COPIES
    assert active_loans(db) == []


def test_active_loans_most_recent_first(db):
    first = lend_book(db, USER_CODE, BOOK_CODE, "01/02/2024", "")
    second = lend_book(db, USER_CODE, BOOK_CODE, "02/02/2024", "")
    assert active_loans(db) == [second, first]


def test_lend_unknown_user(db):
    with pytest.raises(LoanError):
        lend_book(db, USER_CODE + 1, BOOK_CODE, "01/02/2024", "")


def test_lend_unknown_book(db):
    with pytest.raises(LoanError):
        lend_book(db, USER_CODE, BOOK_CODE + 1, "01/02/2024", "")


def test_lend_without_copies(db):
    for _ in range(COPIES):
        lend_book(db, USER_CODE, BOOK_CODE, "01/02/2024", "")
    with pytest.raises(LoanError):
        lend_book(db, USER_CODE, BOOK_CODE, "01/02/2024", "")
    assert copies(db) == 0


@pytest.mark.parametrize(
    "loan_date, return_date",
    [("31/02/2024", ""), ("01/02/2024", "99/99/9999"), ("10/02/2024", "01/02/2024")],
)
def test_lend_rejects_bad_dates(db, loan_date, return_date):
    with pytest.raises(LoanError):
        lend_book(db, USER_CODE, BOOK_CODE, loan_date, return_date)
    assert db.read_header().total_loans == 0
    assert copies(db) == COPIES


def test_return_restores_copy(db):
    lend_book(db, USER_CODE, BOOK_CODE, "01/02/2024", "")
    returned = return_book(db, USER_CODE, BOOK_CODE, "03/02/2024")
    assert returned.return_date == "03/02/2024"
    assert not returned.active
    assert copies(db) == COPIES
    assert active_loans(db) == []


def test_return_defaults_to_today(db):
    lend_book(db, USER_CODE, BOOK_CODE, "01/02/2024", "")
    returned = return_book(db, USER_CODE, BOOK_CODE)
    assert is_valid_date(returned.return_date)


def test_return_twice_fails(db):
    lend_book(db, USER_CODE, BOOK_CODE, "01/02/2024", "")
    return_book(db, USER_CODE, BOOK_CODE, "03/02/2024")
    with pytest.raises(LoanError):
        return_book(db, USER_CODE, BOOK_CODE, "04/02/2024")
    assert copies(db) == COPIES


def test_return_without_loan_fails(db):
    with pytest.raises(LoanError):
        return_book(db, USER_CODE, BOOK_CODE, "03/02/2024")


def test_format_active_loans_lists_names_and_titles(db):
    lend_book(db, USER_CODE, BOOK_CODE, "01/02/2024", "")
    text = format_active_loans(db)
    assert NAME in text
    assert TITLE in text
    assert "01/02/2024" in text
    assert "Nenhum empréstimo ativo." not in text


def test_format_active_loans_empty(db):
    assert "Nenhum empréstimo ativo." in format_active_loans(db)