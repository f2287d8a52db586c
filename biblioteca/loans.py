"""Loans: lending, returning and listing borrowed books."""

from __future__ import annotations

from dataclasses import replace

from biblioteca.books import adjust_copies, book_title, find_book_by_code
from biblioteca.dates import is_valid_date, today, valid_interval
from biblioteca.storage import LOAN_SIZE, LibraryError, LibraryFile, Loan
from biblioteca.users import user_exists, user_name

_RULE = "-" * 80
_ROW = "{:<8} {:<20} {:<8} {:<30} {:<12}\n"


class LoanError(LibraryError):
    """A loan could not be registered or returned."""


def _append_loan(db: LibraryFile, loan: Loan) -> Loan:
    """Write a loan at the head of the loan list and return it as stored."""
    header = db.read_header()
    pos = header.loans_top
    db.write_loan(pos, replace(loan, next_pos=header.loans_head))
    header.loans_head = pos
    header.loans_top += LOAN_SIZE
    header.total_loans += 1
    db.write_header(header)
    return db.read_loan(pos)


def lend_book(
    db: LibraryFile,
    user_code: int,
    book_code: int,
    loan_date: str = "",
    return_date: str = "",
) -> Loan:
    """Register a loan; an empty loan date means today.

    A loan without a return date is active and takes one copy of the book.
    """
    if not user_exists(db, user_code):
        raise LoanError(f"Erro: usuário {user_code} não encontrado.")
    book = find_book_by_code(db, book_code)
    if book is None:
        raise LoanError(f"Erro: livro {book_code} não encontrado.")
    if book.copies <= 0:
        raise LoanError("Não há exemplares disponíveis.")

    if not loan_date:
        loan_date = today()
    elif not is_valid_date(loan_date):
        raise LoanError("Data de empréstimo inválida.")

    if return_date and not is_valid_date(return_date):
        raise LoanError("Data de devolução inválida.")
    if return_date and not valid_interval(loan_date, return_date):
        raise LoanError(
            f"Erro: Empréstimo ({loan_date}) posterior à devolução ({return_date})"
        )

    stored = _append_loan(db, Loan(user_code, book_code, loan_date, return_date))
    if stored.active:
        adjust_copies(db, book_code, -1)
    return stored


def return_book(
    db: LibraryFile, user_code: int, book_code: int, return_date: str | None = None
) -> Loan:
    """Close the most recent active loan of this book to this user.

    The return date defaults to today; the book gets one copy back.
    """
    if return_date is None:
        return_date = today()
    elif not is_valid_date(return_date):
        raise LoanError("Data de devolução inválida.")
    for pos, loan in db.iter_loans():
        if loan.user_code == user_code and loan.book_code == book_code and loan.active:
            updated = replace(loan, return_date=return_date)
            db.write_loan(pos, updated)
            break
    else:
        raise LoanError("Erro: empréstimo não encontrado ou já devolvido.")
    adjust_copies(db, book_code, 1)
    return updated


def active_loans(db: LibraryFile) -> list[Loan]:
    """Loans not yet returned, most recent first."""
    return [loan for _, loan in db.iter_loans() if loan.active]


def format_active_loans(db: LibraryFile) -> str:
    """A table of active loans with user names and book titles."""
    parts = [
        "\n=== EMPRÉSTIMOS ATIVOS ===\n",
        _ROW.format("Cód.U", "Usuário", "Cód.L", "Título", "Empréstimo"),
        _RULE + "\n",
    ]
    loans = active_loans(db)
    for loan in loans:
        name = user_name(db, loan.user_code)
        title = book_title(db, loan.book_code)
        parts.append(
            _ROW.format(
                loan.user_code,
                name if name is not None else "<Usuário não encontrado>",
                loan.book_code,
                title if title is not None else "",
                loan.loan_date,
            )
        )
    if not loans:
        parts.append("Nenhum empréstimo ativo.\n")
    parts.append(_RULE + "\n")
    return "".join(parts)