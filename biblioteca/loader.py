"""Batch import of books, users and loans from a semicolon-separated text file."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field

from biblioteca.books import add_book, adjust_copies, find_book_by_code
from biblioteca.dates import _atoi, is_valid_date, valid_interval
from biblioteca.loans import LoanError, _append_loan
from biblioteca.storage import Book, LibraryError, LibraryFile, Loan, User
from biblioteca.users import add_user, user_exists

_DATE_LENGTH = 10


@dataclass
class LoadSummary:
    """Counts of records loaded and messages about lines that were not."""

    books: int = 0
    users: int = 0
    loans: int = 0
    messages: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return (
            "\n=== RESUMO DO CARREGAMENTO ===\n"
            f"Livros: {self.books} | Usuários: {self.users} | Empréstimos: {self.loans}\n"
            "==============================\n\n"
        )


def strip_field(text: str) -> str:
    """Remove leading blanks and tabs, and trailing blanks, tabs and line ends."""
    return text.lstrip(" \t").rstrip(" \t\n\r")


def _fields(line: str, count: int, kind: str) -> list[str]:
    """Non-empty fields after the record tag, stripped; at least count of them."""
    tokens = [token for token in line.split(";") if token][1:]
    if len(tokens) < count:
        raise ValueError(f"linha de {kind} incompleta")
    return [strip_field(token) for token in tokens]


def parse_book_line(line: str) -> Book:
    """Read 'L;code;title;author;publisher;edition;year;copies'."""
    code, title, author, publisher, edition, year, copies = _fields(line, 7, "livro")[:7]
    return Book(
        _atoi(code), title, author, publisher, _atoi(edition), _atoi(year), _atoi(copies)
    )


def parse_user_line(line: str) -> User:
    """Read 'U;code;name'."""
    code, name = _fields(line, 2, "usuário")[:2]
    return User(_atoi(code), name)


def load_book_line(db: LibraryFile, line: str) -> Book:
    return add_book(db, parse_book_line(line))


def load_user_line(db: LibraryFile, line: str) -> User:
    return add_user(db, parse_user_line(line))


def load_loan_line(db: LibraryFile, line: str) -> Loan:
    """Register 'E;user;book;loan_date[;return_date]' without checking copies."""
    fields = _fields(line, 3, "empréstimo")
    user_code = _atoi(fields[0])
    book_code = _atoi(fields[1])
    loan_date = fields[2][:_DATE_LENGTH]
    return_date = fields[3][:_DATE_LENGTH] if len(fields) > 3 else ""

    if not is_valid_date(loan_date):
        raise LoanError(f"Erro: Data de empréstimo inválida: {loan_date}")
    if return_date and not is_valid_date(return_date):
        raise LoanError(f"Erro: Data de devolução inválida: {return_date}")
    if not valid_interval(loan_date, return_date):
        raise LoanError(
            f"Erro: Data de empréstimo ({loan_date}) posterior à devolução "
            f"({return_date or '<vazia>'})"
        )
    if not user_exists(db, user_code):
        raise LoanError(f"Erro: Usuário {user_code} não existe")
    if find_book_by_code(db, book_code) is None:
        raise LoanError(f"Erro: Livro {book_code} não existe")

    stored = _append_loan(db, Loan(user_code, book_code, loan_date, return_date))
    if stored.active:
        adjust_copies(db, book_code, -1)
    return stored


def _attempt(
    action: Callable[[LibraryFile, str], object],
    db: LibraryFile,
    line: str,
    label: str,
    summary: LoadSummary,
) -> int:
    try:
        action(db, line)
    except (LibraryError, ValueError) as exc:
        summary.messages.append(f"Falha ao processar {label}: {line} ({exc})")
        return 0
    return 1


def load_file(db: LibraryFile, path: str | os.PathLike[str]) -> LoadSummary:
    """Load every record line of a text file; bad lines are reported, not fatal."""
    try:
        handle = open(path, encoding="utf-8", errors="replace")
    except OSError as exc:
        raise LibraryError(f"Erro ao abrir arquivo: {os.fspath(path)}") from exc

    summary = LoadSummary()
    with handle:
        for raw in handle:
            line = raw.split("\n", 1)[0]
            if not line:
                continue
            if line.startswith("L;"):
                summary.books += _attempt(load_book_line, db, line, "livro", summary)
            elif line.startswith("U;"):
                summary.users += _attempt(load_user_line, db, line, "usuário", summary)
            elif line.startswith("E;"):
                summary.loans += _attempt(load_loan_line, db, line, "empréstimo", summary)
            else:
                summary.messages.append(f"Linha inválida ignorada: {line}")
    return summary