"""Binary library file: header, fixed-size records and linked lists of them."""

from __future__ import annotations

import os
import struct
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import BinaryIO, TypeVar

BOOKS_AREA = 1_000_000
USERS_AREA = 100_000

_HEADER = struct.Struct("<9i")
_BOOK = struct.Struct("<i151s201s51sx4i")
_USER = struct.Struct("<i51sxi")
_LOAN = struct.Struct("<ii11s11s2xi")

HEADER_SIZE = _HEADER.size
BOOK_SIZE = _BOOK.size
USER_SIZE = _USER.size
LOAN_SIZE = _LOAN.size

TITLE_SIZE = 151
AUTHOR_SIZE = 201
PUBLISHER_SIZE = 51
NAME_SIZE = 51
DATE_SIZE = 11

_R = TypeVar("_R")


class LibraryError(Exception):
    """Base error for library operations."""


class StorageError(LibraryError):
    """The library file could not be opened, read or written."""


def _encode(text: str, size: int) -> bytes:
    """Encode text into a fixed field, leaving room for the terminator."""
    raw = text.encode("utf-8")[: size - 1]
    return raw.decode("utf-8", errors="ignore").encode("utf-8")


def _decode(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


@dataclass
class Header:
    """List heads, next free positions and record counters."""

    books_head: int = -1
    books_top: int = HEADER_SIZE
    users_head: int = -1
    users_top: int = HEADER_SIZE + BOOKS_AREA
    loans_head: int = -1
    loans_top: int = HEADER_SIZE + BOOKS_AREA + USERS_AREA
    total_books: int = 0
    total_users: int = 0
    total_loans: int = 0


@dataclass(frozen=True)
class Book:
    code: int
    title: str
    author: str
    publisher: str
    edition: int
    year: int
    copies: int
    next_pos: int = -1


@dataclass(frozen=True)
class User:
    code: int
    name: str
    next_pos: int = -1


@dataclass(frozen=True)
class Loan:
    user_code: int
    book_code: int
    loan_date: str
    return_date: str = ""
    next_pos: int = -1

    @property
    def active(self) -> bool:
        return not self.return_date


class LibraryFile:
    """An open library file, created with an empty header when missing."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = os.fspath(path)
        try:
            self._file: BinaryIO = open(self.path, "r+b")
        except FileNotFoundError:
            try:
                self._file = open(self.path, "w+b")
            except OSError as exc:
                raise StorageError(f"Erro ao criar/abrir arquivo: {exc}") from exc
            self.write_header(Header())
        except OSError as exc:
            raise StorageError(f"Erro ao criar/abrir arquivo: {exc}") from exc

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> LibraryFile:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _read(self, pos: int, size: int, what: str) -> bytes:
        self._file.seek(pos)
        data = self._file.read(size)
        if len(data) != size:
            raise StorageError(f"Erro de leitura: {what} na posição {pos}")
        return data

    def _write(self, pos: int, data: bytes) -> None:
        try:
            self._file.seek(pos)
            self._file.write(data)
            self._file.flush()
        except OSError as exc:
            raise StorageError(f"Erro de escrita na posição {pos}: {exc}") from exc

    def read_header(self) -> Header:
        return Header(*_HEADER.unpack(self._read(0, HEADER_SIZE, "cabeçalho")))

    def write_header(self, header: Header) -> None:
        self._write(
            0,
            _HEADER.pack(
                header.books_head,
                header.books_top,
                header.users_head,
                header.users_top,
                header.loans_head,
                header.loans_top,
                header.total_books,
                header.total_users,
                header.total_loans,
            ),
        )

    def read_book(self, pos: int) -> Book:
        code, title, author, publisher, edition, year, copies, next_pos = _BOOK.unpack(
            self._read(pos, BOOK_SIZE, "livro")
        )
        return Book(
            code,
            _decode(title),
            _decode(author),
            _decode(publisher),
            edition,
            year,
            copies,
            next_pos,
        )

    def write_book(self, pos: int, book: Book) -> None:
        self._write(
            pos,
            _BOOK.pack(
                book.code,
                _encode(book.title, TITLE_SIZE),
                _encode(book.author, AUTHOR_SIZE),
                _encode(book.publisher, PUBLISHER_SIZE),
                book.edition,
                book.year,
                book.copies,
                book.next_pos,
            ),
        )

    def read_user(self, pos: int) -> User:
        code, name, next_pos = _USER.unpack(self._read(pos, USER_SIZE, "usuário"))
        return User(code, _decode(name), next_pos)

    def write_user(self, pos: int, user: User) -> None:
        self._write(
            pos, _USER.pack(user.code, _encode(user.name, NAME_SIZE), user.next_pos)
        )

    def read_loan(self, pos: int) -> Loan:
        user_code, book_code, loan_date, return_date, next_pos = _LOAN.unpack(
            self._read(pos, LOAN_SIZE, "empréstimo")
        )
        return Loan(user_code, book_code, _decode(loan_date), _decode(return_date), next_pos)

    def write_loan(self, pos: int, loan: Loan) -> None:
        self._write(
            pos,
            _LOAN.pack(
                loan.user_code,
                loan.book_code,
                _encode(loan.loan_date, DATE_SIZE),
                _encode(loan.return_date, DATE_SIZE),
                loan.next_pos,
            ),
        )

    def _walk(self, head: int, reader: Callable[[int], _R]) -> Iterator[tuple[int, _R]]:
        pos = head
        while pos != -1:
            record = reader(pos)
            yield pos, record
            pos = record.next_pos  # type: ignore[attr-defined]

    def iter_books(self) -> Iterator[tuple[int, Book]]:
        """Yield (position, book) pairs from the head of the book list."""
        return self._walk(self.read_header().books_head, self.read_book)

    def iter_users(self) -> Iterator[tuple[int, User]]:
        """Yield (position, user) pairs from the head of the user list."""
        return self._walk(self.read_header().users_head, self.read_user)

    def iter_loans(self) -> Iterator[tuple[int, Loan]]:
        """Yield (position, loan) pairs from the head of the loan list."""
        return self._walk(self.read_header().loans_head, self.read_loan)


def format_header(header: Header) -> str:
    """Describe the header for diagnostics."""
    return (
        "\n=== INFORMAÇÕES DO ARQUIVO ===\n"
        f"Total de livros: {header.total_books}\n"
        f"Total de usuários: {header.total_users}\n"
        f"Total de empréstimos: {header.total_loans}\n"
        f"Primeira posição de livros: {header.books_head}\n"
        f"Próxima posição livre (livros): {header.books_top}\n"
        f"Primeira posição de usuários: {header.users_head}\n"
        f"Próxima posição livre (usuários): {header.users_top}\n"
        f"Primeira posição de empréstimos: {header.loans_head}\n"
        f"Próxima posição livre (emprestimos): {header.loans_top}\n"
        "==============================\n\n"
    )