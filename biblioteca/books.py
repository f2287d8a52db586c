"""Book records: registration, lookup and copy counts."""

from __future__ import annotations

from dataclasses import replace

from biblioteca.storage import BOOK_SIZE, Book, LibraryError, LibraryFile

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


class DuplicateCodeError(LibraryError):
    """A record with the same code is already registered."""


def titles_equal(a: str, b: str) -> bool:
    """Compare two strings ignoring ASCII letter case."""
    return a.translate(_ASCII_LOWER) == b.translate(_ASCII_LOWER)


def add_book(db: LibraryFile, book: Book) -> Book:
    """Store a new book at the head of the list and return it as stored."""
    header = db.read_header()
    if any(existing.code == book.code for _, existing in db.iter_books()):
        raise DuplicateCodeError(f"Livro com código {book.code} já existe.")
    pos = header.books_top
    db.write_book(pos, replace(book, next_pos=header.books_head))
    header.books_head = pos
    header.books_top += BOOK_SIZE
    header.total_books += 1
    db.write_header(header)
    return db.read_book(pos)


def find_book_by_code(db: LibraryFile, code: int) -> Book | None:
    return next((book for _, book in db.iter_books() if book.code == code), None)


def find_book_by_title(db: LibraryFile, title: str) -> Book | None:
    return next(
        (book for _, book in db.iter_books() if titles_equal(book.title, title)), None
    )


def count_books(db: LibraryFile) -> tuple[int, int]:
    """Return the number of registered books and the sum of their copies."""
    total = db.read_header().total_books
    copies = sum(book.copies for _, book in db.iter_books())
    return total, copies


def format_book(book: Book) -> str:
    return (
        "\n--- DADOS DO LIVRO ---\n"
        f"Código: {book.code}\n"
        f"Título: {book.title}\n"
        f"Autor: {book.author}\n"
        f"Editora: {book.publisher}\n"
        f"Edição: {book.edition}\n"
        f"Ano: {book.year}\n"
        f"Exemplares: {book.copies}\n"
        "----------------------\n\n"
    )


def list_books(db: LibraryFile) -> list[Book]:
    """All books, most recently registered first."""
    return [book for _, book in db.iter_books()]


def format_book_list(db: LibraryFile) -> str:
    if db.read_header().total_books == 0:
        return "Nenhum livro cadastrado.\n"
    lines = [
        f"Código: {book.code} | Título: {book.title} | Autor: {book.author} "
        f"| Exemplares: {book.copies}\n"
        for book in list_books(db)
    ]
    return (
        "\n=== LISTA DE TODOS OS LIVROS ===\n"
        + "".join(lines)
        + "===============================\n\n"
    )


def available_copies(db: LibraryFile, code: int) -> int | None:
    """Copies available for a book, or None when the book is unknown."""
    book = find_book_by_code(db, code)
    return None if book is None else book.copies


def adjust_copies(db: LibraryFile, code: int, delta: int) -> Book:
    """Add delta to a book's copies and return the updated book."""
    for pos, book in db.iter_books():
        if book.code == code:
            updated = replace(book, copies=book.copies + delta)
            db.write_book(pos, updated)
            return updated
    raise LibraryError(f"Livro {code} não existe")


def book_title(db: LibraryFile, code: int) -> str | None:
    book = find_book_by_code(db, code)
    return None if book is None else book.title