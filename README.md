# biblioteca

A small library management system. Books, users and loans are kept in a
single binary data file, `biblioteca.dat` in the current directory by
default, which is created with an empty header on first use.

## Installing

```
pip install .
```

## Interactive use

```
biblioteca
biblioteca --file outro.dat
```

`--file` chooses the data file (default `biblioteca.dat`). The command opens
a numbered menu, with prompts in Portuguese:

- `1` register a book, `2` show a book by code, `3` list all books,
  `4` search a book by title (ASCII letters compared without case),
  `5` show the number of titles and the total of copies;
- `6` register a user;
- `7` lend a book (dated today), `8` return a book (dated today),
  `9` list active loans with user names and book titles;
- `10` bulk import from a text file.

Option `11`, not shown in the menu, prints the file header (list heads,
next free positions and counters). Choose `0`, or end the input, to leave.
A non-numeric answer where a number is expected cancels the current action.

## Bulk import format

A text file is read line by line; blank lines are skipped and lines with an
unknown prefix are reported and ignored. Fields are separated by `;`, empty
fields are dropped, and leading and trailing blanks are stripped.

```
L;1;Dom Casmurro;Machado de Assis;Garnier;1;1899;3
U;10;Maria Silva
E;10;1;05/03/2024;
E;10;1;01/02/2024;15/02/2024
```

- `L` — book: code; title; author; publisher; edition; year; copies
- `U` — user: code; name
- `E` — loan: user code; book code; loan date; return date (optional)

Dates are `DD/MM/YYYY`, with years from 1900 to 2100. A loan with no return
date is active and takes one copy of the book; the return date may not
precede the loan date. Users and books must already exist when a loan line
is read; imported loans do not check that a copy is available. A line that
fails is reported and the import goes on; at the end a summary gives how
many books, users and loans were loaded.

## Using it from Python

```python
from biblioteca.storage import LibraryFile, Book, User
from biblioteca.books import add_book, find_book_by_title, count_books
from biblioteca.users import add_user
from biblioteca.loans import lend_book, return_book, active_loans
from biblioteca.loader import load_file

with LibraryFile("biblioteca.dat") as db:
    add_book(db, Book(1, "Dom Casmurro", "Machado de Assis", "Garnier", 1, 1899, 3))
    add_user(db, User(10, "Maria Silva"))
    lend_book(db, 10, 1, "05/03/2024")      # empty loan date means today
    return_book(db, 10, 1, "12/03/2024")    # return date defaults to today

    summary = load_file(db, "dados.txt")
    print(summary)
    for message in summary.messages:
        print(message)

    book = find_book_by_title(db, "dom casmurro")
    titles, copies = count_books(db)
    for loan in active_loans(db):
        print(loan)
```

Lists are returned most recently registered first. `biblioteca.users` also
has `list_users` and `format_user_list`; `biblioteca.dates` has
`is_valid_date`, `compare_dates`, `valid_interval` and `today`.

Failures are raised as exceptions derived from
`biblioteca.storage.LibraryError`: `StorageError` when the data file cannot
be opened, read or written, `biblioteca.books.DuplicateCodeError` for a
repeated book or user code, and `biblioteca.loans.LoanError` for unknown
users or books, invalid dates or no copies available.

## Limits

- Records are never edited or deleted, apart from the copy count of a book
  and the return date of a loan.
- Text fields are cut to fixed sizes in the file: title 150 bytes, author
  200, publisher 50, user name 50 (UTF-8).
- The file reserves 1,000,000 bytes for books and 100,000 for users, with
  loans after them; these areas are not checked for overflow.
- The menu has no entry for listing users; use `format_user_list` from
  Python.

## Running the tests

```
pip install .[test]
pytest
```