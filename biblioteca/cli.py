"""Interactive menu for the library system."""

from __future__ import annotations

import argparse
from collections.abc import Callable

from biblioteca.books import (
    DuplicateCodeError,
    add_book,
    count_books,
    find_book_by_code,
    find_book_by_title,
    format_book,
    format_book_list,
)
from biblioteca.loader import load_file
from biblioteca.loans import format_active_loans, lend_book, return_book
from biblioteca.storage import (
    Book,
    LibraryError,
    LibraryFile,
    StorageError,
    User,
    format_header,
)
from biblioteca.users import add_user

DEFAULT_FILE = "biblioteca.dat"


def menu_text() -> str:
    """The main menu, ending with the option prompt."""
    return (
        "\n=== SISTEMA DE BIBLIOTECA ===\n\n"
        "Gerenciamento de Livros:\n\n"
        "1. Cadastrar livro\n"
        "2. Imprimir dados do livro\n"
        "3. Listar todos os livros\n"
        "4. Buscar livro por título\n"
        "5. Calcular total de livros\n\n"
        "Gerenciamento de Usuários:\n\n"
        "6. Cadastrar usuário\n\n"
        "Sistema de Empréstimos:\n\n"
        "7. Emprestar livro\n"
        "8. Devolver livro\n"
        "9. Listar livros emprestados\n\n"
        "Importação em Lote:\n\n"
        "10. Carregar arquivo texto\n"
        "\n0. Sair\n\n"
        "Escolha uma opção: "
    )


def _ask(prompt: str) -> str:
    return input(prompt)


def _ask_int(prompt: str) -> int:
    return int(_ask(prompt).strip())


def _register_book(db: LibraryFile) -> None:
    print("\n--- CADASTRAR LIVRO ---")
    code = _ask_int("Código: ")
    title = _ask("Título: ")
    author = _ask("Autor: ")
    publisher = _ask("Editora: ")
    edition = _ask_int("Edição: ")
    year = _ask_int("Ano: ")
    copies = _ask_int("Exemplares: ")
    try:
        add_book(db, Book(code, title, author, publisher, edition, year, copies))
    except DuplicateCodeError as exc:
        print(f"Erro: {exc}")
        return
    print("Livro cadastrado com sucesso!")


def _show_book(db: LibraryFile) -> None:
    print("\n--- IMPRIMIR DADOS DO LIVRO ---")
    code = _ask_int("Digite o código do livro: ")
    book = find_book_by_code(db, code)
    if book is None:
        print(f"Livro com código {code} não encontrado.")
    else:
        print(format_book(book), end="")


def _list_books(db: LibraryFile) -> None:
    print("\n--- LISTAR TODOS OS LIVROS ---")
    print(format_book_list(db), end="")


def _search_title(db: LibraryFile) -> None:
    print("\n--- BUSCAR LIVRO POR TÍTULO ---")
    title = _ask("Digite o título do livro: ")
    book = find_book_by_title(db, title)
    if book is None:
        print(f'Livro com título "{title}" não encontrado.')
    else:
        print(format_book(book), end="")


def _totals(db: LibraryFile) -> None:
    print("\n--- TOTAL DE LIVROS CADASTRADOS ---")
    books, copies = count_books(db)
    print(f"Total de livros cadastrados: {books}")
    print(f"Total de exemplares na biblioteca: {copies}")


def _register_user(db: LibraryFile) -> None:
    print("\n--- CADASTRAR USUÁRIO ---")
    code = _ask_int("Código: ")
    name = _ask("Nome: ")
    try:
        add_user(db, User(code, name))
    except DuplicateCodeError as exc:
        print(f"Erro: {exc}")
        return
    print("Usuário cadastrado com sucesso!")


def _lend(db: LibraryFile) -> None:
    print("\n--- EMPRESTAR LIVRO ---")
    user_code = _ask_int("Código do usuário: ")
    book_code = _ask_int("Código do livro: ")
    loan = lend_book(db, user_code, book_code, "", "")
    print(f"Empréstimo realizado em {loan.loan_date}.")


def _return(db: LibraryFile) -> None:
    print("\n--- DEVOLVER LIVRO ---")
    user_code = _ask_int("Código do usuário: ")
    book_code = _ask_int("Código do livro: ")
    loan = return_book(db, user_code, book_code)
    print(f"Devolução registrada em {loan.return_date}.")


def _list_loans(db: LibraryFile) -> None:
    print("\n--- TOTAL DE LIVROS EMPRESTADOS ---")
    print(format_active_loans(db), end="")


def _load(db: LibraryFile) -> None:
    print("\n--- CARREGAR ARQUIVO ---")
    path = _ask("Digite o nome do arquivo texto a ser carregado: ")
    print(f"Carregando dados do arquivo {path}...")
    summary = load_file(db, path)
    for message in summary.messages:
        print(message)
    print(summary, end="")


def _show_header(db: LibraryFile) -> None:
    print("\n--- MOSTRAR DADOS DO ARQUIVO BINÁRIO ---")
    print(format_header(db.read_header()), end="")


_ACTIONS: dict[int, Callable[[LibraryFile], None]] = {
    1: _register_book,
    2: _show_book,
    3: _list_books,
    4: _search_title,
    5: _totals,
    6: _register_user,
    7: _lend,
    8: _return,
    9: _list_loans,
    10: _load,
    11: _show_header,
}


def _read_option() -> int:
    try:
        return int(_ask(menu_text()).strip())
    except ValueError:
        return -1


def _run(db: LibraryFile) -> None:
    while True:
        try:
            option = _read_option()
        except EOFError:
            print()
            return
        if option == 0:
            print("Saindo do sistema...")
            return
        action = _ACTIONS.get(option)
        if action is None:
            print("Opção inválida!")
            continue
        try:
            action(db)
        except EOFError:
            print()
            return
        except ValueError:
            print("Entrada inválida.")
        except LibraryError as exc:
            print(exc)


def main(argv: list[str] | None = None) -> int:
    """Run the interactive menu over the library file; return the exit status."""
    parser = argparse.ArgumentParser(description="Sistema de biblioteca")
    parser.add_argument(
        "--file", default=DEFAULT_FILE, help="arquivo binário da biblioteca"
    )
    args = parser.parse_args(argv)
    try:
        db = LibraryFile(args.file)
    except StorageError:
        print("Erro ao abrir arquivo da biblioteca!")
        return 1
    with db:
        _run(db)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())