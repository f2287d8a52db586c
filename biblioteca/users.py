"""User records: registration and lookup."""

from __future__ import annotations

from dataclasses import replace

from biblioteca.books import DuplicateCodeError
from biblioteca.storage import USER_SIZE, LibraryFile, User


def add_user(db: LibraryFile, user: User) -> User:
    """Store a new user at the head of the list and return it as stored."""
    header = db.read_header()
    if any(existing.code == user.code for _, existing in db.iter_users()):
        raise DuplicateCodeError(f"Usuário com código {user.code} já existe.")
    pos = header.users_top
    db.write_user(pos, replace(user, next_pos=header.users_head))
    header.users_head = pos
    header.users_top += USER_SIZE
    header.total_users += 1
    db.write_header(header)
    return db.read_user(pos)


def user_exists(db: LibraryFile, code: int) -> bool:
    return any(user.code == code for _, user in db.iter_users())


def user_name(db: LibraryFile, code: int) -> str | None:
    """The user's name, or None when no user has this code."""
    return next((user.name for _, user in db.iter_users() if user.code == code), None)


def list_users(db: LibraryFile) -> list[User]:
    """All users, most recently registered first."""
    return [user for _, user in db.iter_users()]


def format_user_list(db: LibraryFile) -> str:
    if db.read_header().total_users == 0:
        return "Nenhum usuário cadastrado.\n"
    lines = [f"Código: {user.code} | Nome: {user.name}\n" for user in list_users(db)]
    return "\n=== LISTA DE USUÁRIOS ===\n" + "".join(lines) + "========================\n\n"