"""Library management: books, users and loans kept in one binary data file."""

__version__ = "0.1.0"
__all__ = ["__version__"]