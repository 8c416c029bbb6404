"""CRUD package: the record store every service reads and writes through."""

from . import record

__all__ = ["record"]
