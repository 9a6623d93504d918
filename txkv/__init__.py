"""txkv: an in-memory key-value store with nested transactions.

The package exposes the transactional mapping via `txkv.TransactionalStore`
and a line-oriented shell on top of it via `txkv.Application`
(``python -m txkv``).
"""

from __future__ import annotations

__all__ = [
    "Application",
    "InvalidCommandError",
    "TransactionalStore",
    "parse_line",
]

from .app import Application, InvalidCommandError
from .commands import parse_line
from .store import TransactionalStore
