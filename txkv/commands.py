"""Command model and line parser for the interactive shell.

Every input line maps to exactly one variant of the :data:`Command` union.
Parsing never fails: missing trailing arguments default to ``""`` and an
unrecognised command name produces :class:`Unknown`, which the caller reports
as invalid input.

Grammar (keywords are case-insensitive, arguments whitespace separated)::

    SET <key> <value>
    GET <key>
    DELETE <key>
    COUNT <value>
    BEGIN
    COMMIT
    ROLLBACK
    QUIT
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

__all__ = [
    "Set",
    "Get",
    "Delete",
    "Count",
    "Begin",
    "Commit",
    "Rollback",
    "Unknown",
    "Command",
    "tokenize",
    "parse_line",
    "is_exit",
]

_EXIT_COMMAND = "QUIT"
_EMPTY = ""


@dataclass(frozen=True)
class Set:
    """Store `value` for `key`."""
    key: str
    value: str


@dataclass(frozen=True)
class Get:
    """Look up the current value for `key`."""
    key: str


@dataclass(frozen=True)
class Delete:
    """Remove the entry for `key`."""
    key: str


@dataclass(frozen=True)
class Count:
    """Count the keys currently mapped to `value`."""
    value: str


@dataclass(frozen=True)
class Begin:
    """Open a (possibly nested) transaction."""


@dataclass(frozen=True)
class Commit:
    """Complete the innermost transaction."""


@dataclass(frozen=True)
class Rollback:
    """Revert to the state prior to the matching BEGIN."""


@dataclass(frozen=True)
class Unknown:
    """Unrecognised input; `name` keeps the offending keyword."""
    name: str = _EMPTY


Command = Union[Set, Get, Delete, Count, Begin, Commit, Rollback, Unknown]


def tokenize(line: str) -> list[str]:
    """Split on runs of whitespace, dropping empty tokens."""
    return line.split()


def _arg(args: list[str], idx: int) -> str:
    return args[idx] if len(args) > idx else _EMPTY


def parse_line(line: str) -> Command:
    """Map one line of text to a :data:`Command`."""
    tokens = tokenize(line)
    if not tokens:
        return Unknown()
    name, args = tokens[0].upper(), tokens[1:]
    match name:
        case "SET":
            return Set(_arg(args, 0), _arg(args, 1))
        case "GET":
            return Get(_arg(args, 0))
        case "DELETE":
            return Delete(_arg(args, 0))
        case "COUNT":
            return Count(_arg(args, 0))
        case "BEGIN":
            return Begin()
        case "COMMIT":
            return Commit()
        case "ROLLBACK":
            return Rollback()
        case _:
            return Unknown(tokens[0])


def is_exit(line: str) -> bool:
    """True when `line` is the session-terminating QUIT token."""
    return line.strip().upper() == _EXIT_COMMAND
