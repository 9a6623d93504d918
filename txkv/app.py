"""Interactive shell tying the command parser to a :class:`TransactionalStore`.

One command is read per line; Get/Count and failed Commit/Rollback produce a
single response line, every other command is silent. The session ends on
``QUIT`` (any case) or at end of input.
"""
from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterable
from typing import Optional, TextIO

from .commands import (
    Begin,
    Command,
    Commit,
    Count,
    Delete,
    Get,
    Rollback,
    Set,
    Unknown,
    is_exit,
    parse_line,
)
from .store import TransactionalStore

__all__ = ["Application", "InvalidCommandError", "Lifecycle"]

logger = logging.getLogger(__name__)

_START_INFO = "Start Transactional Key Value Store"
_EXIT_INFO = "Exit Program"
_INVALID_INPUT = "invalid input!"
_KEY_NOT_SET = "key not set"
_NO_TRANSACTION = "no transaction"


class InvalidCommandError(ValueError):
    """Raised when a line does not name a known command."""


class Lifecycle:
    """Start/exit hooks of a long-running application."""

    def on_start(self) -> None:
        raise NotImplementedError

    def on_exit(self) -> None:
        raise NotImplementedError


class Application(Lifecycle):
    """Line-oriented front end for a string-to-string transactional store.

    Parameters
    ----------
    store: TransactionalStore | None
        Store to operate on; a fresh one is created when omitted.
    output: Callable[[str], None]
        Sink for response lines and banners (``print`` by default).
    """

    def __init__(
        self,
        store: Optional[TransactionalStore[str, str]] = None,
        output: Callable[[str], None] = print,
    ) -> None:
        self.store: TransactionalStore[str, str] = (
            store if store is not None else TransactionalStore()
        )
        self._output = output

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def on_start(self) -> None:
        self._output(_START_INFO)

    def on_exit(self) -> None:
        self._output(_EXIT_INFO)

    def start(self, stream: Optional[TextIO] = None) -> None:
        """Run a session reading commands from `stream` (stdin by default)."""
        if stream is None:
            stream = sys.stdin
        self.run(line.rstrip("\r\n") for line in stream)

    def run(self, lines: Iterable[str]) -> None:
        self.on_start()
        try:
            for line in lines:
                if not self.handle_line(line):
                    break
        finally:
            self.on_exit()

    # ------------------------------------------------------------------
    # Command handling
    # ------------------------------------------------------------------
    def handle_line(self, line: str) -> bool:
        """Process one input line. Returns ``False`` once the session should end."""
        if is_exit(line):
            return False
        command = parse_line(line)
        try:
            response = self.execute(command)
        except InvalidCommandError:
            logger.info("invalid input: %r", line)
            response = _INVALID_INPUT
        if response is not None:
            self._output(response)
        return True

    def execute(self, command: Command) -> Optional[str]:
        """Apply `command` to the store and return the response line, if any."""
        store = self.store
        match command:
            case Set(key, value):
                store.set(key, value)
            case Get(key):
                value = store.get(key)
                return _KEY_NOT_SET if value is None else value
            case Delete(key):
                store.delete(key)
            case Count(value):
                return str(store.count(value))
            case Begin():
                store.begin()
            case Commit():
                if not store.commit():
                    return _NO_TRANSACTION
            case Rollback():
                if not store.rollback():
                    return _NO_TRANSACTION
            case Unknown(name):
                raise InvalidCommandError(f"unknown command {name!r}")
        return None
