"""Layered in-memory key-value store with nested transactions.

The store keeps a stack of plain ``dict`` layers. The bottom layer is the
base state and is never removed; the top layer is the visible state that
every read and write goes to. Each ``begin()`` pushes a copy of the top
layer, so the layers underneath act as checkpoints.

Complexities:
    • get / set / delete  – O(1) average
    • count               – O(n) over the visible layer
    • begin               – O(n) (full copy of the top layer)
    • commit / rollback   – O(1)

Commit is a *full overwrite* merge: the child layer replaces its parent
verbatim rather than being applied as a diff.

The store is not thread-safe. Callers sharing one instance across threads
must wrap it in their own lock.
"""
from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator, MutableMapping
from typing import Generic, Optional, TypeVar

__all__ = ["TransactionalStore"]

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class TransactionalStore(MutableMapping, Generic[K, V]):
    """Mapping whose changes can be grouped into nested transactions.

    Usage::

        store = TransactionalStore[str, str]()
        store.set("foo", "123")
        store.begin()
        store.set("foo", "456")
        store.rollback()            # True
        store.get("foo")            # "123"
        store.rollback()            # False, no transaction open

    The full :class:`~collections.abc.MutableMapping` protocol operates on the
    visible (top) layer.
    """

    def __init__(self) -> None:
        self._layers: list[dict[K, V]] = [{}]

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------
    def __getitem__(self, key: K) -> V:
        return self._layers[-1][key]

    def __setitem__(self, key: K, value: V) -> None:
        self._layers[-1][key] = value

    def __delitem__(self, key: K) -> None:
        del self._layers[-1][key]

    def __iter__(self) -> Iterator[K]:
        return iter(self._layers[-1])

    def __len__(self) -> int:
        return len(self._layers[-1])

    def __contains__(self, key: object) -> bool:
        return key in self._layers[-1]

    def __repr__(self) -> str:
        return f"TransactionalStore<depth={self.depth} size={len(self)}>"

    # ------------------------------------------------------------------
    # Key-value API
    # ------------------------------------------------------------------
    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Return the visible value for `key`, or `default` when absent."""
        return self._layers[-1].get(key, default)

    def set(self, key: K, value: V) -> Optional[V]:
        """Insert or overwrite `key` in the top layer; return the previous value."""
        top = self._layers[-1]
        previous = top.get(key)
        top[key] = value
        return previous

    def delete(self, key: K) -> Optional[V]:
        """Remove `key` from the top layer if present; return the removed value."""
        return self._layers[-1].pop(key, None)

    def count(self, value: V) -> int:
        """Number of visible keys whose value equals `value`."""
        return sum(1 for v in self._layers[-1].values() if v == value)

    @property
    def size(self) -> int:
        return len(self._layers[-1])

    def is_empty(self) -> bool:
        return not self._layers[-1]

    def contains_key(self, key: K) -> bool:
        return key in self._layers[-1]

    def contains_value(self, value: V) -> bool:
        return any(v == value for v in self._layers[-1].values())

    def clear(self) -> None:
        """Drop all data together with any open transactions."""
        self._layers = [{}]
        logger.debug("store cleared")

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    @property
    def depth(self) -> int:
        """Number of open transactions (0 = none)."""
        return len(self._layers) - 1

    def begin(self) -> None:
        """Open a new transaction on top of the current state."""
        self._layers.append(dict(self._layers[-1]))
        logger.debug("begin -> depth %d", self.depth)

    def commit(self) -> bool:
        """Fold the innermost transaction into its parent.

        Returns ``False`` without touching anything when no transaction is
        open.
        """
        if len(self._layers) == 1:
            logger.debug("commit ignored: no transaction")
            return False
        latest = self._layers.pop()
        self._layers[-1] = latest
        logger.debug("commit -> depth %d", self.depth)
        return True

    def rollback(self) -> bool:
        """Discard the innermost transaction, restoring the state before its
        ``begin()``. Returns ``False`` when no transaction is open."""
        if len(self._layers) == 1:
            logger.debug("rollback ignored: no transaction")
            return False
        self._layers.pop()
        logger.debug("rollback -> depth %d", self.depth)
        return True

    @contextlib.contextmanager
    def transaction(self) -> Iterator[TransactionalStore[K, V]]:
        """Run a block inside a transaction.

        Commits when the block finishes, rolls back and re-raises when it
        fails. The block must leave its own transaction open: if it commits,
        rolls back or clears it, the outer transactions are left untouched
        and ``RuntimeError`` is raised.
        """
        self.begin()
        depth = self.depth
        try:
            yield self
        except BaseException:
            if self.depth == depth:
                self.rollback()
            raise
        if self.depth != depth:
            raise RuntimeError("transaction closed inside block")
        self.commit()
