"""Typed Result container for explicit "value or error" returns.

The snapshot lookup path uses this instead of raising: a missing snapshot is
an ordinary outcome (expired, never written, forged id), so
``SnapshotStore.load`` returns ``Result[bytes, SnapshotNotFound]`` and the
entry point branches on it.

Example
-------
>>> from debugbar.core.result import ok, err, Result
>>> def lookup(table: dict[str, bytes], key: str) -> Result[bytes, str]:
...     return ok(table[key]) if key in table else err(key)
>>> lookup({"a": b"{}"}, "a").map(len).unwrap()
2
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, cast

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


class Result(Generic[T, E]):
    """Sum type holding either a success value (`Ok`) or an error (`Err`)."""

    def is_ok(self) -> bool:
        """Return ``True`` for :class:`Ok`."""
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        """Return ``True`` for :class:`Err`."""
        return isinstance(self, Err)

    def unwrap(self) -> T:
        """Return the success value or raise ``RuntimeError`` on ``Err``."""
        if isinstance(self, Ok):
            return cast(Ok[T, E], self).value
        raise RuntimeError(f"Attempted to unwrap Err: {self!r}")

    def unwrap_err(self) -> E:
        """Return the error value or raise ``RuntimeError`` on ``Ok``."""
        if isinstance(self, Err):
            return cast(Err[T, E], self).error
        raise RuntimeError(f"Attempted to unwrap_err on Ok: {self!r}")

    def get_or(self, default: T) -> T:
        """Return the success value, or ``default`` on ``Err``."""
        if isinstance(self, Ok):
            return cast(Ok[T, E], self).value
        return default

    def map(self, fn: Callable[[T], U]) -> Result[U, E]:
        """Apply ``fn`` to the success value; an error passes through."""
        if isinstance(self, Ok):
            return Ok(fn(cast(Ok[T, E], self).value))
        return cast(Result[U, E], self)


@dataclass(frozen=True)
class Ok(Result[T, E]):
    """Success variant."""

    value: T


@dataclass(frozen=True)
class Err(Result[T, E]):
    """Failure variant."""

    error: E


def ok(value: T) -> Result[T, E]:
    """Construct :class:`Ok` with better type inference at call sites."""
    return Ok(value)


def err(error: E) -> Result[T, E]:
    """Construct :class:`Err` with better type inference at call sites."""
    return Err(error)


__all__ = ["Result", "Ok", "Err", "ok", "err"]
