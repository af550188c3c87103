from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


class Option(Generic[T]):
    """An explicit "maybe" slot.

    ExitStack keeps its in-flight error in an Option rather than in a bare
    variable so that "no error" is never confused with a falsy value.
    """
    def is_some(self) -> bool: raise NotImplementedError

    def get(self) -> T:
        if self.is_some():
            return self.value  # type: ignore[attr-defined]
        raise ValueError("get() on an empty Option")

    def or_else(self, other: "Option[T]") -> "Option[T]":
        """Keep this value if present, otherwise fall back to ``other``."""
        return self if self.is_some() else other


@dataclass(frozen=True)
class Some(Option[T]):
    value: T
    def is_some(self) -> bool: return True


class _Empty(Option[None]):
    __slots__ = ()
    def __repr__(self) -> str: return "NONE"
    def is_some(self) -> bool: return False


NONE: Option[None] = _Empty()
