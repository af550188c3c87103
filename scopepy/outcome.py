from __future__ import annotations
from dataclasses import dataclass
from typing import Callable


class Outcome:
    """What happened when a single exit action ran during an unwind."""
    def suppressed(self) -> bool: return False
    def failed(self) -> bool: return False


@dataclass(frozen=True)
class Handled(Outcome):
    """The action returned ``True``: the error it was given is suppressed."""
    def suppressed(self) -> bool: return True


@dataclass(frozen=True)
class NotHandled(Outcome):
    """The action returned anything other than ``True``."""


@dataclass(frozen=True)
class Failed(Outcome):
    """The action itself raised ``error``."""
    error: BaseException
    def failed(self) -> bool: return True


HANDLED = Handled()
NOT_HANDLED = NotHandled()


def run_action(action: Callable[..., object], *error: BaseException) -> Outcome:
    """Call ``action`` with ``error`` (zero or one argument) and classify the result.

    Only an explicit ``True`` counts as suppression; truthy values such as
    ``1`` or a non-empty string do not.
    """
    try:
        res = action(*error)
    except BaseException as ex:
        return Failed(ex)
    return HANDLED if res is True else NOT_HANDLED
