from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Generic, Iterator, Optional, TypeVar

from .manager import ContextManager

T = TypeVar("T"); A = TypeVar("A")


@dataclass
class WithResult(Generic[A]):
    """Outcome of ``with_context``.

    Either the body returned (``suppressed`` is ``False`` and ``result`` holds
    its value) or the body raised and the manager suppressed it
    (``suppressed`` is ``True`` and ``error`` holds the exception).
    """
    suppressed: bool
    result: Optional[A] = None
    error: Optional[BaseException] = None


def with_context(manager: ContextManager[T], body: Callable[[T], A]) -> WithResult[A]:
    """Run ``body`` inside ``manager``.

    ``manager.enter()`` is called first and its value passed to ``body``. If
    ``enter`` raises, the error propagates and ``exit`` is not called. If
    ``body`` raises, ``manager.exit(error)`` decides: ``True`` suppresses the
    error, anything else re-raises it unchanged. Otherwise ``manager.exit()``
    runs with no argument.

    Example:
        ```python
        res = with_context(ExitStack(), lambda stack: 42)
        assert res.result == 42 and not res.suppressed
        ```
    """
    val = manager.enter()
    try:
        result = body(val)
    except BaseException as error:
        if manager.exit(error) is not True:
            raise
        return WithResult(suppressed=True, error=error)
    manager.exit()
    return WithResult(suppressed=False, result=result)


def use(manager: ContextManager[T]) -> Iterator[T]:
    """Yield the entered value of ``manager`` once, then exit it.

    There is no error handling or suppression: ``exit()`` is always called
    without an argument, when the iterator is advanced past the value or
    closed.

    Example:
        ```python
        for conn in use(pool_connection()):
            conn.query(1)
        ```
    """
    val = manager.enter()
    try:
        yield val
    finally:
        manager.exit()


With = with_context
Use = use
