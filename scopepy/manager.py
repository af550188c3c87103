from __future__ import annotations
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class ContextManager(Protocol[T_co]):
    """The enter/exit contract every resource wrapper implements.

    ``enter()`` acquires the resource and returns the value handed to the body.
    ``exit()`` releases it. When the body failed, the error is passed as the
    single positional argument; a clean exit passes nothing. Returning ``True``
    from ``exit(error)`` suppresses ``error``.

    ``exit`` must be called exactly once for every ``enter`` that returned.
    """
    def enter(self) -> T_co: ...
    def exit(self, *error: BaseException) -> Any: ...


class ContextManagerBase:
    """Convenience base class: ``enter`` returns the instance, ``exit`` does nothing.

    Subclasses also work with Python's ``with`` statement, which is routed
    through ``enter``/``exit``.

    Example:
        ```python
        class Lock(ContextManagerBase):
            def exit(self, *error):
                self.release()

        with Lock() as lock:
            ...
        ```
    """
    def enter(self) -> Any: return self
    def exit(self, *error: BaseException) -> Any: return None

    def __enter__(self) -> Any:
        return self.enter()

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is None:
            return self.exit() is True
        return self.exit(exc) is True


class NativeCM(ContextManagerBase, Generic[T]):
    """Adapt an object with ``__enter__``/``__exit__`` to the enter/exit contract.

    Example:
        ```python
        with ExitStack() as stack:
            f = stack.enter_context(NativeCM(open("data.txt")))
        ```
    """
    def __init__(self, cm: Any):
        self.cm = cm
        # Special methods are looked up on the type, as the with statement does
        cls = type(cm)
        try:
            self._enter = cls.__enter__
            self._exit = cls.__exit__
        except AttributeError:
            raise TypeError(f"{cls.__module__}.{cls.__qualname__!r} object does not support the context manager protocol") from None

    def enter(self) -> T:
        return self._enter(self.cm)

    def exit(self, *error: BaseException) -> bool:
        if not error:
            return bool(self._exit(self.cm, None, None, None))
        exc = error[0]
        return bool(self._exit(self.cm, type(exc), exc, exc.__traceback__))

    def __repr__(self) -> str: return f"NativeCM({self.cm!r})"
