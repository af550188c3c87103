from __future__ import annotations
import enum
from functools import wraps
from typing import Callable, Generator, Generic, Optional, TypeVar

from .errors import GeneratorDidNotStop, GeneratorDidNotYield, GeneratorStateError
from .logger import ConsoleLogger, get_logger
from .manager import ContextManagerBase

T = TypeVar("T")


class GeneratorState(enum.Enum):
    CREATED = "created"
    SUSPENDED = "suspended"
    FINISHED = "finished"


class GeneratorCM(ContextManagerBase, Generic[T]):
    """Context manager driven by a generator that yields exactly once.

    The code before the ``yield`` is the setup, the yielded value is what
    ``enter`` returns, and the code after it is the cleanup. An error from
    the body is thrown into the generator at the ``yield``, so ``try``/
    ``finally`` and ``try``/``except`` inside the generator behave as they
    would around a ``with`` block.

    Example:
        ```python
        def opened(path):
            f = open(path)
            try:
                yield f
            finally:
                f.close()

        with_context(GeneratorCM(opened("data.txt")), lambda f: f.read())
        ```

    ``exit`` returns ``True`` whenever the generator runs to completion: if
    the generator catches the injected error, the error is suppressed; if it
    lets it escape, ``exit`` raises it.
    """
    def __init__(self, gen: Generator[T, None, None], logger: Optional[ConsoleLogger] = None):
        self.gen = gen
        self.state = GeneratorState.CREATED
        self._logger = logger

    def __repr__(self) -> str:
        name = getattr(self.gen, "__qualname__", type(self.gen).__name__)
        return f"<GeneratorCM {name} {self.state.value}>"

    def enter(self) -> T:
        if self.state is not GeneratorState.CREATED:
            raise GeneratorStateError(f"cannot enter a generator context that is {self.state.value}")
        try:
            value = next(self.gen)
        except StopIteration:
            self.state = GeneratorState.FINISHED
            raise GeneratorDidNotYield() from None
        self.state = GeneratorState.SUSPENDED
        return value

    def exit(self, *error: BaseException) -> bool:
        if self.state is not GeneratorState.SUSPENDED:
            raise GeneratorStateError(f"cannot exit a generator context that is {self.state.value}")
        self.state = GeneratorState.FINISHED
        if not error:
            try:
                next(self.gen)
            except StopIteration:
                return True
            self.gen.close()
            raise GeneratorDidNotStop()
        exc = error[0]
        (self._logger or get_logger()).debug("throwing error into generator", error=repr(exc))
        try:
            self.gen.throw(exc)
        except StopIteration:
            return True
        except RuntimeError as ex:
            # A StopIteration escaping a generator is turned into RuntimeError
            if isinstance(exc, StopIteration) and ex.__cause__ is exc:
                raise exc
            raise
        self.gen.close()
        raise GeneratorDidNotStop("generator didn't stop after throw()")


def contextmanager(func: Callable[..., Generator[T, None, None]]) -> Callable[..., GeneratorCM[T]]:
    """Turn a single-yield generator function into a context manager factory.

    Every call builds a fresh generator and wraps it in a new GeneratorCM.

    Example:
        ```python
        @contextmanager
        def tag(name):
            print(f"<{name}>")
            try:
                yield name
            finally:
                print(f"</{name}>")

        with_context(tag("p"), lambda n: print("body"))
        ```
    """
    @wraps(func)
    def helper(*args, **kwds) -> GeneratorCM[T]:
        return GeneratorCM(func(*args, **kwds))
    return helper
