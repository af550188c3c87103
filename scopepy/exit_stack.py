from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, TypeVar, Union

from .logger import ConsoleLogger, get_logger
from .manager import ContextManager, ContextManagerBase, NativeCM
from .option import NONE, Option, Some
from .outcome import run_action

T = TypeVar("T")
C = TypeVar("C", bound=Callable[..., Any])


@dataclass(frozen=True)
class PlainCallback:
    """A user callback registered with ``ExitStack.callback``."""
    fn: Callable[..., Any]
    def __call__(self, *error: BaseException) -> Any: return self.fn(*error)


@dataclass(frozen=True)
class BoundExit:
    """The ``exit`` of a context manager registered with ``push``/``enter_context``."""
    cm: ContextManager[Any]
    def __call__(self, *error: BaseException) -> Any: return self.cm.exit(*error)


ExitAction = Union[PlainCallback, BoundExit]


class ExitStack(ContextManagerBase):
    """Context manager that unwinds a dynamic stack of exit actions.

    Exit actions are context managers' ``exit`` methods and plain callbacks.
    They run in LIFO order (last registered, first run), the same order
    nested ``with`` blocks would release them in.

    While unwinding, an error that is still in flight is passed to each
    action until one of them suppresses it by returning ``True``; actions
    after that run as for a clean exit. If an action raises, the remaining
    actions still run and the first failure is re-raised at the end.

    Example:
        ```python
        def body(stack: ExitStack):
            conn = stack.enter_context(connect("primary"))
            stack.callback(lambda *err: print("done"))
            return conn.query(7)

        with_context(ExitStack(), body)
        ```

    Args:
        logger: Logger used for unwind diagnostics; defaults to ``get_logger()``
    """
    def __init__(self, logger: Optional[ConsoleLogger] = None):
        self._exit_actions: List[ExitAction] = []
        self._logger = logger

    @property
    def logger(self) -> ConsoleLogger:
        return self._logger or get_logger()

    def __len__(self) -> int: return len(self._exit_actions)

    def __repr__(self) -> str: return f"<ExitStack pending={len(self._exit_actions)}>"

    def callback(self, cb: C) -> C:
        """Register a plain callback.

        The callback receives the in-flight error as its only argument, or no
        argument on a clean exit, and may return ``True`` to suppress it.
        Returns ``cb`` so this can be used as a decorator.
        """
        self._exit_actions.append(PlainCallback(cb))
        return cb

    def push(self, cm: ContextManager[T]) -> ContextManager[T]:
        """Register the ``exit`` of an already entered context manager."""
        self._exit_actions.append(BoundExit(cm))
        return cm

    def enter_context(self, cm: ContextManager[T]) -> T:
        """Enter ``cm`` and register its ``exit``; returns what ``enter`` returned.

        If ``enter`` raises, nothing is registered.
        """
        result = cm.enter()
        self.push(cm)
        return result

    def enter_native(self, cm: Any) -> Any:
        """Same as ``enter_context`` for objects using ``__enter__``/``__exit__``."""
        return self.enter_context(NativeCM(cm))

    def pop_all(self) -> "ExitStack":
        """Move every pending exit action to a new stack and return it.

        This stack is left empty, so its own exit becomes a no-op. Use it to
        keep resources alive past the current block.
        """
        stack = ExitStack(logger=self._logger)
        stack._exit_actions = self._exit_actions
        self._exit_actions = []
        return stack

    def close(self) -> None:
        """Unwind immediately as for a clean exit."""
        self.exit()

    def exit(self, *error: BaseException) -> bool:
        """Run and discard every exit action in LIFO order.

        Args:
            *error: The in-flight error, or nothing for a clean exit

        Returns:
            ``True`` only when an error was passed in and an action suppressed
            it. An unsuppressed incoming error is not raised here; the caller
            re-raises it on a ``False`` return.

        Raises:
            When an action raised and no later action suppressed it: the
            incoming error if still unsuppressed, else the first failure.
        """
        has_error = bool(error)
        pending: Option[BaseException] = Some(error[0]) if has_error else NONE
        suppressed = False
        pending_raise = False
        log = self.logger
        if log.is_enabled("DEBUG"):
            log.debug("exit stack unwinding", actions=len(self._exit_actions), error=repr(error[0]) if has_error else None)
        while self._exit_actions:
            action = self._exit_actions.pop()
            if not pending_raise and (suppressed or not has_error):
                outcome = run_action(action)
            else:
                outcome = run_action(action, pending.get())
            if outcome.suppressed():
                suppressed = True
                pending_raise = False
                pending = NONE
            elif outcome.failed():
                suppressed = False
                pending_raise = True
                if pending.is_some():
                    log.warn("exit action failed while another error is pending", action=repr(action), error=repr(outcome.error), pending=repr(pending.get()))  # type: ignore[attr-defined]
                pending = pending.or_else(Some(outcome.error))  # type: ignore[attr-defined]
        if pending_raise:
            raise pending.get()
        return has_error and suppressed
