from __future__ import annotations


class ScopeError(Exception):
    """Base class for errors raised by scopepy itself.

    Errors raised by user code (bodies, ``enter``/``exit`` implementations,
    cleanup callbacks) are never wrapped in a ScopeError; they propagate as
    the original exception object.
    """


class GeneratorContractError(ScopeError, RuntimeError):
    """A generator wrapped by GeneratorCM did not yield exactly once."""


class GeneratorDidNotYield(GeneratorContractError):
    def __init__(self, msg: str = "generator didn't yield"): super().__init__(msg)


class GeneratorDidNotStop(GeneratorContractError):
    def __init__(self, msg: str = "generator didn't stop"): super().__init__(msg)


class GeneratorStateError(ScopeError, RuntimeError):
    """``enter``/``exit`` called out of order on a GeneratorCM."""
