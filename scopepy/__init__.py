from .core import (
    WithResult,
    with_context,
    use,
    With,
    Use,
)
from .manager import ContextManager, ContextManagerBase, NativeCM
from .exit_stack import ExitStack, PlainCallback, BoundExit
from .generator import GeneratorCM, GeneratorState, contextmanager
from .outcome import Outcome, Handled, NotHandled, Failed
from .option import Option, Some, NONE
from .errors import (
    ScopeError,
    GeneratorContractError,
    GeneratorDidNotYield,
    GeneratorDidNotStop,
    GeneratorStateError,
)
from .logger import ConsoleLogger, get_logger, set_logger, reset_logger
