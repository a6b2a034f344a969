# tapegrad/__init__.py
# Reverse-mode automatic differentiation on a reusable tape

from .core.entry import Entry
from .core.tape import Tape
from .core.var import Reverse
from .core.engine import Derivatives, derivatives
from .core.seeds import grad, grads, grads_list, value
from .core.graph_utils import tape_summary

from . import ops
from .optim import (
    Optimizer,
    SimpleGradientDescent,
    AdamW,
    AdamWConfig,
    OptimizationResult,
    minimize,
)
from .errors import StaleSlotError, TapegradError, TapeMismatchError, VariableCountError

__all__ = [
    # Core
    'Entry',
    'Tape',
    'Reverse',
    'Derivatives',
    'derivatives',
    'grad',
    'grads',
    'grads_list',
    'value',
    'tape_summary',
    # Operators
    'ops',
    # Optimizers
    'Optimizer',
    'SimpleGradientDescent',
    'AdamW',
    'AdamWConfig',
    'OptimizationResult',
    'minimize',
    # Errors
    'TapegradError',
    'TapeMismatchError',
    'VariableCountError',
    'StaleSlotError',
]
