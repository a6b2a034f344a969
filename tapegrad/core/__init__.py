# tapegrad/core/__init__.py

"""
Core public API for tapegrad.

Exports:
    Tape          : Append-only operation log shared by all values recorded on it.
    Entry         : One recorded operation (output slot + operand partials).
    Reverse       : The differentiable scalar (constant or tape-bound).
    Derivatives   : Dense slot -> derivative mapping produced by the backward pass.
    derivatives   : Run the backward pass from a terminal value.
    grad/grads    : Convenience: derivatives of a function on a fresh tape.
    value         : Convenience: extract the primal value from a Reverse.
    tape_summary  : Debug statistics for a tape.
"""

from .entry import Entry
from .tape import Tape
from .var import Reverse
from .engine import Derivatives, derivatives
from .seeds import grad, grads, grads_list, value
from .graph_utils import tape_summary

__all__ = [
    "Entry", "Tape", "Reverse",
    "Derivatives", "derivatives",
    "grad", "grads", "grads_list", "value",
    "tape_summary",
]
