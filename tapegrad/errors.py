# tapegrad/errors.py
"""
Exception taxonomy for tapegrad.

Only usage errors are raised. Non-finite numbers produced by the operator
layer (division by zero, log of a non-positive value, ...) are NOT errors:
they flow through the tape and the backward pass as IEEE inf/nan.
"""


class TapegradError(Exception):
    """Base class for all errors raised by tapegrad."""


class TapeMismatchError(TapegradError, ValueError):
    """Two reversible values bound to different tapes met in one operation."""


class VariableCountError(TapegradError, ValueError):
    """An optimizer received a different number of variables than it tracks."""


class StaleSlotError(TapegradError, ValueError):
    """An operand slot is not below the new output slot (e.g. captured before a reset)."""
