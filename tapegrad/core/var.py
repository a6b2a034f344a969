# tapegrad/core/var.py
from __future__ import annotations

import numbers
from typing import Any, Optional

import numpy as np

from .tape import Tape


def _to_scalar(val: Any, dtype=None):
    """Convert a real number to a numpy floating scalar (float64 unless `dtype`)."""
    # bool is an Integral; reject it along with complex, arrays, strings...
    if isinstance(val, (bool, np.bool_)) or not isinstance(val, numbers.Real):
        raise TypeError(
            f"Reverse only accepts real scalars (int, float, numpy floating), "
            f"but got {type(val)}"
        )
    if dtype is not None:
        return np.dtype(dtype).type(val)
    if isinstance(val, np.floating):
        return val
    return np.float64(val)


class Reverse:
    """
    Differentiable scalar for reverse-mode Automatic Differentiation (AD).

    Two variants share this class:

    * Constant   : ``tape is None``. Never recorded; its derivative is zero.
    * Reversible : bound to a ``Tape`` handle plus the slot where its
      upstream derivative is accumulated by the backward pass.

    Attributes
    ----------
    value : numpy floating scalar
        Forward (primal) value.
    tape : Optional[Tape]
        Handle to the tape this value is recorded on (None for constants).
    slot : Optional[int]
        Derivative accumulator index on ``tape`` (None for constants).

    Equality compares forward values, but hashing is by identity, so two
    equal values may hash differently; variables stay usable as dict keys.

    Build instances with ``constant`` or ``reversible``; ``__init__`` is the
    internal constructor used by the operator layer and needs both a tape
    and a slot for reversible values.
    """

    __slots__ = ("_val", "tape", "slot")

    # Make numpy hand mixed expressions (np.float64(2) * x) back to our
    # reflected operators instead of trying to build object arrays.
    __array_ufunc__ = None

    def __init__(self, val: Any, tape: Optional[Tape] = None, slot: Optional[int] = None):
        if tape is None:
            self._val = _to_scalar(val)
            self.slot = None
        else:
            if not isinstance(tape, Tape):
                raise TypeError(f"Reverse expects a Tape, got {type(tape)}")
            if slot is None:
                raise ValueError("A reversible value needs a slot; use Reverse.reversible(val, tape)")
            self._val = _to_scalar(val, tape.dtype)
            self.slot = slot
        self.tape = tape

    # ------------------------------------------------------------------ #
    # Constructors
    # ------------------------------------------------------------------ #
    @classmethod
    def constant(cls, val: Any) -> "Reverse":
        """A value that never touches any tape."""
        return cls(val)

    @classmethod
    def reversible(cls, val: Any, tape: Tape) -> "Reverse":
        """A leaf bound to a freshly allocated slot on `tape`."""
        if not isinstance(tape, Tape):
            raise TypeError(f"reversible() expects a Tape, got {type(tape)}")
        return cls(val, tape, tape.allocate_leaf_slot())

    @classmethod
    def zero(cls) -> "Reverse":
        return cls.constant(0.0)

    @classmethod
    def one(cls) -> "Reverse":
        return cls.constant(1.0)

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #
    @property
    def value(self):
        return self._val

    @property
    def is_constant(self) -> bool:
        return self.tape is None

    def set_value(self, val: Any):
        """Overwrite the forward value, keeping the tape binding (used by optimizers)."""
        self._val = _to_scalar(val, None if self.tape is None else self.tape.dtype)

    def reset(self):
        """
        Re-register this leaf on its tape. Call right after ``Tape.reset()``
        so the variable gets slot 0/1/... again. No-op for constants.
        """
        if self.tape is not None:
            self.slot = self.tape.allocate_leaf_slot()

    def __repr__(self):
        if self.tape is None:
            return f"Reverse({self._val!r}, const)"
        return f"Reverse({self._val!r}, slot={self.slot})"

    def __float__(self):
        return float(self._val)

    # ------------------------------------------------------------------ #
    # Comparisons defer to the numeric value
    # ------------------------------------------------------------------ #
    @staticmethod
    def _cmp_value(other):
        return other._val if isinstance(other, Reverse) else other

    def __eq__(self, other):
        return self._val == self._cmp_value(other)

    def __ne__(self, other):
        return self._val != self._cmp_value(other)

    def __lt__(self, other):
        return self._val < self._cmp_value(other)

    def __le__(self, other):
        return self._val <= self._cmp_value(other)

    def __gt__(self, other):
        return self._val > self._cmp_value(other)

    def __ge__(self, other):
        return self._val >= self._cmp_value(other)

    __hash__ = object.__hash__

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pow__(self, other):
        # Integer exponents take the powi path (well defined for negative bases)
        from ..ops.arithmetic import pow, powi
        if isinstance(other, numbers.Integral) and not isinstance(other, (bool, np.bool_)):
            return powi(self, other)
        return pow(self, other)

    def __rpow__(self, other):
        from ..ops.arithmetic import pow
        return pow(other, self)

    def __abs__(self):
        from ..ops.transcendental import abs
        return abs(self)

    # Method forms of the elementary functions
    def powi(self, n: int) -> "Reverse":
        from ..ops.arithmetic import powi
        return powi(self, n)

    def pow(self, other) -> "Reverse":
        from ..ops.arithmetic import pow
        return pow(self, other)

    def exp(self) -> "Reverse":
        from ..ops.transcendental import exp
        return exp(self)

    def ln(self) -> "Reverse":
        from ..ops.transcendental import ln
        return ln(self)

    def sqrt(self) -> "Reverse":
        from ..ops.transcendental import sqrt
        return sqrt(self)

    def sin(self) -> "Reverse":
        from ..ops.transcendental import sin
        return sin(self)

    def cos(self) -> "Reverse":
        from ..ops.transcendental import cos
        return cos(self)

    def tan(self) -> "Reverse":
        from ..ops.transcendental import tan
        return tan(self)

    def signum(self) -> "Reverse":
        from ..ops.transcendental import signum
        return signum(self)

    def derivatives(self):
        """Run the backward pass from this value (see ``engine.derivatives``)."""
        from .engine import derivatives
        return derivatives(self)
