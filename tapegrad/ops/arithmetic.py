# tapegrad/ops/arithmetic.py
import numbers

import numpy as np

from ..core.var import Reverse
from ..errors import TapeMismatchError


def _as_reverse(x):
    """Ensure x is a Reverse; otherwise wrap it as a constant."""
    return x if isinstance(x, Reverse) else Reverse.constant(x)


def _common_tape(x, y):
    """The tape both operands agree on (None if both are constants)."""
    if x.tape is None:
        return y.tape
    if y.tape is None:
        return x.tape
    if not x.tape.shares_storage(y.tape):
        raise TapeMismatchError(
            f"Cannot combine values recorded on different tapes ({x.tape!r} vs {y.tape!r})"
        )
    return x.tape


def _unary(x, f, dfdx, tag):
    """
    Generic unary primitive:
      - computes out.value = f(x.value)
      - records ∂out/∂x = dfdx(x.value, out.value) unless x is a constant
    Floating-point warnings are silenced: inf/nan simply propagate.
    """
    x = _as_reverse(x)
    with np.errstate(all="ignore"):
        val = f(x.value)
        if x.tape is None:
            return Reverse.constant(val)
        partial = dfdx(x.value, val)
    slot = x.tape.record([(x.slot, partial)], op_tag=tag)
    return Reverse(val, x.tape, slot)


def _binary(x, y, f, dfdx, dfdy, tag):
    """
    Generic binary primitive:
      - computes out.value = f(x.value, y.value)
      - records local partials (∂out/∂x, ∂out/∂y) for the reversible operands
    Raises TapeMismatchError before evaluating anything if x and y live on
    different tapes.
    """
    x = _as_reverse(x)
    y = _as_reverse(y)
    tape = _common_tape(x, y)
    with np.errstate(all="ignore"):
        val = f(x.value, y.value)
        if tape is None:
            return Reverse.constant(val)
        operands = []
        if x.tape is not None:
            operands.append((x.slot, dfdx(x.value, y.value)))
        if y.tape is not None:
            operands.append((y.slot, dfdy(x.value, y.value)))
    slot = tape.record(operands, op_tag=tag)
    return Reverse(val, tape, slot)


def add(x, y): return _binary(x, y, lambda a,b:a+b, lambda a,b:1.0,        lambda a,b:1.0,        "add")
def sub(x, y): return _binary(x, y, lambda a,b:a-b, lambda a,b:1.0,        lambda a,b:-1.0,       "sub")
def mul(x, y): return _binary(x, y, lambda a,b:a*b, lambda a,b:b,          lambda a,b:a,          "mul")
def div(x, y): return _binary(x, y, lambda a,b:a/b, lambda a,b:1.0/b,      lambda a,b:-a/(b*b),   "div")


def neg(x):
    return _unary(x, lambda a: -a, lambda a, out: -1.0, "neg")


def powi(x, n):
    """
    Integer power:
      out.value = x.value ** n
      ∂out/∂x   = n * x^(n-1)
    Defined for negative bases, unlike the real-exponent `pow`.
    """
    if isinstance(n, (bool, np.bool_)) or not isinstance(n, numbers.Integral):
        raise TypeError(f"powi() expects an integer exponent, got {type(n)}")
    n = int(n)
    # float ** negative int works on numpy scalars; integer_power would not
    return _unary(x, lambda a: a ** n, lambda a, out: n * a ** (n - 1), "powi")


def pow(x, y):
    """
    Real power:
      out.value = x.value ** y.value

    Local partials:
      ∂out/∂x = y * x^(y-1)
      ∂out/∂y = x^y * log(x)        (nan for x<=0, propagated as-is)
    """
    return _binary(
        x, y,
        lambda a, b: np.power(a, b),
        lambda a, b: b * np.power(a, b - 1.0),
        lambda a, b: np.power(a, b) * np.log(a),
        "pow",
    )
