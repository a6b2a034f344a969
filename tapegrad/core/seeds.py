# tapegrad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at the scalar output and let gradients grow
# backwards through the tape. Each helper below records on its own fresh tape.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List

from ..config import DEFAULT_DTYPE
from .engine import derivatives
from .tape import Tape
from .var import Reverse


def value(x: Any) -> Any:
    """Return the numeric value of a Reverse; pass through plain numbers unchanged."""
    return x.value if isinstance(x, Reverse) else x


def _ensure_output(y: Any, fname: str) -> Reverse:
    if isinstance(y, Reverse):
        return y
    try:
        return Reverse.constant(y)
    except TypeError:
        raise ValueError(f"{fname} expects a scalar output, got {type(y)}") from None


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Reverse], Reverse], x0: float, dtype=DEFAULT_DTYPE):
    """
    Derivative of a scalar function y=f(x) at x0 (single input).
    Runs one reverse pass within a fresh, isolated tape.
    """
    tape = Tape(dtype)
    x = Reverse.reversible(x0, tape)
    y = _ensure_output(f(x), "grad(f, x0)")
    return derivatives(y)[x]


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Reverse]], Reverse],
          inputs: Dict[str, float], dtype=DEFAULT_DTYPE) -> Dict[str, Any]:
    """
    Gradient of a scalar-output function y=f(vars) w.r.t. ALL inputs (dict form).
    Performs ONE reverse pass to obtain all ∂y/∂var simultaneously.

    Parameters
    ----------
    f       : function taking a dict {name: Reverse} and returning a scalar Reverse
    inputs  : dict {name: numeric}

    Returns
    -------
    dict {name: numeric}  # gradients in the same key order as `inputs`
    """
    tape = Tape(dtype)
    vars_ad = {k: Reverse.reversible(v, tape) for k, v in inputs.items()}
    y = _ensure_output(f(vars_ad), "grads(f, inputs)")
    d = derivatives(y)
    return {k: d[vars_ad[k]] for k in inputs.keys()}


def grads_list(f: Callable[[List[Reverse]], Reverse],
               x0_list: Iterable[float], dtype=DEFAULT_DTYPE) -> List[Any]:
    """
    Same as grads(), but the inputs are provided as a list and the result is a list
    of partials in the same order.

    Example
    -------
    f = lambda xs: xs[0]*xs[0] + 3*xs[1]
    grads_list(f, [2.0, 4.0]) -> [4.0, 3.0]
    """
    tape = Tape(dtype)
    xs = [Reverse.reversible(v, tape) for v in x0_list]
    y = _ensure_output(f(xs), "grads_list(f, x0_list)")
    d = derivatives(y)
    return [d[x] for x in xs]
