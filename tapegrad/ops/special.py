# tapegrad/ops/special.py
import numpy as np
from scipy import special

from .arithmetic import _unary

SQRT_TWO_PI = np.sqrt(2.0 * np.pi)


def _phi(a):
    return np.exp(-0.5 * a * a) / SQRT_TWO_PI


def norm_pdf(x):
    """
    Primitive: returns phi(x) and records local partial dphi/dx = -x * phi(x).
    """
    return _unary(x, _phi, lambda a, out: -a * out, "norm_pdf")


def norm_cdf(x):
    """
    Primitive: returns N(x) and records local partial dN/dx = phi(x).
    """
    return _unary(x, special.ndtr, lambda a, out: _phi(a), "norm_cdf")
