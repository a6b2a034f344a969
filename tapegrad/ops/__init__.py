# tapegrad/ops/__init__.py

# Convenience re-exports so users can do: from tapegrad.ops import mul, exp, ...
from .arithmetic import add, sub, mul, div, neg, powi, pow
from .transcendental import exp, ln, log, sqrt, sin, cos, tan, abs, signum, erf
from .special import norm_cdf, norm_pdf

__all__ = [
    "add", "sub", "mul", "div", "neg", "powi", "pow",
    "exp", "ln", "log", "sqrt", "sin", "cos", "tan", "abs", "signum", "erf",
    "norm_cdf", "norm_pdf",
]
