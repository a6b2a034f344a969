"""
Gradient-based optimizers consuming tapegrad Derivatives.
"""

from .base import Optimizer, SimpleGradientDescent
from .adamw import AdamW, AdamWConfig
from .loop import OptimizationResult, minimize

__all__ = [
    'Optimizer',
    'SimpleGradientDescent',
    'AdamW',
    'AdamWConfig',
    'OptimizationResult',
    'minimize',
]
