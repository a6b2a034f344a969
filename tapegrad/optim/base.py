# tapegrad/optim/base.py
"""Optimizer interface and plain gradient descent."""

from abc import ABC, abstractmethod
from typing import Sequence

from ..core.engine import Derivatives
from ..core.var import Reverse


class Optimizer(ABC):
    """
    An optimizer reads ∂loss/∂variable from a Derivatives mapping and writes
    new values into the variables in place. Tape bindings are left alone;
    callers reset the tape and the variables before the next forward pass.
    """

    @abstractmethod
    def step(self, derivatives: Derivatives, variables: Sequence[Reverse]) -> None:
        ...


class SimpleGradientDescent(Optimizer):
    """Moves each variable against its gradient at a fixed learning rate."""

    def __init__(self, learning_rate: float):
        if not learning_rate > 0:
            raise ValueError(f"learning_rate must be positive, got {learning_rate}")
        self.learning_rate = learning_rate

    def step(self, derivatives: Derivatives, variables: Sequence[Reverse]) -> None:
        for var in variables:
            var.set_value(var.value - self.learning_rate * derivatives[var])
