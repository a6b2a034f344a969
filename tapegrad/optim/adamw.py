# tapegrad/optim/adamw.py
"""
AdamW: Adam with decoupled weight decay (Loshchilov & Hutter, 2019).

For each variable i with gradient g at step t (t counted from 1):

    x_i ← x_i - lr·λ·x_i                      (decoupled weight decay)
    m_i ← β1·m_i + (1-β1)·g
    v_i ← β2·v_i + (1-β2)·g²
    m̂   = m_i / (1-β1^t),  v̂ = v_i / (1-β2^t)
    x_i ← x_i - lr·m̂ / (√v̂ + ε)

Moment state is kept per variable, positionally: every call to `step` must
pass the same variables in the same order.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..config import ADAMW_BETA1, ADAMW_BETA2, ADAMW_EPSILON, ADAMW_WEIGHT_DECAY
from ..core.engine import Derivatives
from ..core.var import Reverse
from ..errors import VariableCountError
from .base import Optimizer

logger = logging.getLogger(__name__)


@dataclass
class AdamWConfig:
    """Hyper-parameters for AdamW."""
    learning_rate: float = 1e-3
    beta1: float = ADAMW_BETA1          # First-moment decay
    beta2: float = ADAMW_BETA2          # Second-moment decay
    epsilon: float = ADAMW_EPSILON      # Keeps the update finite when v̂ ≈ 0
    weight_decay: float = ADAMW_WEIGHT_DECAY

    def __post_init__(self):
        if not self.learning_rate > 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate}")
        for name in ("beta1", "beta2"):
            beta = getattr(self, name)
            if not 0.0 <= beta < 1.0:
                raise ValueError(f"{name} must be in [0, 1), got {beta}")
        if not self.epsilon > 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if not self.weight_decay >= 0:
            raise ValueError(f"weight_decay must be non-negative, got {self.weight_decay}")


class AdamW(Optimizer):
    """
    Usage:
        >>> opt = AdamW.default(0.001)
        >>> for _ in range(1000):
        ...     tape.reset(); x.reset(); y.reset()
        ...     z = rosenbrock(x, y)
        ...     opt.step(derivatives(z), [x, y])
    """

    def __init__(self, config: Optional[AdamWConfig] = None):
        self.config = config or AdamWConfig()
        self.t = 0
        self.first_moment: Optional[np.ndarray] = None
        self.second_moment: Optional[np.ndarray] = None

    @classmethod
    def default(cls, learning_rate: float) -> "AdamW":
        """β1=0.9, β2=0.999, ε=1e-8, weight_decay=0.01."""
        return cls(AdamWConfig(learning_rate=learning_rate))

    def __repr__(self):
        return f"AdamW({self.config}, t={self.t})"

    def step(self, derivatives: Derivatives, variables: Sequence[Reverse]) -> None:
        n = len(variables)
        if self.first_moment is None:
            self.first_moment = np.zeros(n)
            self.second_moment = np.zeros(n)
        elif n != len(self.first_moment):
            raise VariableCountError(
                f"AdamW tracks {len(self.first_moment)} variables but step() got {n}; "
                f"create a new optimizer when the variable set changes"
            )

        cfg = self.config
        lr = cfg.learning_rate
        self.t += 1

        g = np.array([derivatives[v] for v in variables], dtype=np.float64)
        x = np.array([v.value for v in variables], dtype=np.float64)

        with np.errstate(all="ignore"):
            # Apply weight decay
            if cfg.weight_decay != 0.0:
                x = x - lr * cfg.weight_decay * x

            m = self.first_moment
            v = self.second_moment
            m *= cfg.beta1
            m += (1.0 - cfg.beta1) * g
            v *= cfg.beta2
            v += (1.0 - cfg.beta2) * g * g

            m_hat = m / (1.0 - cfg.beta1 ** self.t)
            v_hat = v / (1.0 - cfg.beta2 ** self.t)

            x = x - lr * m_hat / (np.sqrt(v_hat) + cfg.epsilon)

        for var, new in zip(variables, x):
            var.set_value(new)

        logger.debug(f"[AdamW] step {self.t}: {n} variables updated")
