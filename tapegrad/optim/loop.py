# tapegrad/optim/loop.py
"""
Driver for the usual optimisation cycle on a reused tape:

    tape.reset() → variable.reset() (list order) → build → backward → step
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ..core.engine import Derivatives, derivatives
from ..core.tape import Tape
from ..core.var import Reverse
from ..errors import TapeMismatchError
from .base import Optimizer

logger = logging.getLogger(__name__)


@dataclass
class OptimizationResult:
    """Outcome of `minimize`."""
    values: List[float]
    final_loss: float
    n_steps: int
    loss_history: List[float] = field(default_factory=list)


def minimize(
    build: Callable[[Sequence[Reverse]], Reverse],
    variables: Sequence[Reverse],
    tape: Tape,
    optimizer: Optimizer,
    n_steps: int,
    *,
    callback: Optional[Callable[[int, Reverse, Derivatives], None]] = None,
    verbose: bool = False,
    log_every: int = 100,
) -> OptimizationResult:
    """
    Run `n_steps` reset/forward/backward/step iterations.

    Args:
        build: maps the variable list to the scalar loss (recorded on `tape`)
        variables: reversible leaves on `tape`, updated in place
        tape: the tape shared by all variables
        optimizer: any Optimizer (AdamW, SimpleGradientDescent, ...)
        n_steps: number of iterations
        callback: called as callback(iteration, loss, derivatives) after each step
        verbose: log progress at INFO level every `log_every` iterations

    Returns:
        OptimizationResult. `loss_history[i]` is the loss evaluated *before*
        the i-th update; `final_loss` is re-evaluated after the last update.
    """
    if n_steps < 0:
        raise ValueError(f"n_steps must be non-negative, got {n_steps}")
    for var in variables:
        if var.tape is not None and not var.tape.shares_storage(tape):
            raise TapeMismatchError(f"{var!r} is not recorded on the tape being reset")

    history: List[float] = []
    for it in range(n_steps):
        tape.reset()
        for var in variables:
            var.reset()

        loss = build(variables)
        derivs = derivatives(loss)
        history.append(float(loss.value))
        optimizer.step(derivs, variables)

        if callback is not None:
            callback(it, loss, derivs)
        if verbose and (it + 1) % log_every == 0:
            logger.info(f"[minimize] Iteration {it + 1}: loss = {history[-1]:.6e}")

    # Evaluate the loss at the final point
    tape.reset()
    for var in variables:
        var.reset()
    final_loss = float(build(variables).value)

    return OptimizationResult(
        values=[float(v.value) for v in variables],
        final_loss=final_loss,
        n_steps=n_steps,
        loss_history=history,
    )
