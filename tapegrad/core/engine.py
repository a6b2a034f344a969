# tapegrad/core/engine.py
from __future__ import annotations

import logging
from typing import Sequence, Union

import numpy as np

from .var import Reverse

logger = logging.getLogger(__name__)


class Derivatives:
    """
    Dense, read-only mapping from tape slot to ∂terminal/∂slot.

    Index it with a ``Reverse`` (its slot is used; constants give 0) or with
    a raw integer slot. Slots outside the recorded range also give 0.
    """

    __slots__ = ("_values",)

    def __init__(self, values: np.ndarray):
        values.setflags(write=False)
        self._values = values

    @classmethod
    def empty(cls, dtype=np.float64) -> "Derivatives":
        return cls(np.zeros(0, dtype=dtype))

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return f"Derivatives({self._values!r})"

    def __getitem__(self, key: Union[Reverse, int]):
        if isinstance(key, Reverse):
            if key.is_constant:
                return self._values.dtype.type(0)
            key = key.slot
        if 0 <= key < len(self._values):
            return self._values[key]
        return self._values.dtype.type(0)

    def as_array(self) -> np.ndarray:
        """The underlying accumulator array (read-only view)."""
        return self._values

    def wrt(self, variables: Sequence[Reverse]) -> np.ndarray:
        """Gradient vector for `variables`, in their order."""
        return np.array([self[v] for v in variables], dtype=self._values.dtype)


def derivatives(terminal: Reverse) -> Derivatives:
    """
    Run a single reverse pass from `terminal`.

    The tape is walked in reverse recording order; since operand slots are
    always smaller than the output slot, this is reverse topological order.
    For each entry we propagate: d[operand] += d[out] * (∂out/∂operand).

    Zero upstream derivatives are NOT skipped, so inf/nan coefficients on
    unrelated branches still reach their operands, as plain float
    arithmetic dictates.
    """
    if not isinstance(terminal, Reverse):
        raise TypeError(f"derivatives() expects a Reverse, got {type(terminal)}")
    if terminal.is_constant:
        return Derivatives.empty()

    storage = terminal.tape._storage
    d = np.zeros(storage.n_slots, dtype=storage.dtype)
    # A stale slot (captured before a reset) seeds nothing.
    if terminal.slot < storage.n_slots:
        d[terminal.slot] = 1

    logger.debug(f"[Backward] {len(storage.entries)} entries, {storage.n_slots} slots")

    # Backward sweep
    with np.errstate(all="ignore"):
        for entry in reversed(storage.entries):
            upstream = d[entry.slot]
            for slot, local_partial in entry.operands:
                d[slot] += upstream * local_partial

    return Derivatives(d)
