# tapegrad/core/entry.py
from dataclasses import dataclass
from typing import Any, Tuple


@dataclass(frozen=True)
class Entry:
    """
    One record on the tape produced by a primitive operation.

    Attributes
    ----------
    slot : int
        Output slot of the operation. Slots are allocated in creation order,
        so every operand slot below is strictly smaller than ``slot``.
    operands : Tuple[Tuple[int, Any], ...]
        Zero, one or two (operand_slot, local_partial) pairs, where
        local_partial is ∂out/∂operand evaluated at the forward values.
        Constant operands never appear here.
    op_tag : str
        Debug tag (e.g., "add", "mul").
    """
    slot: int
    operands: Tuple[Tuple[int, Any], ...]
    op_tag: str = "op"
