# tapegrad/core/tape.py
"""
The tape, aka "Wengert list": an append-only log of recorded operations.

A ``Tape`` object is a *handle*. Several handles may point at the same
underlying storage (see ``clone_handle``); every reversible value keeps a
handle to the tape it was recorded on. Storage is mutated without locking:
building expressions on one tape from several threads is unsupported.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Tuple

import numpy as np

from ..config import DEFAULT_DTYPE
from ..errors import StaleSlotError
from .entry import Entry

logger = logging.getLogger(__name__)


class _TapeStorage:
    """Entries, slot counter and scalar dtype shared by all handles of one tape."""

    __slots__ = ("entries", "n_slots", "dtype")

    def __init__(self, dtype):
        self.entries: List[Entry] = []
        self.n_slots = 0
        self.dtype = np.dtype(dtype)


class Tape:
    """
    Shared-ownership handle to an append-only operation log.

    Usage:
        >>> tape = Tape()
        >>> x = Reverse.reversible(3.0, tape)
        >>> y = Reverse.reversible(2.0, tape)
        >>> z = x * y                  # records one entry
        >>> tape.reset(); x.reset(); y.reset()   # next iteration
    """

    __slots__ = ("_storage",)

    def __init__(self, dtype=DEFAULT_DTYPE):
        if not np.issubdtype(np.dtype(dtype), np.floating):
            raise TypeError(f"Tape dtype must be a floating type, got {dtype!r}")
        self._storage = _TapeStorage(dtype)

    @classmethod
    def _from_storage(cls, storage: _TapeStorage) -> "Tape":
        handle = cls.__new__(cls)
        handle._storage = storage
        return handle

    def __repr__(self):
        s = self._storage
        return f"Tape(slots={s.n_slots}, entries={len(s.entries)}, dtype={s.dtype.name})"

    def __len__(self):
        return self._storage.n_slots

    # ------------------------------------------------------------------ #
    # Handles
    # ------------------------------------------------------------------ #
    def clone_handle(self) -> "Tape":
        """Return another handle to the *same* storage (not a copy)."""
        return Tape._from_storage(self._storage)

    def shares_storage(self, other: "Tape") -> bool:
        """True if ``other`` is a handle to the same underlying tape."""
        return isinstance(other, Tape) and other._storage is self._storage

    # ------------------------------------------------------------------ #
    # Read access
    # ------------------------------------------------------------------ #
    @property
    def dtype(self) -> np.dtype:
        return self._storage.dtype

    @property
    def n_slots(self) -> int:
        return self._storage.n_slots

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return tuple(self._storage.entries)

    # ------------------------------------------------------------------ #
    # Mutation
    # ------------------------------------------------------------------ #
    def allocate_leaf_slot(self) -> int:
        """Hand out the next slot without recording an entry (fresh leaf)."""
        s = self._storage
        slot = s.n_slots
        s.n_slots += 1
        return slot

    def record(self, operands: Iterable[Tuple[int, Any]], op_tag: str = "op") -> int:
        """
        Append an Entry for a new output slot and return that slot.
        `operands` is an iterable of at most two (operand_slot, local_partial) pairs;
        every operand slot must already exist, i.e. be lower than the new slot.
        """
        s = self._storage
        cast = s.dtype.type
        pairs = tuple((int(slot), cast(coeff)) for slot, coeff in operands)
        if len(pairs) > 2:
            raise ValueError(f"An entry takes at most two operands, got {len(pairs)}")
        slot = s.n_slots
        for operand_slot, _ in pairs:
            if not 0 <= operand_slot < slot:
                raise StaleSlotError(
                    f"Operand slot {operand_slot} is not below output slot {slot}; "
                    f"was the value created before the last tape reset?"
                )
        s.entries.append(Entry(slot=slot, operands=pairs, op_tag=op_tag))
        s.n_slots += 1
        return slot

    def reset(self):
        """
        Clear all entries and restart slot numbering at 0.

        Slots captured before the reset are meaningless afterwards: call
        ``reset()`` on every live variable right after this, in a fixed order.
        """
        s = self._storage
        logger.debug(f"[Tape] Reset ({s.n_slots} slots, {len(s.entries)} entries dropped)")
        s.entries.clear()
        s.n_slots = 0
