"""
Tape inspection helpers.
Print and analyse the structure of a recorded tape.
"""

from typing import Dict
from collections import Counter

import numpy as np

from .tape import Tape


def tape_summary(tape: Tape, detailed: bool = False, verbose: bool = False) -> Dict:
    """
    Collect (and optionally print) statistics about a tape.

    Args:
        tape: the Tape to inspect
        detailed: print the summary plus one line per entry (first 100
                  entries); implies verbose
        verbose: print the summary

    Returns:
        Dictionary with slot/entry/edge counts, fan-in/fan-out statistics
        and an op-tag breakdown. Empty dict for an empty tape.
    """
    verbose = verbose or detailed
    entries = tape.entries
    n_slots = tape.n_slots
    if n_slots == 0:
        if verbose:
            print("Empty tape")
        return {}

    n_entries = len(entries)
    n_edges = sum(len(e.operands) for e in entries)

    fan_ins = [len(e.operands) for e in entries]
    max_fan_in = max(fan_ins) if fan_ins else 0
    avg_fan_in = float(np.mean(fan_ins)) if fan_ins else 0.0

    # Fan-out: how many entries consume each slot
    fan_outs = [0] * n_slots
    for e in entries:
        for slot, _ in e.operands:
            if slot < n_slots:
                fan_outs[slot] += 1
    max_fan_out = max(fan_outs)
    avg_fan_out = float(np.mean(fan_outs))

    op_counter = Counter(e.op_tag for e in entries)

    if verbose:
        print("\n" + "="*70)
        print("TAPE SUMMARY")
        print("="*70)
        print(f"Total slots:        {n_slots:,}")
        print(f"Leaf slots:         {n_slots - n_entries:,}")
        print(f"Total entries:      {n_entries:,}")
        print(f"Total edges:        {n_edges:,}")
        print(f"Max fan-in:         {max_fan_in}")
        print(f"Avg fan-in:         {avg_fan_in:.2f}")
        print(f"Max fan-out:        {max_fan_out}")
        print(f"Avg fan-out:        {avg_fan_out:.2f}")
        print()
        print("Operation breakdown:")
        for op_type, count in op_counter.most_common(10):
            pct = 100.0 * count / max(n_entries, 1)
            print(f"  {op_type:12s}: {count:6,} ({pct:5.1f}%)")

        if detailed:
            print()
            print("="*70)
            print("DETAILED ENTRY LIST (first 100 entries)")
            print("="*70)
            for e in entries[:100]:
                operand_info = ", ".join(f"slot{s} * {c:.4g}" for s, c in e.operands)
                print(f"Slot {e.slot:4d}: {e.op_tag:10s} <- [{operand_info}]")

        print("="*70 + "\n")

    return {
        'slots': n_slots,
        'leaves': n_slots - n_entries,
        'entries': n_entries,
        'edges': n_edges,
        'max_fan_in': max_fan_in,
        'avg_fan_in': avg_fan_in,
        'max_fan_out': max_fan_out,
        'avg_fan_out': avg_fan_out,
        'op_counts': dict(op_counter),
    }
