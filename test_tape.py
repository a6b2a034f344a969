"""
Tests for the tape: slot accounting, shared handles, reset and summaries.
"""

import numpy as np
import pytest

from tapegrad import Entry, Reverse, StaleSlotError, Tape, tape_summary


def test_new_tape_is_empty():
    tape = Tape()
    assert tape.n_slots == 0
    assert len(tape) == 0
    assert tape.entries == ()
    assert tape.dtype == np.float64


def test_leaf_slots_allocate_without_entries():
    tape = Tape()
    assert tape.allocate_leaf_slot() == 0
    assert tape.allocate_leaf_slot() == 1
    assert tape.n_slots == 2
    assert tape.entries == ()


def test_record_returns_fresh_output_slot():
    tape = Tape()
    a = tape.allocate_leaf_slot()
    b = tape.allocate_leaf_slot()
    out = tape.record([(a, 2.0), (b, 3.0)], op_tag="mul")
    assert out == 2
    assert tape.n_slots == 3
    assert tape.entries == (Entry(slot=2, operands=((0, 2.0), (1, 3.0)), op_tag="mul"),)


def test_record_rejects_more_than_two_operands():
    tape = Tape()
    for _ in range(3):
        tape.allocate_leaf_slot()
    with pytest.raises(ValueError):
        tape.record([(0, 1.0), (1, 1.0), (2, 1.0)])
    assert tape.n_slots == 3


def test_record_rejects_operand_slot_not_yet_allocated():
    tape = Tape()
    tape.allocate_leaf_slot()
    with pytest.raises(StaleSlotError):
        tape.record([(7, 1.0)])
    with pytest.raises(StaleSlotError):
        tape.record([(1, 1.0)])      # its own output slot
    with pytest.raises(ValueError):
        tape.record([(0, 1.0), (-1, 1.0)])
    assert tape.n_slots == 1
    assert tape.entries == ()


def test_clone_handle_shares_storage():
    tape = Tape()
    other = tape.clone_handle()
    assert other is not tape
    assert other.shares_storage(tape)
    other.allocate_leaf_slot()
    assert tape.n_slots == 1
    tape.reset()
    assert other.n_slots == 0
    assert not Tape().shares_storage(tape)


def test_reset_clears_entries_and_counter():
    tape = Tape()
    x = Reverse.reversible(2.0, tape)
    _ = x * x + x
    assert tape.n_slots == 3
    tape.reset()
    assert tape.n_slots == 0
    assert tape.entries == ()
    x.reset()
    assert x.slot == 0


def test_operand_slots_precede_output_slot():
    tape = Tape()
    x = Reverse.reversible(1.3, tape)
    y = Reverse.reversible(0.7, tape)
    _ = (x * y).sin() + (x / y).exp() - y.powi(3)
    for entry in tape.entries:
        assert entry.operands
        for slot, _ in entry.operands:
            assert slot < entry.slot


def test_non_float_dtype_rejected():
    with pytest.raises(TypeError):
        Tape(np.int64)


def test_float32_tape_coefficients():
    tape = Tape(np.float32)
    x = Reverse.reversible(1.5, tape)
    _ = x * 2.0
    (entry,) = tape.entries
    assert isinstance(entry.operands[0][1], np.float32)


def test_tape_summary():
    tape = Tape()
    assert tape_summary(tape) == {}

    x = Reverse.reversible(2.0, tape)
    y = Reverse.reversible(3.0, tape)
    _ = x * y + x
    summary = tape_summary(tape)
    assert summary["slots"] == 4
    assert summary["leaves"] == 2
    assert summary["entries"] == 2
    assert summary["edges"] == 4
    assert summary["max_fan_in"] == 2
    assert summary["max_fan_out"] == 2   # x feeds both mul and add
    assert summary["op_counts"] == {"mul": 1, "add": 1}


def test_tape_summary_prints(capsys):
    tape = Tape()
    x = Reverse.reversible(2.0, tape)
    _ = x.exp()
    tape_summary(tape, detailed=True, verbose=True)
    out = capsys.readouterr().out
    assert "TAPE SUMMARY" in out
    assert "exp" in out


def test_enable_debug_logging_reports_resets(caplog):
    import logging
    from tapegrad.config import enable_debug_logging

    handler = enable_debug_logging()
    try:
        assert logging.getLogger("tapegrad").level == logging.DEBUG
        tape = Tape()
        Reverse.reversible(1.0, tape)
        with caplog.at_level(logging.DEBUG, logger="tapegrad"):
            tape.reset()
        assert any("[Tape] Reset" in r.getMessage() for r in caplog.records)
    finally:
        logging.getLogger("tapegrad").removeHandler(handler)
        logging.getLogger("tapegrad").setLevel(logging.NOTSET)


def test_tape_summary_detailed_prints_without_verbose(capsys):
    tape = Tape()
    x = Reverse.reversible(2.0, tape)
    _ = x.sin()
    summary = tape_summary(tape, detailed=True)
    out = capsys.readouterr().out
    assert "DETAILED ENTRY LIST" in out
    assert "sin" in out
    assert summary["entries"] == 1
