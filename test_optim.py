"""
Tests for the optimizers and the minimize() driver.
"""

import numpy as np
import pytest

from tapegrad import (
    AdamW,
    AdamWConfig,
    OptimizationResult,
    Reverse,
    SimpleGradientDescent,
    Tape,
    TapeMismatchError,
    VariableCountError,
    derivatives,
    minimize,
)


def rosenbrock(x, y):
    return (Reverse.constant(1.0) - x).powi(2) + Reverse.constant(100.0) * (y - x.powi(2)).powi(2)


# ============================================================================
# CONFIG
# ============================================================================

def test_default_configuration():
    opt = AdamW.default(0.001)
    cfg = opt.config
    assert cfg.learning_rate == 0.001
    assert cfg.beta1 == 0.9
    assert cfg.beta2 == 0.999
    assert cfg.epsilon == 1e-8
    assert cfg.weight_decay == 0.01
    assert opt.t == 0
    assert opt.first_moment is None


@pytest.mark.parametrize("kwargs", [
    {"learning_rate": 0.0},
    {"learning_rate": -1.0},
    {"beta1": 1.0},
    {"beta2": -0.1},
    {"epsilon": 0.0},
    {"weight_decay": -0.01},
])
def test_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        AdamWConfig(**kwargs)


# ============================================================================
# ADAMW
# ============================================================================

def test_adamw_single_step():
    tape = Tape()
    x = Reverse.reversible(3.41, tape)
    d = derivatives(x)          # g = 1.0
    opt = AdamW(AdamWConfig(learning_rate=0.001, weight_decay=0.0))
    opt.step(d, [x])

    assert opt.t == 1
    assert opt.first_moment[0] == pytest.approx(0.1)
    assert opt.second_moment[0] == pytest.approx(0.001)
    assert x.value == pytest.approx(3.41 - 0.001 * 1.0 / (1.0 + 1e-8))
    assert x.value == pytest.approx(3.409)
    # tape binding untouched
    assert x.tape.shares_storage(tape)
    assert x.slot == 0


def test_adamw_weight_decay_applied_before_update():
    tape = Tape()
    x = Reverse.reversible(2.0, tape)
    d = derivatives(Reverse.constant(0.0) * x)    # g = 0
    opt = AdamW(AdamWConfig(learning_rate=0.1, weight_decay=0.5))
    opt.step(d, [x])
    # zero gradient: only the decay moves the value
    assert x.value == pytest.approx(2.0 - 0.1 * 0.5 * 2.0)


def test_adamw_moments_persist_across_steps():
    tape = Tape()
    x = Reverse.reversible(1.0, tape)
    y = Reverse.reversible(1.0, tape)
    opt = AdamW(AdamWConfig(learning_rate=0.01, weight_decay=0.0))
    for _ in range(2):
        tape.reset()
        x.reset()
        y.reset()
        opt.step(derivatives(x * 2.0 + y * 0.0), [x, y])
    assert opt.t == 2
    # m2 = 0.9 * 0.2 + 0.1 * 2 = 0.38
    assert opt.first_moment[0] == pytest.approx(0.38)
    assert opt.first_moment[1] == 0.0
    assert y.value == pytest.approx(1.0)


def test_adamw_variable_count_mismatch():
    tape = Tape()
    x = Reverse.reversible(1.0, tape)
    y = Reverse.reversible(1.0, tape)
    opt = AdamW.default(0.01)
    d = derivatives(x * y)
    opt.step(d, [x, y])
    with pytest.raises(VariableCountError):
        opt.step(d, [x])
    assert opt.t == 1


def test_adamw_keeps_float32_values():
    tape = Tape(np.float32)
    x = Reverse.reversible(1.0, tape)
    AdamW.default(0.01).step(derivatives(x * x), [x])
    assert isinstance(x.value, np.float32)


def test_adamw_rosenbrock_decreases_monotonically():
    tape = Tape()
    x = Reverse.reversible(3.41, tape)
    y = Reverse.reversible(2.0, tape)
    opt = AdamW.default(0.001)

    losses = []
    for _ in range(500):
        tape.reset()
        x.reset()
        y.reset()
        z = rosenbrock(x, y)
        losses.append(float(z.value))
        opt.step(derivatives(z), [x, y])

    assert all(b < a for a, b in zip(losses, losses[1:]))
    assert losses[-1] < 0.5 * losses[0]


# ============================================================================
# SIMPLE GRADIENT DESCENT
# ============================================================================

def test_simple_gradient_descent_step():
    tape = Tape()
    x = Reverse.reversible(3.0, tape)
    SimpleGradientDescent(0.1).step(derivatives(x * x), [x])
    assert x.value == pytest.approx(2.4)


def test_simple_gradient_descent_rejects_bad_rate():
    with pytest.raises(ValueError):
        SimpleGradientDescent(0.0)


# ============================================================================
# MINIMIZE
# ============================================================================

def test_minimize_rosenbrock():
    tape = Tape()
    x = Reverse.reversible(3.41, tape)
    y = Reverse.reversible(2.0, tape)
    seen = []

    result = minimize(
        lambda v: rosenbrock(v[0], v[1]),
        [x, y],
        tape,
        AdamW.default(0.001),
        300,
        callback=lambda it, loss, d: seen.append(it),
    )

    assert isinstance(result, OptimizationResult)
    assert result.n_steps == 300
    assert len(result.loss_history) == 300
    assert seen == list(range(300))
    assert result.final_loss < result.loss_history[-1] < result.loss_history[0]
    assert result.values == [float(x.value), float(y.value)]


def test_minimize_quadratic_with_gradient_descent():
    tape = Tape()
    x = Reverse.reversible(5.0, tape)
    result = minimize(lambda v: (v[0] - 1.0).powi(2), [x], tape, SimpleGradientDescent(0.1), 200)
    assert result.values[0] == pytest.approx(1.0, abs=1e-6)
    assert result.final_loss == pytest.approx(0.0, abs=1e-10)


def test_minimize_rejects_foreign_variables():
    tape = Tape()
    x = Reverse.reversible(1.0, Tape())
    with pytest.raises(TapeMismatchError):
        minimize(lambda v: v[0] * v[0], [x], tape, SimpleGradientDescent(0.1), 1)


def test_minimize_logs_progress(caplog):
    tape = Tape()
    x = Reverse.reversible(2.0, tape)
    with caplog.at_level("INFO", logger="tapegrad"):
        minimize(lambda v: v[0] * v[0], [x], tape, SimpleGradientDescent(0.1), 4,
                 verbose=True, log_every=2)
    messages = [r.getMessage() for r in caplog.records]
    assert any("Iteration 2" in m for m in messages)
    assert any("Iteration 4" in m for m in messages)
