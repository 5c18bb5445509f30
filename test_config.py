"""Tests for RelaxationConfig validation and derived values."""

import math

import numpy as np
import pytest

from config import (
    CAP_FLOOR, DEFAULT_CONFIG, InvalidArgumentError, RelaxationConfig,
    derived_initial_step, hexagonal_spacing, validate_positive,
    derived_displacement_cap, validate_count,
)


class TestValidateCount:

    @pytest.mark.parametrize("n", [0, 1, 17, np.int64(5)])
    def test_accepts_non_negative_integers(self, n):
        assert validate_count(n) == int(n)

    @pytest.mark.parametrize("n", [-1, 2.5, "4", None, True])
    def test_rejects_everything_else(self, n):
        with pytest.raises(InvalidArgumentError):
            validate_count(n)

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            validate_count(-3)


class TestRelaxationConfig:

    def test_defaults_are_valid(self):
        RelaxationConfig().validate()

    @pytest.mark.parametrize("field,value", [
        ("force_exponent", 0.0),
        ("force_exponent", -2.0),
        ("initial_step", 0.0),
        ("initial_step", -0.1),
        ("initial_step", math.nan),
        ("decay_rate", 0.0),
        ("decay_rate", 1.5),
        ("tolerance", 0.0),
        ("tolerance", -1e-6),
        ("max_iterations", -1),
        ("max_iterations", 10.5),
        ("max_displacement", 0.0),
        ("min_distance", 0.0),
        ("norm_floor", -1.0),
        ("schedule", "linear"),
        ("debug_every", -5),
    ])
    def test_rejects_out_of_domain(self, field, value):
        with pytest.raises(InvalidArgumentError):
            RelaxationConfig(**{field: value})

    def test_decay_rate_one_means_constant_step(self):
        cfg = RelaxationConfig(decay_rate=1.0)
        assert cfg.decay_rate == 1.0

    def test_replace_validates(self):
        cfg = DEFAULT_CONFIG.replace(initial_step=0.5)
        assert cfg.initial_step == 0.5
        with pytest.raises(InvalidArgumentError):
            DEFAULT_CONFIG.replace(tolerance=0.0)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.initial_step = 1.0

    def test_as_dict_lists_every_field(self):
        d = DEFAULT_CONFIG.as_dict()
        assert set(d) == {"force_exponent", "initial_step", "decay_rate", "schedule",
                          "tolerance", "max_iterations", "max_displacement",
                          "min_distance", "norm_floor", "debug_every"}


class TestDisplacementCap:

    def test_explicit_cap_wins(self):
        assert RelaxationConfig(max_displacement=0.05).displacement_cap(1000) == 0.05

    def test_derived_cap_shrinks_with_n(self):
        caps = [derived_displacement_cap(n) for n in (2, 16, 256, 4096)]
        assert all(a > b for a, b in zip(caps, caps[1:]))
        assert caps[0] == pytest.approx(0.26, abs=0.01)
        assert caps[-1] > CAP_FLOOR

    def test_default_config_uses_derived_cap(self):
        assert DEFAULT_CONFIG.displacement_cap(64) == derived_displacement_cap(64)


class TestDerivedStep:

    def test_explicit_step_wins(self):
        assert RelaxationConfig(initial_step=0.3).step_for(1000) == 0.3

    def test_default_config_derives_step_from_n(self):
        assert DEFAULT_CONFIG.initial_step is None
        assert DEFAULT_CONFIG.step_for(256) == derived_initial_step(256, DEFAULT_CONFIG.force_exponent)

    def test_step_shrinks_with_spacing_cubed(self):
        # quadrupling N halves the spacing; for k = 2 the step drops by 2^3
        ratio = derived_initial_step(1024, 2.0) / derived_initial_step(256, 2.0)
        assert ratio == pytest.approx(0.125)

    def test_step_follows_force_exponent(self):
        a = hexagonal_spacing(100)
        assert derived_initial_step(100, 3.0) / derived_initial_step(100, 2.0) == pytest.approx(
            (2.0 / 3.0) * a)

    def test_hexagonal_spacing(self):
        # N hexagons of side-to-side spacing a tile the sphere: N · (√3/2) a² = 4π
        for n in (12, 256, 4096):
            a = hexagonal_spacing(n)
            assert n * math.sqrt(3.0) / 2.0 * a * a == pytest.approx(4.0 * math.pi)

    @pytest.mark.parametrize("n", [0, 1])
    def test_trivial_sizes_are_finite(self, n):
        step = DEFAULT_CONFIG.step_for(n)
        assert math.isfinite(step) and step > 0.0


class TestNumericTypes:

    def test_numpy_scalars_are_accepted(self):
        cfg = RelaxationConfig(initial_step=np.float32(0.1), tolerance=np.float64(1e-5),
                               max_displacement=np.float32(0.05), max_iterations=np.int64(10))
        assert cfg.step_for(8) == pytest.approx(0.1)
        assert cfg.displacement_cap(8) == pytest.approx(0.05)

    def test_bool_is_not_a_number(self):
        with pytest.raises(InvalidArgumentError):
            RelaxationConfig(tolerance=True)

    def test_validate_positive(self):
        assert validate_positive(np.float32(0.5), "step") == 0.5
        for bad in (0.0, -1.0, math.inf, math.nan, "1", None):
            with pytest.raises(InvalidArgumentError):
                validate_positive(bad, "step")
