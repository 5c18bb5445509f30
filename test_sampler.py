"""Tests for the white-noise sphere sampler."""

import numpy as np
import pytest

from config import InvalidArgumentError
from sampler import sample, to_generator


class TestSample:

    def test_empty_set(self):
        pts = sample(0, 1)
        assert pts.shape == (0, 3)
        assert pts.dtype == np.float64

    def test_single_point_is_unit(self):
        pts = sample(1, 1)
        assert pts.shape == (1, 3)
        assert np.linalg.norm(pts[0]) == pytest.approx(1.0, abs=1e-12)

    def test_unit_norm_and_layout(self):
        pts = sample(500, 3)
        assert pts.flags['C_CONTIGUOUS']
        np.testing.assert_allclose(np.linalg.norm(pts, axis=1), 1.0, atol=1e-12)

    def test_seeded_is_deterministic(self):
        np.testing.assert_array_equal(sample(50, 9), sample(50, 9))
        assert not np.array_equal(sample(50, 9), sample(50, 10))

    def test_generator_is_consumed(self):
        gen = np.random.default_rng(4)
        a = sample(10, gen)
        b = sample(10, gen)
        assert not np.array_equal(a, b)

    def test_uniform_not_polar_clustered(self):
        """z is uniform on [-1, 1] for a uniform sphere (Archimedes)."""
        pts = sample(20000, 123)
        z = pts[:, 2]
        assert abs(z.mean()) < 0.03
        hist, _ = np.histogram(z, bins=10, range=(-1.0, 1.0))
        assert hist.min() > 0.85 * hist.mean()
        assert hist.max() < 1.15 * hist.mean()
        np.testing.assert_allclose(pts.mean(axis=0), 0.0, atol=0.03)

    def test_negative_count_rejected(self):
        with pytest.raises(InvalidArgumentError):
            sample(-1, 0)


class TestToGenerator:

    def test_passes_generator_through(self):
        gen = np.random.default_rng(0)
        assert to_generator(gen) is gen

    def test_seed_and_none(self):
        assert isinstance(to_generator(5), np.random.Generator)
        assert isinstance(to_generator(None), np.random.Generator)

    @pytest.mark.parametrize("rng", ["seed", 1.5, True, object()])
    def test_rejects_other_sources(self, rng):
        with pytest.raises(InvalidArgumentError):
            to_generator(rng)
