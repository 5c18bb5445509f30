"""Tests for point-set quality metrics."""

import math

import numpy as np
import pytest

from analysis import (max_norm_error, min_angular_separation, nearest_neighbor_angles,
                      riesz_energy, summarize)
from sampler import sample

OCTAHEDRON = np.array([[1, 0, 0], [-1, 0, 0], [0, 1, 0],
                       [0, -1, 0], [0, 0, 1], [0, 0, -1]], dtype=np.float64)
ANTIPODAL = np.array([[0.0, 0.0, 1.0], [0.0, 0.0, -1.0]])


class TestNearestNeighbor:

    def test_octahedron(self):
        np.testing.assert_allclose(nearest_neighbor_angles(OCTAHEDRON), math.pi / 2)
        assert min_angular_separation(OCTAHEDRON) == pytest.approx(math.pi / 2)

    def test_matches_brute_force(self):
        pts = sample(50, 21)
        cos = np.clip(pts @ pts.T, -1.0, 1.0)
        np.fill_diagonal(cos, -np.inf)
        expected = np.arccos(cos.max(axis=1))
        np.testing.assert_allclose(nearest_neighbor_angles(pts), expected, atol=1e-9)

    def test_small_sets(self):
        assert nearest_neighbor_angles(np.zeros((0, 3))).size == 0
        assert nearest_neighbor_angles(sample(1, 0)).size == 0
        assert min_angular_separation(sample(1, 0)) == math.pi

    def test_coincident_points_have_zero_separation(self):
        pts = np.array([[0.0, 0.0, 1.0], [0.0, 0.0, 1.0], [1.0, 0.0, 0.0]])
        assert min_angular_separation(pts) == pytest.approx(0.0, abs=1e-7)


class TestRieszEnergy:

    def test_antipodal_pair(self):
        assert riesz_energy(ANTIPODAL, s=1.0) == pytest.approx(0.5)
        assert riesz_energy(ANTIPODAL, s=2.0) == pytest.approx(0.25)
        assert riesz_energy(ANTIPODAL, s=0.0) == pytest.approx(-math.log(2.0))

    def test_octahedron(self):
        # 12 edges at sqrt(2), 3 diameters at 2
        expected = 12 / math.sqrt(2.0) + 3 / 2.0
        assert riesz_energy(OCTAHEDRON, s=1.0) == pytest.approx(expected)

    def test_small_sets_have_zero_energy(self):
        assert riesz_energy(np.zeros((0, 3))) == 0.0
        assert riesz_energy(sample(1, 3)) == 0.0

    def test_negative_s_rejected(self):
        with pytest.raises(ValueError):
            riesz_energy(OCTAHEDRON, s=-1.0)


class TestSummary:

    def test_norm_error(self):
        assert max_norm_error(OCTAHEDRON) == 0.0
        assert max_norm_error(OCTAHEDRON * 1.5) == pytest.approx(0.5)
        assert max_norm_error(np.zeros((0, 3))) == 0.0

    def test_summarize_regular_set(self):
        s = summarize(OCTAHEDRON)
        assert s["n"] == 6
        assert s["min_angle"] == pytest.approx(math.pi / 2)
        assert s["nn_angle_cv"] == pytest.approx(0.0, abs=1e-12)

    def test_summarize_single_point(self):
        s = summarize(sample(1, 0))
        assert s["n"] == 1
        assert s["min_angle"] == math.pi
