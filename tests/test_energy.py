"""Tests for the spring energy model."""

import math

import numpy as np
import pytest

from kklayout.distances import distance_matrix
from kklayout.energy import SpringModel, build_spring_model, unit_length


def create_model(kkconst=3.0, edge_length=None):
    """Spring model for a 5-vertex graph with a cycle and a pendant vertex."""
    edges = [(0, 1), (1, 2), (2, 3), (3, 0), (3, 4)]
    return build_spring_model(distance_matrix(5, edges), kkconst, edge_length)


def random_coords(n=5, seed=0):
    return np.random.default_rng(seed).uniform(-2.0, 2.0, size=(n, 2))


def numeric_gradient(model, coords, m, h=1e-6):
    grad = np.zeros(2)
    for axis in range(2):
        plus = coords.copy()
        minus = coords.copy()
        plus[m, axis] += h
        minus[m, axis] -= h
        grad[axis] = (model.energy(plus) - model.energy(minus)) / (2 * h)
    return grad


class TestSpringModel:
    """Spring constants and ideal lengths."""

    def test_constants(self):
        dist = np.array([[0.0, 1.0, 2.0], [1.0, 0.0, 1.0], [2.0, 1.0, 0.0]])
        model = build_spring_model(dist, kkconst=10.0, edge_length=5.0)
        assert model.k[0, 1] == pytest.approx(10.0)
        assert model.k[0, 2] == pytest.approx(2.5)
        assert model.l[0, 2] == pytest.approx(10.0)
        np.testing.assert_array_equal(np.diag(model.k), np.zeros(3))
        np.testing.assert_array_equal(np.diag(model.l), np.zeros(3))

    def test_automatic_unit_length(self):
        dist = np.array([[0.0, 2.0], [2.0, 0.0]])
        assert unit_length(dist) == pytest.approx(math.sqrt(2) / 2)
        model = build_spring_model(dist, kkconst=1.0)
        assert model.l[0, 1] == pytest.approx(math.sqrt(2))

    def test_symmetric(self):
        model = create_model()
        np.testing.assert_allclose(model.k, model.k.T)
        np.testing.assert_allclose(model.l, model.l.T)

    def test_n(self):
        assert create_model().n == 5


class TestEnergy:
    """Energy, gradient and Hessian evaluation."""

    def test_zero_at_ideal_length(self):
        model = SpringModel(k=np.array([[0.0, 1.0], [1.0, 0.0]]), l=np.array([[0.0, 2.0], [2.0, 0.0]]))
        coords = np.array([[0.0, 0.0], [2.0, 0.0]])
        assert model.energy(coords) == pytest.approx(0.0)
        np.testing.assert_allclose(model.gradients(coords), np.zeros((2, 2)), atol=1e-12)

    def test_energy_of_stretched_spring(self):
        model = SpringModel(k=np.array([[0.0, 4.0], [4.0, 0.0]]), l=np.array([[0.0, 1.0], [1.0, 0.0]]))
        coords = np.array([[0.0, 0.0], [0.0, 3.0]])
        assert model.energy(coords) == pytest.approx(0.5 * 4.0 * 2.0**2)

    def test_gradient_matches_finite_differences(self):
        model = create_model()
        coords = random_coords()
        for m in range(model.n):
            np.testing.assert_allclose(
                model.gradient(coords, m), numeric_gradient(model, coords, m), rtol=1e-5, atol=1e-7
            )

    def test_gradients_match_single_vertex(self):
        model = create_model()
        coords = random_coords(seed=3)
        all_grads = model.gradients(coords)
        for m in range(model.n):
            np.testing.assert_allclose(all_grads[m], model.gradient(coords, m))

    def test_hessian_matches_finite_differences(self):
        model = create_model()
        coords = random_coords(seed=1)
        h = 1e-6
        for m in range(model.n):
            a, b, c = model.hessian(coords, m)
            plus = coords.copy()
            minus = coords.copy()
            plus[m, 0] += h
            minus[m, 0] -= h
            dgx = (model.gradient(plus, m) - model.gradient(minus, m)) / (2 * h)
            assert a == pytest.approx(dgx[0], rel=1e-4, abs=1e-6)
            assert b == pytest.approx(dgx[1], rel=1e-4, abs=1e-6)

            plus = coords.copy()
            minus = coords.copy()
            plus[m, 1] += h
            minus[m, 1] -= h
            dgy = (model.gradient(plus, m) - model.gradient(minus, m)) / (2 * h)
            assert c == pytest.approx(dgy[1], rel=1e-4, abs=1e-6)

    def test_coincident_vertices_ignored(self):
        model = create_model()
        coords = random_coords()
        coords[1] = coords[0]
        grads = model.gradients(coords)
        assert np.all(np.isfinite(grads))
        assert np.all(np.isfinite(model.hessian(coords, 0)))

    def test_contribution_tracks_moves(self):
        """Moving a vertex changes other gradients by the difference of contributions."""
        model = create_model()
        coords = random_coords(seed=2)
        before = model.gradients(coords)
        old = coords[2].copy()
        new = old + np.array([0.3, -0.7])

        expected = before - model.contribution(coords, 2, old) + model.contribution(coords, 2, new)
        coords[2] = new
        after = model.gradients(coords)

        mask = np.arange(model.n) != 2
        np.testing.assert_allclose(expected[mask], after[mask], atol=1e-12)

    def test_kkconst_scales_energy(self):
        coords = random_coords(seed=4)
        low = create_model(kkconst=1.0).energy(coords)
        high = create_model(kkconst=10.0).energy(coords)
        assert high == pytest.approx(10.0 * low)
