import numpy as np
import pytest

from pointfit.covariance_fit import CovarianceFit, CovarianceFitDer
from pointfit.dry_fit import FitResult


def _fit(points, weights=None, eval_pos=None):
    points = np.asarray(points, dtype=float)
    fit = CovarianceFit()
    center = np.zeros(points.shape[1]) if eval_pos is None else np.asarray(eval_pos, dtype=float)
    fit.init(center)
    if weights is None:
        weights = np.ones(len(points))
    for w, p in zip(weights, points):
        fit.add_local_neighbor(w, p - center)
    fit.finalize()
    return fit


def _planar_points(rng, n=50):
    direction = np.array([1.0, 2.0, -0.5])
    direction /= np.linalg.norm(direction)
    tangents = np.linalg.svd(direction[None, :])[2][1:]
    uv = rng.uniform(-3.0, 3.0, (n, 2))
    return uv @ tangents + np.array([0.5, -1.0, 2.0]), direction


def test_planar_points_have_no_surface_variation():
    rng = np.random.default_rng(1)
    points, direction = _planar_points(rng)
    fit = _fit(points, eval_pos=points[0])
    assert fit.state is FitResult.STABLE
    assert abs(fit.surface_variation()) < 1e-10
    normal = fit.eigenvectors()[:, 0]
    assert abs(abs(normal @ direction) - 1.0) < 1e-10


def test_isotropic_cube_corners_have_unit_variation():
    corners = np.array([[x, y, z] for x in (-1, 1) for y in (-1, 1) for z in (-1, 1)], dtype=float)
    fit = _fit(corners)
    assert fit.state is FitResult.STABLE
    assert fit.surface_variation() == pytest.approx(1.0)


def test_eigenvalues_match_population_covariance():
    rng = np.random.default_rng(2)
    points = rng.normal(size=(40, 3)) * np.array([3.0, 1.0, 0.2])
    fit = _fit(points)
    expected = np.linalg.eigvalsh(np.cov(points.T, bias=True))
    assert np.allclose(fit.eigenvalues(), expected)
    assert np.all(np.diff(fit.eigenvalues()) >= 0)


def test_eigenvectors_are_orthonormal():
    rng = np.random.default_rng(3)
    points = rng.normal(size=(20, 3))
    vectors = _fit(points).eigenvectors()
    assert np.allclose(vectors.T @ vectors, np.eye(3))


def test_barycenter_is_weighted_mean_in_local_frame():
    rng = np.random.default_rng(4)
    points = rng.normal(size=(10, 3))
    weights = rng.uniform(0.5, 2.0, 10)
    center = np.array([1.0, 1.0, 1.0])
    fit = _fit(points, weights, eval_pos=center)
    expected = np.average(points, axis=0, weights=weights) - center
    assert np.allclose(fit.barycenter(), expected)


def test_fewer_than_three_neighbors_is_undefined():
    fit = _fit([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
    assert fit.state is FitResult.UNDEFINED
    assert fit.surface_variation() == 0.0
    with pytest.raises(RuntimeError):
        fit.eigenvalues()


def test_surface_variation_is_zero_before_finalize():
    fit = CovarianceFit()
    fit.init([0.0, 0.0, 0.0])
    for p in ([1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]):
        fit.add_local_neighbor(1.0, p)
    assert fit.surface_variation() == 0.0
    assert fit.nb_neighbors == 3


def test_add_before_init_raises():
    with pytest.raises(RuntimeError):
        CovarianceFit().add_local_neighbor(1.0, [0.0, 0.0, 0.0])


def test_wrong_dimension_raises():
    fit = CovarianceFit()
    fit.init([0.0, 0.0, 0.0])
    with pytest.raises(ValueError):
        fit.add_local_neighbor(1.0, [0.0, 0.0])


def test_init_forgets_previous_neighbors():
    fit = _fit(np.eye(3) * 2.0)
    fit.init([0.0, 0.0, 0.0])
    assert fit.nb_neighbors == 0
    assert fit.sum_w == 0.0
    assert fit.finalize() is FitResult.UNDEFINED


def test_derivative_with_unit_weight_derivative_is_scatter_matrix():
    rng = np.random.default_rng(5)
    points = rng.normal(size=(15, 3))
    fit = CovarianceFitDer(1)
    fit.init(np.zeros(3))
    for p in points:
        fit.add_local_neighbor(1.0, p, [1.0])
    assert fit.finalize() is FitResult.STABLE
    expected = len(points) * np.cov(points.T, bias=True)
    assert np.allclose(fit.d_cov()[0], expected)


def test_derivative_with_zero_weight_derivatives_is_zero():
    rng = np.random.default_rng(6)
    fit = CovarianceFitDer(4)
    fit.init(np.zeros(3))
    for p in rng.normal(size=(8, 3)):
        fit.add_local_neighbor(1.0, p, np.zeros(4))
    fit.finalize()
    d_cov = fit.d_cov()
    assert d_cov.shape == (4, 3, 3)
    assert np.allclose(d_cov, 0.0)


def test_derivative_not_completed_when_undefined():
    fit = CovarianceFitDer(1)
    fit.init(np.zeros(3))
    q = np.array([1.0, 2.0, 3.0])
    fit.add_local_neighbor(1.0, q, [2.0])
    assert fit.finalize() is FitResult.UNDEFINED
    assert np.allclose(fit.d_cov()[0], 2.0 * np.outer(q, q))


def test_derivative_rejects_wrong_dw_length():
    fit = CovarianceFitDer(2)
    fit.init(np.zeros(3))
    with pytest.raises(ValueError):
        fit.add_local_neighbor(1.0, [1.0, 0.0, 0.0], [1.0])


def test_negative_derivative_count_rejected():
    with pytest.raises(ValueError):
        CovarianceFitDer(-1)