"""Quadric height field h = f(u, v) fitted over a covariance plane."""

from __future__ import annotations

import numpy as np

from .covariance_fit import CovarianceFit
from .dry_fit import FitResult


def _as_vector(value, name: str) -> np.ndarray:
    vector = np.array(value, dtype=float)
    if vector.ndim != 1:
        raise ValueError(f"{name} must be a one-dimensional vector")
    return vector


class MongePatch:
    """Best-fit quadric f(u,v) = huu u^2 + hvv v^2 + huv uv + hu u + hv v + hc.

    The fit needs two passes over the neighbours: the first estimates a tangent
    plane by covariance analysis, the second fits the height field expressed in
    that plane's frame. Only meaningful in 3D.
    """

    def __init__(self) -> None:
        self._plane = CovarianceFit()
        self._plane_ready = False
        self._a = np.zeros((6, 6))
        self._b = np.zeros(6)
        self._x = np.zeros(6)
        self.state = FitResult.UNDEFINED

    @property
    def basis_center(self) -> np.ndarray | None:
        return self._plane.basis_center

    def init(self, eval_pos) -> None:
        """Start a new fit around eval_pos."""
        center = _as_vector(eval_pos, "eval_pos")
        if center.shape[0] != 3:
            raise ValueError("a Monge patch is defined in 3D only")
        self._plane.init(center)
        self._plane_ready = False
        self._a = np.zeros((6, 6))
        self._b = np.zeros(6)
        self._x = np.zeros(6)
        self.state = FitResult.UNDEFINED

    def _require_init(self) -> np.ndarray:
        if self._plane.basis_center is None:
            raise RuntimeError("init() must be called first")
        return self._plane.basis_center

    def add_neighbor(self, weight: float, position) -> bool:
        """Add a neighbour given in world coordinates; non-positive weights are ignored."""
        center = self._require_init()
        w = float(weight)
        if w <= 0.0:
            return False
        position = _as_vector(position, "position")
        if position.shape != center.shape:
            raise ValueError("neighbour has the wrong dimension")
        if not self._plane_ready:
            return self._plane.add_local_neighbor(w, position - center)
        h, u, v = self.world_to_tangent_plane(position)
        p = np.array([u * u, v * v, u * v, u, v, 1.0])
        self._a += w * np.outer(p, p)
        self._b += w * h * p
        return True

    def finalize(self) -> FitResult:
        """End a pass: NEED_OTHER_PASS after the plane, STABLE after the quadric."""
        self._require_init()
        if not self._plane_ready:
            result = self._plane.finalize()
            if result is FitResult.STABLE:
                self._plane_ready = True
                self._a = np.zeros((6, 6))
                self._b = np.zeros(6)
                self.state = FitResult.NEED_OTHER_PASS
            else:
                self.state = result
            return self.state
        self._x = np.linalg.lstsq(self._a, self._b, rcond=None)[0]
        self.state = FitResult.STABLE
        return self.state

    def compute(self, points, weights=None) -> FitResult:
        """Run as many passes over the points as the fit needs."""
        self._require_init()
        points = np.asarray(points, dtype=float)
        if points.ndim != 2:
            raise ValueError("points must be a two-dimensional array")
        if weights is None:
            weights = np.ones(len(points))
        else:
            weights = np.asarray(weights, dtype=float)
            if weights.shape != (len(points),):
                raise ValueError("there must be one weight per point")
        while True:
            for weight, point in zip(weights, points):
                self.add_neighbor(weight, point)
            result = self.finalize()
            if result is not FitResult.NEED_OTHER_PASS:
                return result

    def _frame(self) -> np.ndarray:
        if not self._plane_ready:
            raise RuntimeError("the tangent plane has not been estimated")
        return self._plane.eigenvectors()

    def world_to_tangent_plane(self, q) -> np.ndarray:
        """Coordinates (h, u, v) of q in the tangent frame around the basis center."""
        frame = self._frame()
        q = _as_vector(q, "q")
        return frame.T @ (q - self._plane.basis_center)

    def tangent_plane_to_world(self, x) -> np.ndarray:
        """World position of tangent-frame coordinates (h, u, v)."""
        frame = self._frame()
        x = _as_vector(x, "x")
        return frame @ x + self._plane.basis_center

    def eval_uv(self, u: float, v: float) -> float:
        """Height of the patch above (u, v)."""
        huu, hvv, huv, hu, hv, hc = self._x
        return float(huu * u * u + hvv * v * v + huv * u * v + hu * u + hv * v + hc)

    def potential(self, q) -> float:
        """Height of the patch under q minus the height of q."""
        h, u, v = self.world_to_tangent_plane(q)
        return self.eval_uv(u, v) - float(h)

    def project(self, q) -> np.ndarray:
        """Move q along the plane normal onto the patch."""
        x = self.world_to_tangent_plane(q)
        x[0] = self.eval_uv(x[1], x[2])
        return self.tangent_plane_to_world(x)

    def primitive_gradient(self, q=None) -> np.ndarray:
        """Normal of the underlying tangent plane."""
        return self._frame()[:, 0].copy()

    def k_mean(self) -> float:
        """Estimate of the mean curvature."""
        huu, hvv, huv, hu, hv, _ = self._x
        numerator = (1.0 + hv ** 2) * huu * 2.0 * hu * hv * huv + (1.0 + hu ** 2) * hvv
        return float(numerator / (2.0 * (1.0 + hu ** 2 + hv ** 2) ** 1.5))

    def gaussian_curvature(self) -> float:
        """Estimate of the Gaussian curvature."""
        huu, hvv, huv, hu, hv, _ = self._x
        return float((huu * hvv - huv ** 2) / (1.0 + hu ** 2 + hv ** 2) ** 2)