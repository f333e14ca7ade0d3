"""Algebraic hypersphere primitive: the zero set of uc + ul.x + uq |x|^2."""

from __future__ import annotations

import numpy as np

_PRECISION = 1e-12


def _as_vector(value, name: str) -> np.ndarray:
    vector = np.array(value, dtype=float)
    if vector.ndim != 1:
        raise ValueError(f"{name} must be a one-dimensional vector")
    return vector


class AlgebraicSphere:
    """Scalar field s(x) = uc + ul.(x - b) + uq |x - b|^2 around a basis center b.

    The primitive is the zero isosurface of the field. With uq close to zero the
    field describes a hyperplane.
    """

    def __init__(self, uc: float, ul, uq: float, basis_center=None) -> None:
        self.uc = float(uc)
        self.ul = _as_vector(ul, "ul")
        self.uq = float(uq)
        if basis_center is None:
            self.basis_center = np.zeros_like(self.ul)
        else:
            self.basis_center = _as_vector(basis_center, "basis_center")
            if self.basis_center.shape != self.ul.shape:
                raise ValueError("basis_center and ul must have the same dimension")

    def _local(self, q) -> np.ndarray:
        q = _as_vector(q, "q")
        if q.shape != self.basis_center.shape:
            raise ValueError("query has the wrong dimension")
        return q - self.basis_center

    def is_plane(self) -> bool:
        """True when the quadratic term is negligible and the field is a plane."""
        return abs(self.uq) <= _PRECISION

    def pratt_norm2(self) -> float:
        """Squared Pratt norm |ul|^2 - 4 uc uq."""
        return float(self.ul @ self.ul - 4.0 * self.uc * self.uq)

    def pratt_norm(self) -> float:
        return float(np.sqrt(self.pratt_norm2()))

    def potential(self, q=None) -> float:
        """Value of the scalar field at q, or at the basis center when q is None."""
        if q is None:
            return self.uc
        lq = self._local(q)
        return float(self.uc + lq @ self.ul + self.uq * (lq @ lq))

    def primitive_gradient(self, q=None) -> np.ndarray:
        """Gradient of the scalar field at q, or at the basis center when q is None."""
        if q is None:
            return self.ul.copy()
        lq = self._local(q)
        return self.ul + 2.0 * self.uq * lq

    def project(self, q) -> np.ndarray:
        """Project q onto the primitive along the field gradient."""
        lq = self._local(q)
        potential = np.float64(self.uc + lq @ self.ul + self.uq * (lq @ lq))
        grad = self.ul + 2.0 * self.uq * lq
        norm = np.float64(np.linalg.norm(grad))
        with np.errstate(divide="ignore", invalid="ignore"):
            if self.is_plane():
                t = -potential / (norm * norm)
            else:
                t = -(norm - np.sqrt(norm * norm - 4.0 * self.uq * potential)) / (
                    2.0 * self.uq * norm
                )
            return self.basis_center + lq + t * grad

    def project_descent(self, q, iterations: int = 16) -> np.ndarray:
        """Project q onto the primitive with a few gradient-descent steps."""
        lq = self._local(q)
        with np.errstate(divide="ignore", invalid="ignore"):
            direction = self.ul + 2.0 * self.uq * lq
            ilg = np.float64(1.0) / np.linalg.norm(direction)
            direction = direction * ilg
            ad = self.uc + self.ul @ lq + self.uq * (lq @ lq)
            delta = -ad * min(ilg, 1.0)
            proj = lq + direction * delta
            for _ in range(iterations):
                grad = self.ul + 2.0 * self.uq * proj
                ilg = np.float64(1.0) / np.linalg.norm(grad)
                delta = -(self.uc + proj @ self.ul + self.uq * (proj @ proj)) * min(ilg, 1.0)
                proj = proj + direction * delta
            return proj + self.basis_center