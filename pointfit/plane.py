"""Implicit hyperplane primitive."""

from __future__ import annotations

import numpy as np

_PRECISION = 1e-12


def _as_vector(value, name: str) -> np.ndarray:
    vector = np.array(value, dtype=float)
    if vector.ndim != 1:
        raise ValueError(f"{name} must be a one-dimensional vector")
    return vector


class Plane:
    """Hyperplane n.x + d = 0, expressed around a basis center."""

    def __init__(self, basis_center) -> None:
        self.basis_center = _as_vector(basis_center, "basis_center")
        self.normal = np.zeros_like(self.basis_center)
        self.offset = 0.0

    @property
    def coeffs(self) -> np.ndarray:
        return np.append(self.normal, self.offset)

    def _local(self, q) -> np.ndarray:
        q = _as_vector(q, "q")
        if q.shape != self.basis_center.shape:
            raise ValueError("query has the wrong dimension")
        return q - self.basis_center

    def set_plane(self, direction, position) -> None:
        """Set the plane from a direction (any length) and a position in the local frame."""
        direction = _as_vector(direction, "direction")
        position = _as_vector(position, "position")
        if direction.shape != self.basis_center.shape or position.shape != direction.shape:
            raise ValueError("direction and position must match the plane dimension")
        length = np.linalg.norm(direction)
        self.normal = direction / length if length > 0 else direction
        self.offset = float(-(self.normal @ position))

    def is_valid(self) -> bool:
        """False until the plane has been set to non-zero coefficients."""
        return bool(np.any(self.coeffs != 0.0))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Plane):
            return NotImplemented
        a, b = self.coeffs, other.coeffs
        if a.shape != b.shape:
            return False
        bound = _PRECISION * min(np.linalg.norm(a), np.linalg.norm(b))
        return bool(np.linalg.norm(a - b) <= bound)

    __hash__ = None

    def potential(self, q=None) -> float:
        """Signed distance from q (or the basis center) to the plane."""
        if q is None:
            return self.offset
        return float(self.normal @ self._local(q) + self.offset)

    def project(self, q) -> np.ndarray:
        local = self._local(q)
        distance = self.normal @ local + self.offset
        return local - distance * self.normal + self.basis_center

    def primitive_gradient(self, q=None) -> np.ndarray:
        """Uniform gradient: the plane normal."""
        return self.normal.copy()