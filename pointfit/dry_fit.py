"""Fitting states and a fitting object that computes nothing."""

from __future__ import annotations

from enum import Enum

import numpy as np


class FitResult(Enum):
    """State of a fitting procedure."""

    STABLE = 0
    UNSTABLE = 1
    UNDEFINED = 2
    NEED_OTHER_PASS = 3


class DryFit:
    """Fit that only counts its neighbours; its primitive is a null field."""

    def __init__(self) -> None:
        self.nb_neighbors = 0
        self.sum_w = 0.0
        self.state = FitResult.UNDEFINED
        self.dimension = 3
        self.weight_func = None

    def add_local_neighbor(self, weight: float, local_q, attributes=None) -> bool:
        """Record a neighbour given in local coordinates."""
        self.dimension = len(np.asarray(local_q))
        self.nb_neighbors += 1
        self.sum_w += float(weight)
        return True

    def finalize(self) -> FitResult:
        if self.sum_w == 0.0 or self.nb_neighbors < 1:
            self.state = FitResult.UNDEFINED
        else:
            self.state = FitResult.STABLE
        return self.state

    def set_weight_func(self, weight_func) -> None:
        """Store the weight function; it plays no part in the null field."""
        self.weight_func = weight_func

    def potential(self, q=None) -> float:
        """Value of the null scalar field, zero everywhere."""
        if q is None:
            return 0.0
        point = np.asarray(q, dtype=float)
        return float(np.zeros_like(point).sum())

    def project(self, q) -> np.ndarray:
        return np.array(q, dtype=float)

    def primitive_gradient(self, q=None) -> np.ndarray:
        size = self.dimension if q is None else len(np.asarray(q))
        return np.zeros(size)