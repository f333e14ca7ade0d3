"""Covariance analysis of neighbourhoods, and its derivatives."""

from __future__ import annotations

import numpy as np

from .dry_fit import FitResult

_READY_STATES = (FitResult.STABLE, FitResult.UNSTABLE)


def _as_vector(value, name: str) -> np.ndarray:
    vector = np.array(value, dtype=float)
    if vector.ndim != 1:
        raise ValueError(f"{name} must be a one-dimensional vector")
    return vector


class CovarianceFit:
    """Accumulates neighbours around an evaluation point and analyses their covariance.

    Neighbours are given in local coordinates, relative to the evaluation point.
    After finalize(), the eigen decomposition of the centred covariance matrix is
    available, with eigenvalues in increasing order.
    """

    def __init__(self) -> None:
        self.basis_center: np.ndarray | None = None
        self.state = FitResult.UNDEFINED
        self.nb_neighbors = 0
        self.sum_w = 0.0
        self.covariance: np.ndarray | None = None
        self._sum_p: np.ndarray | None = None
        self._cov_sum: np.ndarray | None = None
        self._eigenvalues: np.ndarray | None = None
        self._eigenvectors: np.ndarray | None = None

    def init(self, eval_pos) -> None:
        """Start a new fit around eval_pos, forgetting every accumulated neighbour."""
        center = _as_vector(eval_pos, "eval_pos")
        dim = center.shape[0]
        self.basis_center = center
        self.state = FitResult.UNDEFINED
        self.nb_neighbors = 0
        self.sum_w = 0.0
        self.covariance = None
        self._sum_p = np.zeros(dim)
        self._cov_sum = np.zeros((dim, dim))
        self._eigenvalues = None
        self._eigenvectors = None

    def _dimension(self) -> int:
        if self.basis_center is None:
            raise RuntimeError("init() must be called first")
        return self.basis_center.shape[0]

    def _local_vector(self, local_q) -> np.ndarray:
        q = _as_vector(local_q, "local_q")
        if q.shape[0] != self._dimension():
            raise ValueError("neighbour has the wrong dimension")
        return q

    def add_local_neighbor(self, weight: float, local_q) -> bool:
        """Add a neighbour given relative to the evaluation point."""
        q = self._local_vector(local_q)
        w = float(weight)
        self.nb_neighbors += 1
        self.sum_w += w
        self._sum_p += w * q
        self._cov_sum += np.outer(q, q)
        return True

    def barycenter(self) -> np.ndarray:
        """Weighted mean of the neighbours, in local coordinates."""
        self._dimension()
        if self.sum_w == 0.0:
            raise ZeroDivisionError("no weighted neighbour was added")
        return self._sum_p / self.sum_w

    def finalize(self) -> FitResult:
        """Centre the covariance on the barycenter and decompose it."""
        self._dimension()
        self._eigenvalues = None
        self._eigenvectors = None
        if self.sum_w == 0.0 or self.nb_neighbors < 3:
            self.state = FitResult.UNDEFINED
            return self.state

        centroid = self.barycenter()
        self.covariance = self._cov_sum / self.sum_w - np.outer(centroid, centroid)
        try:
            values, vectors = np.linalg.eigh(self.covariance)
        except np.linalg.LinAlgError:
            self.state = FitResult.UNDEFINED
            return self.state
        if not (np.all(np.isfinite(values)) and np.all(np.isfinite(vectors))):
            self.state = FitResult.UNDEFINED
            return self.state

        self._eigenvalues = values
        self._eigenvectors = vectors
        self.state = FitResult.STABLE
        return self.state

    def surface_variation(self) -> float:
        """Smallest eigenvalue over the mean eigenvalue; 0 for invalid fits."""
        if self.state not in _READY_STATES or self._eigenvalues is None:
            return 0.0
        return float(self._eigenvalues[0] / self._eigenvalues.mean())

    def eigenvalues(self) -> np.ndarray:
        """Eigenvalues of the centred covariance, in increasing order."""
        if self._eigenvalues is None:
            raise RuntimeError("the covariance has not been analysed")
        return self._eigenvalues.copy()

    def eigenvectors(self) -> np.ndarray:
        """Eigenvectors of the centred covariance, one per column."""
        if self._eigenvectors is None:
            raise RuntimeError("the covariance has not been analysed")
        return self._eigenvectors.copy()


class CovarianceFitDer(CovarianceFit):
    """Covariance fit that also accumulates derivatives of the covariance matrix.

    Each neighbour comes with the derivatives of its weight, one per
    differentiation variable.
    """

    def __init__(self, nb_derivatives: int) -> None:
        if nb_derivatives < 0:
            raise ValueError("nb_derivatives must be non-negative")
        super().__init__()
        self.nb_derivatives = int(nb_derivatives)
        self._d_sum_w: np.ndarray | None = None
        self._d_sum_p: np.ndarray | None = None
        self._d_cov: np.ndarray | None = None

    def init(self, eval_pos) -> None:
        super().init(eval_pos)
        dim = self._dimension()
        self._d_sum_w = np.zeros(self.nb_derivatives)
        self._d_sum_p = np.zeros((dim, self.nb_derivatives))
        self._d_cov = np.zeros((self.nb_derivatives, dim, dim))

    def add_local_neighbor(self, weight: float, local_q, dw=None) -> bool:
        """Add a neighbour with the derivatives dw of its weight."""
        q = self._local_vector(local_q)
        dw = np.zeros(self.nb_derivatives) if dw is None else np.atleast_1d(np.array(dw, dtype=float))
        if dw.shape != (self.nb_derivatives,):
            raise ValueError("dw must hold one value per derivative")
        if not super().add_local_neighbor(weight, q):
            return False
        self._d_sum_w += dw
        self._d_sum_p += np.outer(q, dw)
        self._d_cov += dw[:, None, None] * np.outer(q, q)[None, :, :]
        return True

    def finalize(self) -> FitResult:
        """Finalize the base fit, then complete the covariance derivatives."""
        state = super().finalize()
        if state in _READY_STATES:
            cog = self.barycenter()
            cog_sq = np.outer(cog, cog)
            d_sum_p = self._d_sum_p.T
            self._d_cov = (
                self._d_cov
                - cog[None, :, None] * d_sum_p[:, None, :]
                - d_sum_p[:, :, None] * cog[None, None, :]
                + self._d_sum_w[:, None, None] * cog_sq[None, :, :]
            )
        return self.state

    def d_cov(self) -> np.ndarray:
        """Derivatives of the covariance, shaped (derivatives, dimension, dimension)."""
        if self._d_cov is None:
            raise RuntimeError("init() must be called first")
        return self._d_cov.copy()