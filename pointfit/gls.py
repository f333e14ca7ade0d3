"""Growing Least Squares descriptors of an algebraic sphere and their derivatives."""

from __future__ import annotations

import math

import numpy as np

from .algebraic_sphere import AlgebraicSphere


class GLSParam:
    """GLS reparametrization [tau, eta, kappa] of an algebraic sphere at a given scale."""

    def __init__(self, sphere: AlgebraicSphere, eval_scale: float, normalized: bool = False) -> None:
        self.sphere = sphere
        self.eval_scale = float(eval_scale)
        self.normalized = bool(normalized)
        self._fitness = 1.0 - sphere.pratt_norm2()

    def tau(self) -> float:
        """Algebraic distance from the evaluation point to the sphere."""
        s = self.sphere
        return s.uc if self.normalized else s.uc / s.pratt_norm()

    def eta(self) -> np.ndarray:
        """Field gradient at the evaluation point."""
        return self.sphere.primitive_gradient()

    def kappa(self) -> float:
        """Signed curvature of the sphere."""
        s = self.sphere
        return 2.0 * (s.uq if self.normalized else s.uq / s.pratt_norm())

    def tau_normalized(self) -> float:
        return self.tau() / self.eval_scale

    def eta_normalized(self) -> np.ndarray:
        return self.eta()

    def kappa_normalized(self) -> float:
        return self.kappa() * self.eval_scale

    def fitness(self) -> float:
        """One minus the squared Pratt norm of the field."""
        return self._fitness

    def compare_to(self, other: "GLSParam", use_fitness: bool = True) -> float:
        """Distance between two descriptors; zero for similar fits at the same scale."""
        n_tau = self.tau_normalized() - other.tau_normalized()
        n_kappa = self.kappa_normalized() - other.kappa_normalized()
        n_fitness = self.fitness() - other.fitness() if use_fitness else 0.0
        return n_tau * n_tau + n_kappa * n_kappa + n_fitness * n_fitness


class GLSDer(GLSParam):
    """Derivatives of the GLS descriptors in scale and/or space.

    Derivative arrays hold one entry (or column) per differentiation variable;
    with scale derivatives the scale comes first.
    """

    def __init__(self, sphere: AlgebraicSphere, eval_scale: float, d_uc, d_uq, d_ul,
                 d_normal, scale_der: bool = False) -> None:
        super().__init__(sphere, eval_scale, normalized=False)
        self.d_uc = np.atleast_1d(np.array(d_uc, dtype=float))
        self.d_uq = np.atleast_1d(np.array(d_uq, dtype=float))
        self.d_ul = np.array(d_ul, dtype=float)
        self.d_normal = np.array(d_normal, dtype=float)
        self.scale_der = bool(scale_der)
        if self.d_uc.ndim != 1:
            raise ValueError("d_uc must be one-dimensional")
        count = self.d_uc.shape[0]
        dim = sphere.ul.shape[0]
        if self.d_uq.shape != (count,):
            raise ValueError("d_uq must have as many entries as d_uc")
        if self.d_ul.shape != (dim, count) or self.d_normal.shape != (dim, count):
            raise ValueError("d_ul and d_normal must be (dimension, derivatives) arrays")

    def dpratt_norm2(self) -> np.ndarray:
        s = self.sphere
        return 2.0 * (s.ul @ self.d_ul) - 4.0 * s.uq * self.d_uc - 4.0 * s.uc * self.d_uq

    def dtau(self) -> np.ndarray:
        s = self.sphere
        pratt_norm2 = s.pratt_norm2()
        pratt_norm = math.sqrt(pratt_norm2)
        cfactor = 0.5 / pratt_norm
        dfield = self.d_uc.copy()
        if self.scale_der:
            dim = s.ul.shape[0]
            if dfield.shape[0] < dim:
                raise ValueError("scale derivatives need the spatial entries as well")
            dfield[-dim:] += s.ul
        return (dfield * pratt_norm - s.uc * cfactor * self.dpratt_norm2()) / pratt_norm2

    def deta(self) -> np.ndarray:
        return self.d_normal.copy()

    def dkappa(self) -> np.ndarray:
        s = self.sphere
        pratt_norm2 = s.pratt_norm2()
        pratt_norm = math.sqrt(pratt_norm2)
        cfactor = 0.5 / pratt_norm
        return 2.0 * (self.d_uq * pratt_norm - s.uq * cfactor * self.dpratt_norm2()) / pratt_norm2

    def dtau_normalized(self) -> np.ndarray:
        return self.dtau()

    def deta_normalized(self) -> np.ndarray:
        return self.eval_scale * self.deta()

    def dkappa_normalized(self) -> np.ndarray:
        return self.dkappa() * self.eval_scale * self.eval_scale

    def geom_var(self, wtau: float = 1.0, weta: float = 1.0, wkappa: float = 1.0) -> float:
        """Weighted sum of squared scale-invariant scale derivatives."""
        if not self.scale_der:
            raise ValueError("scale derivatives are required to compute the geometric variation")
        dtau = float(self.dtau_normalized()[0])
        deta = float(np.linalg.norm(self.deta_normalized()[:, 0]))
        dkappa = float(self.dkappa_normalized()[0])
        return wtau * dtau * dtau + weta * deta * deta + wkappa * dkappa * dkappa