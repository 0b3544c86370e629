"""
SVD solver backends.

The estimator only needs one capability:

    decompose(M) -> (U, s, Vt)

for a square matrix M, with U and V orthogonal and the singular values s in
descending order, so that M = U @ diag(s) @ Vt.

Backends:
- NumpySVD: numpy.linalg.svd (LAPACK gesdd)
- ScipySVD: scipy.linalg.svd with a selectable LAPACK driver
- JacobiSVD: one-sided (Hestenes) Jacobi rotations, in-process, for small D

Backend failures surface as DecompositionError. There is no retry: the
decomposition is deterministic, so a failure is a property of the input.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Tuple, Type

import numpy as np
import scipy.linalg

from kabsch_umeyama import constants
from kabsch_umeyama.errors import DecompositionError

logger = logging.getLogger(__name__)

SVDFactors = Tuple[np.ndarray, np.ndarray, np.ndarray]


# =============================================================================
# Base
# =============================================================================


class SVDSolver:
    """Abstract SVD capability."""

    name = "abstract"

    def decompose(self, matrix: np.ndarray) -> SVDFactors:
        """
        Decompose a square matrix.

        Args:
            matrix: (D, D) finite array

        Returns:
            Tuple of (U (D, D), s (D,) descending, Vt (D, D))

        Raises:
            DecompositionError: input is not a finite square matrix, or the
                backend failed to converge
        """
        M = np.asarray(matrix, dtype=float)
        if M.ndim != 2 or M.shape[0] != M.shape[1]:
            raise DecompositionError(f"Expected a square matrix, got shape {M.shape}")
        if not np.all(np.isfinite(M)):
            raise DecompositionError("Matrix contains non-finite values")

        try:
            U, s, Vt = self._decompose(M)
        except (np.linalg.LinAlgError, ValueError) as exc:
            raise DecompositionError(f"{self.name} SVD failed: {exc}") from exc

        if not (np.all(np.isfinite(U)) and np.all(np.isfinite(s)) and np.all(np.isfinite(Vt))):
            raise DecompositionError(f"{self.name} SVD returned non-finite factors")
        return U, s, Vt

    def _decompose(self, M: np.ndarray) -> SVDFactors:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# =============================================================================
# LAPACK backends
# =============================================================================


class NumpySVD(SVDSolver):
    name = "numpy"

    def _decompose(self, M: np.ndarray) -> SVDFactors:
        return np.linalg.svd(M, full_matrices=True)


class ScipySVD(SVDSolver):
    name = "scipy"

    def __init__(self, lapack_driver: str = constants.SCIPY_LAPACK_DRIVER_DEFAULT) -> None:
        if lapack_driver not in ("gesdd", "gesvd"):
            raise ValueError(f"Unknown lapack_driver '{lapack_driver}'")
        self.lapack_driver = lapack_driver

    def _decompose(self, M: np.ndarray) -> SVDFactors:
        return scipy.linalg.svd(
            M,
            full_matrices=True,
            check_finite=False,
            lapack_driver=self.lapack_driver,
        )

    def __repr__(self) -> str:
        return f"ScipySVD(lapack_driver={self.lapack_driver!r})"


# =============================================================================
# One-sided Jacobi
# =============================================================================


class JacobiSVD(SVDSolver):
    """
    One-sided Jacobi SVD.

    Repeatedly applies plane rotations to pairs of columns of A until all
    columns are mutually orthogonal. The accumulated rotations form V; the
    column norms are the singular values and the normalized columns form U.

    Accurate for the small, well-scaled matrices an alignment produces and
    needs nothing beyond elementwise arithmetic. Columns of U belonging to
    zero singular values are completed to an orthonormal basis via QR.
    """

    name = "jacobi"

    def __init__(
        self,
        max_sweeps: int = constants.JACOBI_MAX_SWEEPS,
        tolerance: float = constants.JACOBI_TOLERANCE,
    ) -> None:
        self.max_sweeps = int(max_sweeps)
        self.tolerance = float(tolerance)

    def _decompose(self, M: np.ndarray) -> SVDFactors:
        n = M.shape[0]
        A = M.copy()
        V = np.eye(n, dtype=float)
        # Columns at rounding level carry no direction; rotating them never settles
        floor = (np.finfo(float).eps * np.linalg.norm(M)) ** 2

        for sweep in range(self.max_sweeps):
            rotated = False
            for i in range(n - 1):
                for j in range(i + 1, n):
                    alpha = float(A[:, i] @ A[:, i])
                    beta = float(A[:, j] @ A[:, j])
                    gamma = float(A[:, i] @ A[:, j])
                    if alpha <= floor or beta <= floor:
                        continue
                    if gamma == 0.0 or abs(gamma) <= self.tolerance * math.sqrt(alpha * beta):
                        continue

                    rotated = True
                    zeta = (beta - alpha) / (2.0 * gamma)
                    t = math.copysign(1.0, zeta) / (abs(zeta) + math.sqrt(1.0 + zeta * zeta))
                    c = 1.0 / math.sqrt(1.0 + t * t)
                    s = c * t

                    Ai = A[:, i].copy()
                    A[:, i] = c * Ai - s * A[:, j]
                    A[:, j] = s * Ai + c * A[:, j]
                    Vi = V[:, i].copy()
                    V[:, i] = c * Vi - s * V[:, j]
                    V[:, j] = s * Vi + c * V[:, j]

            if not rotated:
                logger.debug("Jacobi SVD converged after %d sweep(s)", sweep + 1)
                break
        else:
            raise DecompositionError(
                f"Jacobi SVD did not converge in {self.max_sweeps} sweeps"
            )

        sigma = np.linalg.norm(A, axis=0)
        order = np.argsort(-sigma, kind="stable")
        sigma = sigma[order]
        A = A[:, order]
        V = V[:, order]

        cutoff = np.finfo(float).eps * n * (sigma[0] if n else 0.0)
        k = int(np.sum(sigma > cutoff))
        U = np.zeros((n, n), dtype=float)
        U[:, :k] = A[:, :k] / sigma[:k]
        if k < n:
            U[:, k:] = _orthogonal_complement(U[:, :k], n)
            sigma[k:] = 0.0

        return U, sigma, V.T

    def __repr__(self) -> str:
        return f"JacobiSVD(max_sweeps={self.max_sweeps}, tolerance={self.tolerance})"


def _orthogonal_complement(basis: np.ndarray, n: int) -> np.ndarray:
    """(n, n - k) orthonormal columns spanning the complement of ``basis`` (n, k)."""
    k = basis.shape[1]
    if k == 0:
        return np.eye(n, dtype=float)
    Q, _ = np.linalg.qr(basis, mode="complete")
    return Q[:, k:]


# =============================================================================
# Registry
# =============================================================================


_SOLVERS: Dict[str, Type[SVDSolver]] = {
    NumpySVD.name: NumpySVD,
    ScipySVD.name: ScipySVD,
    JacobiSVD.name: JacobiSVD,
}


def available_solvers() -> List[str]:
    return sorted(_SOLVERS)


def get_solver(name: str = constants.SVD_BACKEND_DEFAULT, **kwargs) -> SVDSolver:
    """Instantiate an SVD backend by name."""
    try:
        cls = _SOLVERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown SVD backend '{name}', expected one of {available_solvers()}"
        ) from None
    return cls(**kwargs)
