"""
Kabsch-Umeyama similarity estimation.

Finds the rotation R, translation t and (optionally) uniform scale c that
minimize

    Σ_i || dst_i - (c R src_i + t) ||²

over corresponding columns of two D x N point sets, in closed form:

    1. centroids μ_src, μ_dst
    2. centered sets X = src - μ_src, Y = dst - μ_dst
    3. covariance  Σ = (1/N) Y Xᵀ
    4. Σ = U diag(s) Vᵀ
    5. d = sign(det(U) det(Vᵀ))
    6. S = diag(1, ..., 1, d)
    7. R = U S Vᵀ                       (proper rotation, det = +1)
    8. c = tr(diag(s) S) / σ²_src       (σ²_src = (1/N) Σ |X_i|², or c = 1)
    9. t = μ_dst - c R μ_src
   10. T = [[c R, t], [0, 1]]

Degenerate input:
    A rank-deficient covariance (fewer than D independent directions) is not
    an error. R is still a proper rotation and is optimal, but it is only
    determined up to an arbitrary rotation within the null space.
    Requesting scale for a source whose points all coincide is an error
    (UndefinedScaleError): the scale would be 0/0.

References:
- Kabsch (1976): A solution for the best rotation to relate two sets of vectors
- Umeyama (1991): Least-squares estimation of transformation parameters
  between two point patterns
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from kabsch_umeyama import constants
from kabsch_umeyama.config import EstimatorConfig
from kabsch_umeyama.errors import (
    DecompositionError,
    InsufficientPointsError,
    UndefinedScaleError,
)
from kabsch_umeyama.point_set import PointSet
from kabsch_umeyama.svd import SVDSolver, get_solver
from kabsch_umeyama.transform import apply_transform, homogeneous, rmsd

logger = logging.getLogger(__name__)

SolverLike = Union[SVDSolver, str, None]


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class AlignmentResult:
    """
    Result of a Kabsch-Umeyama estimate.

    Attributes:
        matrix: (D+1, D+1) homogeneous transform
        rotation: (D, D) proper rotation
        translation: (D,) translation
        scale: uniform scale (1.0 when not estimated)
        det_sign: +1, or -1 when a reflection was corrected
        singular_values: (D,) singular values of the covariance, descending
        rank: numerical rank of the covariance
        rmsd: residual RMSD of the transformed source against the destination
        dim: D
        n_points: N
    """
    matrix: np.ndarray
    rotation: np.ndarray
    translation: np.ndarray
    scale: float
    det_sign: float
    singular_values: np.ndarray
    rank: int
    rmsd: float
    dim: int
    n_points: int

    @property
    def is_degenerate(self) -> bool:
        """True when the rotation is not uniquely determined."""
        return self.rank < self.dim

    @property
    def reflection_corrected(self) -> bool:
        return self.det_sign < 0

    def transform(self, points) -> np.ndarray:
        """Apply the estimated transform to (D, N) points."""
        return apply_transform(self.matrix, points)

    def to_dict(self) -> dict:
        return {
            "matrix": self.matrix.tolist(),
            "rotation": self.rotation.tolist(),
            "translation": self.translation.tolist(),
            "scale": self.scale,
            "det_sign": self.det_sign,
            "singular_values": self.singular_values.tolist(),
            "rank": self.rank,
            "rmsd": self.rmsd,
            "dim": self.dim,
            "n_points": self.n_points,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)


# =============================================================================
# Main Estimator
# =============================================================================


def _resolve_solver(solver: SolverLike, config: EstimatorConfig) -> SVDSolver:
    if solver is None:
        return config.make_solver()
    if isinstance(solver, str):
        return get_solver(solver)
    return solver


def _numerical_rank(s: np.ndarray, rel_tol: float) -> int:
    if s.size == 0 or s[0] <= 0.0:
        return 0
    return int(np.sum(s > rel_tol * s[0]))


def estimate_detailed(
    src,
    dst,
    with_scale: bool = False,
    *,
    solver: SolverLike = None,
    config: Optional[EstimatorConfig] = None,
) -> AlignmentResult:
    """
    Estimate the similarity transform mapping ``src`` onto ``dst``.

    Args:
        src: Source points, PointSet or (D, N) array-like
        dst: Destination points, same shape as ``src``
        with_scale: Estimate a uniform scale; otherwise the scale is 1
        solver: SVD backend instance or name; defaults to ``config.svd_backend``
        config: Estimator parameters; defaults to EstimatorConfig()

    Returns:
        AlignmentResult

    Raises:
        DimensionMismatchError: src and dst differ in D or N
        InsufficientPointsError: N == 0, or N < D without allow_underdetermined
        UndefinedScaleError: with_scale and the source points all coincide
        DecompositionError: the SVD backend failed
    """
    if config is None:
        config = EstimatorConfig()

    src = PointSet(src)
    dst = PointSet(dst)
    src.check_compatible(dst)
    D, N = src.shape

    if N < constants.MIN_POINTS:
        raise InsufficientPointsError("At least one correspondence is required")
    if N < D:
        if not config.allow_underdetermined:
            raise InsufficientPointsError(
                f"{N} point(s) cannot determine a {D}D rotation (need N >= D)"
            )
        logger.warning("Underdetermined alignment: %d point(s) in %dD", N, D)

    svd = _resolve_solver(solver, config)
    logger.debug("Estimating %dD alignment of %d points (scale=%s, svd=%s)", D, N, with_scale, svd.name)

    # Centroids and centered sets
    src_mean = src.centroid()
    dst_mean = dst.centroid()
    src_centered = src.centered()
    dst_centered = dst.centered()

    # Cross-covariance and its SVD
    cov = dst_centered @ src_centered.T / N
    U, s, Vt = svd.decompose(cov)

    # Reflection correction on the smallest singular direction
    det_sign = 1.0 if np.linalg.det(U) * np.linalg.det(Vt) >= 0.0 else -1.0
    S = np.ones(D, dtype=float)
    S[-1] = det_sign
    if det_sign < 0:
        logger.debug("Reflection corrected (det(U) det(Vt) < 0)")

    R = U @ np.diag(S) @ Vt

    rank = _numerical_rank(s, config.rank_tolerance)
    if rank < D:
        logger.warning(
            "Rank-deficient covariance (rank %d < %d): rotation is not unique", rank, D
        )

    if with_scale:
        variance = src.variance()
        magnitude = float(np.sum(src.values * src.values) / N)
        if variance <= config.variance_tolerance * magnitude:
            raise UndefinedScaleError(
                "Scale is undefined: all source points coincide (zero variance)"
            )
        scale = float(s @ S) / variance
    else:
        scale = 1.0

    translation = dst_mean - scale * (R @ src_mean)
    T = homogeneous(R, translation, scale)

    if not np.all(np.isfinite(T)):
        raise DecompositionError("Estimated transform contains non-finite values")

    residual = rmsd(apply_transform(T, src), dst)
    logger.debug(
        "singular_values=%s det_sign=%+.0f scale=%.6g rmsd=%.6g",
        np.array2string(s, precision=6), det_sign, scale, residual,
    )

    return AlignmentResult(
        matrix=T,
        rotation=R,
        translation=translation,
        scale=scale,
        det_sign=det_sign,
        singular_values=np.asarray(s, dtype=float),
        rank=rank,
        rmsd=residual,
        dim=D,
        n_points=N,
    )


def estimate(
    src,
    dst,
    with_scale: bool = False,
    *,
    solver: SolverLike = None,
    config: Optional[EstimatorConfig] = None,
) -> np.ndarray:
    """
    Estimate the (D+1, D+1) homogeneous similarity transform mapping ``src`` onto ``dst``.

    Example:
        >>> src = [[1., 2., 3.], [4., 5., 6.]]
        >>> dst = [[2., 3., 4.], [5., 6., 7.]]
        >>> T = estimate(src, dst)
        >>> np.allclose(T, [[1, 0, 1], [0, 1, 1], [0, 0, 1]])
        True

    See estimate_detailed for arguments and errors.
    """
    return estimate_detailed(src, dst, with_scale, solver=solver, config=config).matrix


def estimate_rigid(src, dst, **kwargs) -> np.ndarray:
    """Rotation and translation only (scale fixed at 1)."""
    return estimate(src, dst, False, **kwargs)


def estimate_similarity(src, dst, **kwargs) -> np.ndarray:
    """Rotation, translation and uniform scale."""
    return estimate(src, dst, True, **kwargs)
