"""
Kabsch-Umeyama point set alignment.

Closed-form estimation of the rotation, translation and optional uniform
scale that best align two ordered sets of corresponding points.

Usage:
    from kabsch_umeyama import PointSet, estimate

    src = PointSet([[1., 2., 3.], [4., 5., 6.]])
    dst = PointSet.from_flat([2., 3., 4., 5., 6., 7.], nrows=2, ncols=3)
    T = estimate(src, dst, with_scale=True)
"""

from __future__ import annotations

import logging

from kabsch_umeyama import constants
from kabsch_umeyama.config import EstimatorConfig
from kabsch_umeyama.errors import (
    DecompositionError,
    DimensionMismatchError,
    InsufficientPointsError,
    KabschUmeyamaError,
    UndefinedScaleError,
)
from kabsch_umeyama.estimator import (
    AlignmentResult,
    estimate,
    estimate_detailed,
    estimate_rigid,
    estimate_similarity,
)
from kabsch_umeyama.point_set import PointSet
from kabsch_umeyama.svd import (
    JacobiSVD,
    NumpySVD,
    ScipySVD,
    SVDSolver,
    available_solvers,
    get_solver,
)
from kabsch_umeyama.transform import (
    apply_transform,
    homogeneous,
    is_proper_rotation,
    rmsd,
    split_homogeneous,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "constants",
    # Configuration
    "EstimatorConfig",
    # Errors
    "KabschUmeyamaError",
    "DimensionMismatchError",
    "InsufficientPointsError",
    "UndefinedScaleError",
    "DecompositionError",
    # Point sets
    "PointSet",
    # Estimation
    "AlignmentResult",
    "estimate",
    "estimate_detailed",
    "estimate_rigid",
    "estimate_similarity",
    # SVD backends
    "SVDSolver",
    "NumpySVD",
    "ScipySVD",
    "JacobiSVD",
    "available_solvers",
    "get_solver",
    # Homogeneous transforms
    "homogeneous",
    "split_homogeneous",
    "apply_transform",
    "rmsd",
    "is_proper_rotation",
]
