"""
Kabsch-Umeyama Constants.

All magic numbers are centralized here with clear documentation.

Numerical Policy:
    Thresholds are chosen for IEEE 754 double precision (~15 decimal digits).
    They affect the computational path and input validation only, never
    the closed-form result itself.
"""

# =============================================================================
# Rank / Degeneracy Thresholds
# =============================================================================

# Singular values below RANK_TOLERANCE * s_max are treated as zero when
# counting the rank of the covariance matrix.
RANK_TOLERANCE = 1e-5

# Source variance below VARIANCE_TOLERANCE * mean(|p|^2) is treated as zero.
# Rounding residue after centering coincident points is ~(1e-16 * |p|)^2,
# so 1e-20 sits well above noise and well below any real spread.
VARIANCE_TOLERANCE = 1e-20

# =============================================================================
# SVD Backends
# =============================================================================

SVD_BACKEND_DEFAULT = "numpy"

# LAPACK driver used by the scipy backend
SCIPY_LAPACK_DRIVER_DEFAULT = "gesdd"

# One-sided Jacobi: max sweeps over all column pairs, and the
# orthogonality threshold |a_i . a_j| / (|a_i| |a_j|) that ends a sweep.
JACOBI_MAX_SWEEPS = 60
JACOBI_TOLERANCE = 1e-14

# =============================================================================
# Validation
# =============================================================================

# Absolute tolerance for "is this a proper rotation" checks
ROTATION_ATOL = 1e-8

# Minimum number of correspondences for any estimate
MIN_POINTS = 1
