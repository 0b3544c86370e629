"""
Exception taxonomy for the Kabsch-Umeyama estimator.

All errors derive from ValueError: every failure here is a property of the
input data, and callers that already guard geometry code with
``except ValueError`` keep working.
"""


class KabschUmeyamaError(ValueError):
    """Base class for estimator failures."""


class DimensionMismatchError(KabschUmeyamaError):
    """Source and destination point sets differ in D or N, or a literal has the wrong length."""


class InsufficientPointsError(KabschUmeyamaError):
    """Too few correspondences (N == 0, or N < D when underdetermined input is not allowed)."""


class UndefinedScaleError(KabschUmeyamaError):
    """Scale requested but the source points all coincide (zero variance)."""


class DecompositionError(KabschUmeyamaError):
    """The SVD backend failed or produced a non-finite result."""
