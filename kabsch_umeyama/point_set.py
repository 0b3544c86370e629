"""
Point set container.

A PointSet is a dense D x N float matrix: D rows (dimension), N columns
(points). Column i of a source set and column i of a destination set are one
correspondence pair.

Shapes are validated once, when the set is built, so the estimator never has
to re-check what a PointSet already guarantees.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from kabsch_umeyama.errors import DimensionMismatchError, KabschUmeyamaError


class PointSet:
    """Immutable D x N point matrix."""

    __slots__ = ("_values",)

    def __init__(self, values) -> None:
        if isinstance(values, PointSet):
            self._values = values._values
            return

        arr = np.array(values, dtype=float)
        if arr.ndim != 2:
            raise DimensionMismatchError(
                f"Expected a 2D (D, N) matrix, got shape {arr.shape}"
            )
        if arr.shape[0] == 0:
            raise DimensionMismatchError("Point set must have at least one dimension")
        if not np.all(np.isfinite(arr)):
            raise KabschUmeyamaError("Point set contains non-finite values")

        arr.setflags(write=False)
        self._values = arr

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "PointSet":
        """From a nested literal, one inner sequence per dimension."""
        return cls(rows)

    @classmethod
    def from_flat(cls, values: Sequence[float], nrows: int, ncols: int) -> "PointSet":
        """From a row-major flat literal of length ``nrows * ncols``."""
        flat = np.asarray(values, dtype=float).reshape(-1)
        if flat.size != nrows * ncols:
            raise DimensionMismatchError(
                f"The lengths do not match: got {flat.size} values "
                f"for a {nrows}x{ncols} point set"
            )
        return cls(flat.reshape(nrows, ncols))

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]]) -> "PointSet":
        """From an (N, D) list with one point per row."""
        arr = np.asarray(points, dtype=float)
        if arr.ndim != 2:
            raise DimensionMismatchError(
                f"Expected (N, D) points, got shape {arr.shape}"
            )
        return cls(arr.T)

    # -------------------------------------------------------------------------
    # Shape
    # -------------------------------------------------------------------------

    @property
    def values(self) -> np.ndarray:
        """Read-only (D, N) array."""
        return self._values

    @property
    def shape(self) -> Tuple[int, int]:
        return self._values.shape

    @property
    def nrows(self) -> int:
        return self._values.shape[0]

    @property
    def ncols(self) -> int:
        return self._values.shape[1]

    dim = nrows
    n_points = ncols

    def points(self) -> np.ndarray:
        """(N, D) view, one point per row."""
        return self._values.T

    def check_compatible(self, other: "PointSet") -> None:
        """Raise DimensionMismatchError unless ``other`` has the same D and N."""
        if self.shape != other.shape:
            raise DimensionMismatchError(
                f"Point sets differ in shape: {self.shape} vs {other.shape}"
            )

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def centroid(self) -> np.ndarray:
        """Mean over columns, shape (D,)."""
        return self._values.mean(axis=1)

    def centered(self) -> np.ndarray:
        """(D, N) array with the centroid subtracted from every column."""
        return self._values - self.centroid()[:, None]

    def variance(self) -> float:
        """Mean squared norm of the centered columns."""
        if self.ncols == 0:
            return 0.0
        centered = self.centered()
        return float(np.sum(centered * centered) / self.ncols)

    # -------------------------------------------------------------------------
    # Python protocol
    # -------------------------------------------------------------------------

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._values
        return self._values.astype(dtype)

    def __len__(self) -> int:
        return self.ncols

    def __getitem__(self, index):
        return self._values[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, PointSet):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._values, other._values))

    __hash__ = None

    def __repr__(self) -> str:
        return f"PointSet(dim={self.nrows}, n_points={self.ncols}, values={self._values.tolist()})"
