"""
Homogeneous similarity transforms.

A similarity transform in D dimensions is stored as a (D+1) x (D+1) matrix:

    [ c*R  t ]
    [  0   1 ]

with R a proper rotation (det = +1), c > 0 a uniform scale and t a
translation. Points are D x N column matrices.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from kabsch_umeyama import constants


def homogeneous(rotation: np.ndarray, translation: np.ndarray, scale: float = 1.0) -> np.ndarray:
    """
    Assemble a homogeneous matrix from its parts.

    Args:
        rotation: (D, D) rotation
        translation: (D,) translation
        scale: uniform scale applied to the rotation block

    Returns:
        (D+1, D+1) homogeneous matrix
    """
    R = np.asarray(rotation, dtype=float)
    t = np.asarray(translation, dtype=float).reshape(-1)
    if R.ndim != 2 or R.shape[0] != R.shape[1]:
        raise ValueError(f"Expected square rotation, got shape {R.shape}")
    D = R.shape[0]
    if t.shape != (D,):
        raise ValueError(f"Expected translation of length {D}, got shape {t.shape}")

    T = np.eye(D + 1, dtype=float)
    T[:D, :D] = scale * R
    T[:D, D] = t
    return T


def split_homogeneous(T: np.ndarray) -> Tuple[np.ndarray, np.ndarray, float]:
    """
    Split a homogeneous similarity matrix into (rotation, translation, scale).

    The scale is |det(A)|^(1/D) of the linear block A = c*R.
    """
    T = np.asarray(T, dtype=float)
    if T.ndim != 2 or T.shape[0] != T.shape[1] or T.shape[0] < 2:
        raise ValueError(f"Expected (D+1, D+1) matrix, got shape {T.shape}")
    D = T.shape[0] - 1

    A = T[:D, :D]
    scale = float(abs(np.linalg.det(A)) ** (1.0 / D))
    if scale == 0.0:
        raise ValueError("Linear block is singular, no scale can be recovered")
    return A / scale, T[:D, D].copy(), scale


def apply_transform(T: np.ndarray, points) -> np.ndarray:
    """
    Apply a homogeneous transform to D x N points.

    Args:
        T: (D+1, D+1) homogeneous matrix
        points: (D, N) array or PointSet

    Returns:
        (D, N) transformed points
    """
    T = np.asarray(T, dtype=float)
    P = np.asarray(points, dtype=float)
    if P.ndim == 1:
        P = P[:, None]
    D = P.shape[0]
    if T.shape != (D + 1, D + 1):
        raise ValueError(f"Expected ({D + 1}, {D + 1}) transform for {D}D points, got {T.shape}")

    P_h = np.vstack([P, np.ones((1, P.shape[1]), dtype=float)])
    out = T @ P_h
    return out[:D] / out[D]


def rmsd(a, b) -> float:
    """Root-mean-square deviation between corresponding columns of two D x N arrays."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape != b.shape:
        raise ValueError(f"Shapes differ: {a.shape} vs {b.shape}")
    if a.ndim != 2 or a.shape[1] == 0:
        raise ValueError(f"Expected non-empty (D, N) arrays, got shape {a.shape}")
    d = a - b
    return float(np.sqrt(np.sum(d * d) / a.shape[1]))


def is_proper_rotation(R: np.ndarray, atol: float = constants.ROTATION_ATOL) -> bool:
    """True if R is orthogonal with determinant +1."""
    R = np.asarray(R, dtype=float)
    if R.ndim != 2 or R.shape[0] != R.shape[1]:
        return False
    D = R.shape[0]
    return bool(
        np.allclose(R @ R.T, np.eye(D), atol=atol)
        and abs(np.linalg.det(R) - 1.0) <= atol
    )
