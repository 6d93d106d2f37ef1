################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Closed-form helpers for 3x3 matrices."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray


_FLOAT_ARRAY = NDArray[np.float64]


class SingularMatrixError(ValueError):
    """Raised when a 3x3 matrix has no inverse."""


def det3(A: _FLOAT_ARRAY) -> float:
    """Return the determinant of a 3x3 matrix by cofactor expansion"""
    a, b, c = A[0, 0], A[0, 1], A[0, 2]
    d, e, f = A[1, 0], A[1, 1], A[1, 2]
    g, h, i = A[2, 0], A[2, 1], A[2, 2]
    return float(a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g))


def inverse3(A: _FLOAT_ARRAY) -> _FLOAT_ARRAY:
    """Return the inverse of a 3x3 matrix using the adjugate formula.

    Raises:
        SingularMatrixError: if the determinant is zero or not finite
    """

    matrix: _FLOAT_ARRAY = np.asarray(A, dtype=np.float64)
    if matrix.shape != (3, 3):
        raise ValueError(f"matrix must have shape (3, 3), got {matrix.shape}")

    a, b, c = matrix[0, 0], matrix[0, 1], matrix[0, 2]
    d, e, f = matrix[1, 0], matrix[1, 1], matrix[1, 2]
    g, h, i = matrix[2, 0], matrix[2, 1], matrix[2, 2]

    det: float = det3(matrix)
    if det == 0.0 or not math.isfinite(det):
        raise SingularMatrixError(f"matrix is singular (det={det})")

    inv_det: float = 1.0 / det
    return np.array(
        [
            [(e * i - f * h), (c * h - b * i), (b * f - c * e)],
            [(f * g - d * i), (a * i - c * g), (c * d - a * f)],
            [(d * h - e * g), (b * g - a * h), (a * e - b * d)],
        ],
        dtype=np.float64,
    ) * inv_det


def diag3(values: tuple[float, float, float] | list[float] | float) -> _FLOAT_ARRAY:
    """Return a 3x3 diagonal matrix from a scalar or three values"""
    if isinstance(values, (int, float)):
        return np.eye(3, dtype=np.float64) * float(values)
    diagonal: _FLOAT_ARRAY = np.asarray(values, dtype=np.float64).reshape(-1)
    if diagonal.shape != (3,):
        raise ValueError(f"diagonal must have 3 entries, got {diagonal.shape}")
    return np.diag(diagonal)
