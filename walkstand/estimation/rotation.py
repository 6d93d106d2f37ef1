################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Device orientation from gravity and geomagnetic vectors."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np
from numpy.typing import NDArray


_FLOAT_ARRAY = NDArray[np.float64]

# Gravity used for the free-fall test, m/s^2
_GRAVITY_EARTH: float = 9.81

# Squared acceleration norm below which the device is considered in free
# fall, (m/s^2)^2
_FREE_FALL_GRAVITY_SQUARED: float = 0.01 * _GRAVITY_EARTH * _GRAVITY_EARTH

# Minimum norm of the east vector, uT * m/s^2
_MIN_EAST_NORM: float = 0.1


def rotation_matrix(
    gravity: _FLOAT_ARRAY, geomagnetic: _FLOAT_ARRAY
) -> Optional[_FLOAT_ARRAY]:
    """Return the device-to-world rotation matrix.

    Rows are the east, north and up axes expressed in the device frame.

    Args:
        gravity: Accelerometer vector in the device frame, m/s^2
        geomagnetic: Magnetometer vector in the device frame, uT

    Returns:
        The 3x3 rotation matrix, or None when the device is in free fall or
        the magnetic field is close to vertical
    """

    a: _FLOAT_ARRAY = np.asarray(gravity, dtype=np.float64).reshape(-1)
    e: _FLOAT_ARRAY = np.asarray(geomagnetic, dtype=np.float64).reshape(-1)
    if a.shape != (3,) or e.shape != (3,):
        raise ValueError("gravity and geomagnetic must have shape (3,)")

    norm_sq_a: float = float(a @ a)
    if not math.isfinite(norm_sq_a) or norm_sq_a < _FREE_FALL_GRAVITY_SQUARED:
        return None

    east: _FLOAT_ARRAY = np.cross(e, a)
    norm_east: float = float(np.linalg.norm(east))
    if not math.isfinite(norm_east) or norm_east < _MIN_EAST_NORM:
        return None

    east = east / norm_east
    up: _FLOAT_ARRAY = a / math.sqrt(norm_sq_a)
    north: _FLOAT_ARRAY = np.cross(up, east)

    return np.vstack((east, north, up))


def azimuth_deg(R: _FLOAT_ARRAY) -> float:
    """Return the heading around the up axis in degrees, in (-180, 180]."""

    return math.degrees(math.atan2(float(R[0, 1]), float(R[1, 1])))
