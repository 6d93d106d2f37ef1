################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Three-axis Kalman filter with identity transition and observation."""

from __future__ import annotations

from typing import Optional
from typing import Sequence
from typing import cast

import numpy as np
from numpy.typing import NDArray

from walkstand.estimation.linalg3 import SingularMatrixError
from walkstand.estimation.linalg3 import diag3
from walkstand.estimation.linalg3 import inverse3


_FLOAT_ARRAY = NDArray[np.float64]

# State dimension supported by the closed-form innovation inverse
STATE_DIM: int = 3


class VectorKalmanFilter:
    """
    Kalman filter for correlated multi-axis signals.

    The state transition F and observation H are both identity, so the
    prediction only grows the covariance:

        P' = P + Q
        y  = z - x
        S  = P' + R
        K  = P' S^-1
        x  = x + K y
        P  = (I - K) P'

    P is not re-symmetrized after the correction. With diagonal Q, R and P
    each axis evolves exactly like an independent ScalarKalmanFilter.
    """

    def __init__(
        self,
        Q: _FLOAT_ARRAY,
        R: _FLOAT_ARRAY,
        x0: Optional[_FLOAT_ARRAY] = None,
        P0: Optional[_FLOAT_ARRAY] = None,
    ) -> None:
        self._Q: _FLOAT_ARRAY = _as_matrix(Q, "Q")
        self._R: _FLOAT_ARRAY = _as_matrix(R, "R")
        self._x: _FLOAT_ARRAY = (
            np.zeros(STATE_DIM, dtype=np.float64)
            if x0 is None
            else _as_vector(x0, "x0")
        )
        self._P: _FLOAT_ARRAY = (
            np.eye(STATE_DIM, dtype=np.float64) if P0 is None else _as_matrix(P0, "P0")
        )

    @classmethod
    def from_diagonal(
        cls,
        q: float | Sequence[float],
        r: float | Sequence[float],
        x0: float = 0.0,
        p0: float = 1.0,
    ) -> VectorKalmanFilter:
        """Build a filter with diagonal noise and uncorrelated initial state."""

        return cls(
            Q=diag3(q),  # type: ignore[arg-type]
            R=diag3(r),  # type: ignore[arg-type]
            x0=np.full(STATE_DIM, float(x0), dtype=np.float64),
            P0=diag3(p0),
        )

    @property
    def x(self) -> _FLOAT_ARRAY:
        """Return a copy of the state estimate."""

        return self._x.copy()

    @property
    def P(self) -> _FLOAT_ARRAY:
        """Return a copy of the error covariance."""

        return self._P.copy()

    @property
    def Q(self) -> _FLOAT_ARRAY:
        return self._Q.copy()

    @Q.setter
    def Q(self, value: _FLOAT_ARRAY) -> None:
        self._Q = _as_matrix(value, "Q")

    @property
    def R(self) -> _FLOAT_ARRAY:
        return self._R.copy()

    @R.setter
    def R(self, value: _FLOAT_ARRAY) -> None:
        self._R = _as_matrix(value, "R")

    def set_process_noise(self, axis: int, value: float) -> None:
        """Set one diagonal entry of Q."""

        self._Q[axis, axis] = float(value)

    def set_measurement_noise(self, axis: int, value: float) -> None:
        """Set one diagonal entry of R."""

        self._R[axis, axis] = float(value)

    def update(self, z: _FLOAT_ARRAY) -> _FLOAT_ARRAY:
        """Fold an observation into the state and return the new estimate.

        Args:
            z: Observation 3-vector

        Raises:
            SingularMatrixError: if the innovation covariance cannot be
                inverted or the correction is not finite. The filter state is
                left untouched in that case.
        """

        z_vec: _FLOAT_ARRAY = _as_vector(z, "z")

        # Predict
        x_pred: _FLOAT_ARRAY = self._x
        P_pred: _FLOAT_ARRAY = self._P + self._Q

        # Correct
        y: _FLOAT_ARRAY = z_vec - x_pred
        S: _FLOAT_ARRAY = P_pred + self._R
        S_inv: _FLOAT_ARRAY = inverse3(S)
        K: _FLOAT_ARRAY = P_pred @ S_inv

        x_new: _FLOAT_ARRAY = x_pred + K @ y
        P_new: _FLOAT_ARRAY = (np.eye(STATE_DIM, dtype=np.float64) - K) @ P_pred

        if not (np.all(np.isfinite(x_new)) and np.all(np.isfinite(P_new))):
            raise SingularMatrixError("correction produced non-finite values")

        self._x = x_new
        self._P = P_new

        return self._x.copy()


def _as_vector(vec: _FLOAT_ARRAY, name: str) -> _FLOAT_ARRAY:
    array: _FLOAT_ARRAY = np.asarray(vec, dtype=np.float64).reshape(-1)
    if array.shape != (STATE_DIM,):
        raise ValueError(f"{name} must have shape ({STATE_DIM},), got {array.shape}")
    return cast(_FLOAT_ARRAY, array.copy())


def _as_matrix(mat: _FLOAT_ARRAY, name: str) -> _FLOAT_ARRAY:
    array: _FLOAT_ARRAY = np.asarray(mat, dtype=np.float64)
    if array.shape != (STATE_DIM, STATE_DIM):
        raise ValueError(
            f"{name} must have shape ({STATE_DIM}, {STATE_DIM}), got {array.shape}"
        )
    if not np.all(np.isfinite(array)):
        raise ValueError(f"{name} must be finite")
    return cast(_FLOAT_ARRAY, array.copy())
