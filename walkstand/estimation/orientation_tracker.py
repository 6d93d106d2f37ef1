################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Compass heading smoothing and stability detection."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import replace
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from walkstand.estimation.rotation import azimuth_deg
from walkstand.estimation.rotation import rotation_matrix
from walkstand.estimation.scalar_kalman_filter import ScalarKalmanFilter


_FLOAT_ARRAY = NDArray[np.float64]


@dataclass(frozen=True)
class OrientationState:
    """Snapshot of the orientation tracker."""

    # Reference azimuth for stability checks, degrees, or None before the
    # first heading
    last_azimuth_deg: Optional[float] = None

    # Timestamp at which the heading last became still, milliseconds
    stable_since_ms: Optional[int] = None

    # True when the heading has been still longer than the dwell time
    is_stable: bool = False

    # Latched heading of the last stable period, degrees
    standing_azimuth_deg: Optional[float] = None

    # Latest smoothed azimuth, degrees
    current_azimuth_deg: Optional[float] = None


class OrientationTracker:
    """
    Tracks the smoothed compass heading and latches a standing heading.

    The reference heading is only replaced when the heading leaves the
    threshold, so slow sub-threshold drift accumulates against the first
    reference.
    """

    def __init__(
        self,
        threshold_deg: float = 20.0,
        stable_duration_ms: int = 1000,
        azimuth_q: float = 0.0005,
        azimuth_r: float = 0.05,
    ) -> None:
        self._threshold_deg: float = float(threshold_deg)
        self._stable_duration_ms: int = int(stable_duration_ms)
        self._azimuth_filter: ScalarKalmanFilter = ScalarKalmanFilter(
            q=azimuth_q, r=azimuth_r, x=0.0, p=1.0
        )
        self._state: OrientationState = OrientationState()

    @property
    def threshold_deg(self) -> float:
        return self._threshold_deg

    @property
    def is_stable(self) -> bool:
        return self._state.is_stable

    @property
    def standing_azimuth_deg(self) -> Optional[float]:
        return self._state.standing_azimuth_deg

    @property
    def current_azimuth_deg(self) -> Optional[float]:
        return self._state.current_azimuth_deg

    def snapshot(self) -> OrientationState:
        """Return an immutable copy of the tracker state."""

        return self._state

    def update(
        self, accel: _FLOAT_ARRAY, mag: _FLOAT_ARRAY, now_ms: int
    ) -> Optional[float]:
        """Update from accelerometer and magnetometer vectors.

        Returns:
            The smoothed azimuth in degrees, or None if the orientation is
            undefined for these vectors
        """

        R: Optional[_FLOAT_ARRAY] = rotation_matrix(accel, mag)
        if R is None:
            return None

        azimuth: float = self._azimuth_filter.update(azimuth_deg(R))
        self.observe_azimuth(azimuth, now_ms)

        return azimuth

    def observe_azimuth(self, azimuth: float, now_ms: int) -> OrientationState:
        """Run the stability state machine on a smoothed azimuth."""

        state: OrientationState = replace(self._state, current_azimuth_deg=azimuth)
        now: int = int(now_ms)

        if state.last_azimuth_deg is None:
            state = replace(
                state, last_azimuth_deg=azimuth, stable_since_ms=now, is_stable=False
            )
        elif abs(azimuth - state.last_azimuth_deg) < self._threshold_deg:
            stable_since: int = (
                now if state.stable_since_ms is None else state.stable_since_ms
            )
            if now - stable_since > self._stable_duration_ms:
                state = replace(
                    state,
                    is_stable=True,
                    standing_azimuth_deg=state.last_azimuth_deg,
                )
        else:
            # Heading moved, restart the dwell timer from this sample
            state = replace(
                state,
                last_azimuth_deg=azimuth,
                stable_since_ms=now,
                is_stable=False,
                standing_azimuth_deg=None,
            )

        self._state = state

        return state
