################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Per-sensor three-axis filtering with adaptive noise."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from walkstand.config.motion_params import MotionParams
from walkstand.estimation.linalg3 import SingularMatrixError
from walkstand.estimation.sensor_types import ALL_SENSORS
from walkstand.estimation.sensor_types import SensorType
from walkstand.estimation.vector_kalman_filter import VectorKalmanFilter


_FLOAT_ARRAY = NDArray[np.float64]

_LOG: logging.Logger = logging.getLogger(__name__)


@dataclass
class SensorNoise:
    """Nominal and adaptive noise settings for one sensor."""

    # Nominal process noise per axis
    q: float

    # Nominal measurement noise per axis
    r: float

    # Raw per-axis magnitude above which elevated noise applies, or None
    adaptive_threshold: float | None = None

    # Process noise used above the threshold, or None to keep q
    q_elevated: float | None = None

    # Measurement noise used above the threshold, or None to keep r
    r_elevated: float | None = None


class SensorFilterBank:
    """
    One VectorKalmanFilter per sensor with diagonal Q/R.

    Axes stay independent because Q, R and the initial P are diagonal, so
    this replaces separate single-axis and multi-axis filtering paths.
    """

    def __init__(self, params: MotionParams) -> None:
        self._params: MotionParams = params
        self._noise: dict[SensorType, SensorNoise] = _build_noise(params)
        self._filters: dict[SensorType, VectorKalmanFilter] = {
            sensor: VectorKalmanFilter.from_diagonal(
                q=self._noise[sensor].q,
                r=self._noise[sensor].r,
                p0=params.initial_covariance,
            )
            for sensor in ALL_SENSORS
        }
        self._latest: dict[SensorType, _FLOAT_ARRAY] = {}
        self._skipped_updates: int = 0

    @property
    def skipped_updates(self) -> int:
        """Return the number of update cycles skipped on singular matrices."""

        return self._skipped_updates

    def filter_for(self, sensor: SensorType) -> VectorKalmanFilter:
        return self._filters[sensor]

    def latest(self, sensor: SensorType) -> _FLOAT_ARRAY | None:
        """Return the last filtered vector for a sensor, or None."""

        latest: _FLOAT_ARRAY | None = self._latest.get(sensor)
        return None if latest is None else latest.copy()

    def update(self, sensor: SensorType, calibrated: _FLOAT_ARRAY) -> _FLOAT_ARRAY:
        """Filter a bias-corrected reading and return the filtered 3-vector.

        A singular innovation covariance skips the cycle and returns the
        prior estimate unchanged.
        """

        values: _FLOAT_ARRAY = np.asarray(calibrated, dtype=np.float64).reshape(-1)
        kalman: VectorKalmanFilter = self._filters[sensor]

        if self._params.adaptive_noise:
            self._adapt_noise(sensor, kalman, values)

        try:
            filtered: _FLOAT_ARRAY = kalman.update(values)
        except SingularMatrixError as exc:
            self._skipped_updates += 1
            _LOG.info("Skipping %s filter update, %s", sensor.value, exc)
            filtered = kalman.x

        self._latest[sensor] = filtered
        return filtered.copy()

    def _adapt_noise(
        self, sensor: SensorType, kalman: VectorKalmanFilter, raw: _FLOAT_ARRAY
    ) -> None:
        noise: SensorNoise = self._noise[sensor]
        if noise.adaptive_threshold is None:
            return

        for axis in range(3):
            elevated: bool = abs(float(raw[axis])) > noise.adaptive_threshold
            if noise.q_elevated is not None:
                kalman.set_process_noise(
                    axis, noise.q_elevated if elevated else noise.q
                )
            if noise.r_elevated is not None:
                kalman.set_measurement_noise(
                    axis, noise.r_elevated if elevated else noise.r
                )


def _build_noise(params: MotionParams) -> dict[SensorType, SensorNoise]:
    return {
        # High dynamics on the accelerometer call for more process noise
        SensorType.ACCELEROMETER: SensorNoise(
            q=params.accel_q,
            r=params.accel_r,
            adaptive_threshold=params.accel_adaptive_threshold,
            q_elevated=params.accel_q_elevated,
        ),
        # Fast rotation makes the gyroscope reading less trustworthy
        SensorType.GYROSCOPE: SensorNoise(
            q=params.gyro_q,
            r=params.gyro_r,
            adaptive_threshold=params.gyro_adaptive_threshold,
            r_elevated=params.gyro_r_elevated,
        ),
        SensorType.MAGNETOMETER: SensorNoise(q=params.mag_q, r=params.mag_r),
    }
