################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Time-boxed passive sampling pass that estimates per-axis sensor bias."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from walkstand.config.motion_params import STANDARD_GRAVITY
from walkstand.estimation.sensor_types import ALL_SENSORS
from walkstand.estimation.sensor_types import SensorType


_FLOAT_ARRAY = NDArray[np.float64]

_LOG: logging.Logger = logging.getLogger(__name__)


class CalibrationState(Enum):
    IDLE = "idle"
    COLLECTING = "collecting"


@dataclass(frozen=True)
class CalibrationBiases:
    """Per-sensor bias vectors produced by a calibration pass.

    Attributes:
        accel: Accelerometer bias in m/s^2, gravity removed from Z
        gyro: Gyroscope bias in rad/s
        mag: Magnetometer bias in uT
        sample_counts: Number of samples averaged per sensor
    """

    accel: _FLOAT_ARRAY
    gyro: _FLOAT_ARRAY
    mag: _FLOAT_ARRAY
    sample_counts: dict[SensorType, int]

    def __post_init__(self) -> None:
        for name in ("accel", "gyro", "mag"):
            vec: _FLOAT_ARRAY = np.array(getattr(self, name), dtype=np.float64)
            if vec.shape != (3,):
                raise ValueError(f"{name} must have shape (3,), got {vec.shape}")
            vec.setflags(write=False)
            object.__setattr__(self, name, vec)

    @classmethod
    def zeros(cls) -> CalibrationBiases:
        return cls(
            accel=np.zeros(3),
            gyro=np.zeros(3),
            mag=np.zeros(3),
            sample_counts={sensor: 0 for sensor in ALL_SENSORS},
        )

    def for_sensor(self, sensor: SensorType) -> _FLOAT_ARRAY:
        """Return the bias vector for a sensor."""

        if sensor == SensorType.ACCELEROMETER:
            return self.accel
        if sensor == SensorType.GYROSCOPE:
            return self.gyro
        return self.mag

    def apply(self, sensor: SensorType, raw: _FLOAT_ARRAY) -> _FLOAT_ARRAY:
        """Subtract the sensor bias from a raw reading."""

        return np.asarray(raw, dtype=np.float64).reshape(-1) - self.for_sensor(sensor)


class CalibrationSession:
    """
    Collects raw samples for a fixed duration and averages them into biases.

    The accelerometer Z bias assumes the device is held level and still
    during the pass. That precondition is not checked.
    """

    def __init__(self, duration_ms: int, gravity_mps2: float = STANDARD_GRAVITY):
        if duration_ms <= 0:
            raise ValueError("duration_ms must be > 0")

        self._duration_ms: int = int(duration_ms)
        self._gravity_mps2: float = float(gravity_mps2)
        self._state: CalibrationState = CalibrationState.IDLE
        self._deadline_ms: Optional[int] = None
        self._samples: dict[SensorType, list[_FLOAT_ARRAY]] = {
            sensor: [] for sensor in ALL_SENSORS
        }
        self._biases: Optional[CalibrationBiases] = None

    @property
    def state(self) -> CalibrationState:
        return self._state

    @property
    def is_collecting(self) -> bool:
        return self._state == CalibrationState.COLLECTING

    @property
    def deadline_ms(self) -> Optional[int]:
        return self._deadline_ms

    @property
    def biases(self) -> Optional[CalibrationBiases]:
        """Return the result of the last completed pass, or None."""

        return self._biases

    def sample_count(self, sensor: SensorType) -> int:
        return len(self._samples[sensor])

    def start(self, now_ms: int) -> bool:
        """Clear buffers and begin collecting.

        Returns:
            False if a pass is already in progress, True otherwise
        """

        if self._state == CalibrationState.COLLECTING:
            return False

        for samples in self._samples.values():
            samples.clear()

        self._deadline_ms = int(now_ms) + self._duration_ms
        self._state = CalibrationState.COLLECTING

        _LOG.info("Calibration started, deadline_ms=%d", self._deadline_ms)

        return True

    def add_sample(self, sensor: SensorType, values: _FLOAT_ARRAY) -> None:
        """Record a raw reading verbatim while collecting."""

        if self._state != CalibrationState.COLLECTING:
            return
        sample: _FLOAT_ARRAY = np.array(values, dtype=np.float64).reshape(-1)
        if sample.shape != (3,):
            raise ValueError(f"values must have shape (3,), got {sample.shape}")
        self._samples[sensor].append(sample)

    def poll(self, now_ms: int) -> Optional[CalibrationBiases]:
        """Complete the pass if its deadline has been reached.

        Returns:
            The new biases when the pass completes on this call, else None
        """

        if self._state != CalibrationState.COLLECTING or self._deadline_ms is None:
            return None
        if int(now_ms) < self._deadline_ms:
            return None
        return self.finish()

    def finish(self) -> CalibrationBiases:
        """Compute biases from the collected samples and return to idle."""

        accel: _FLOAT_ARRAY = self._mean(SensorType.ACCELEROMETER)
        if self._samples[SensorType.ACCELEROMETER]:
            accel[2] -= self._gravity_mps2

        biases: CalibrationBiases = CalibrationBiases(
            accel=accel,
            gyro=self._mean(SensorType.GYROSCOPE),
            mag=self._mean(SensorType.MAGNETOMETER),
            sample_counts={
                sensor: len(samples) for sensor, samples in self._samples.items()
            },
        )

        self._biases = biases
        self._state = CalibrationState.IDLE
        self._deadline_ms = None

        _LOG.info(
            "Calibration done, samples accel=%d gyro=%d mag=%d",
            biases.sample_counts[SensorType.ACCELEROMETER],
            biases.sample_counts[SensorType.GYROSCOPE],
            biases.sample_counts[SensorType.MAGNETOMETER],
        )

        return biases

    def _mean(self, sensor: SensorType) -> _FLOAT_ARRAY:
        samples: list[_FLOAT_ARRAY] = self._samples[sensor]
        if not samples:
            _LOG.warning("No %s samples collected, bias left at zero", sensor.value)
            return np.zeros(3, dtype=np.float64)
        return np.asarray(np.mean(np.vstack(samples), axis=0), dtype=np.float64)
