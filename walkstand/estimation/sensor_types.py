################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Typed samples delivered by the sensor source."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray


_FLOAT_ARRAY = NDArray[np.float64]


class SensorType(Enum):
    """Three-axis sensors consumed by the engine."""

    ACCELEROMETER = "accelerometer"
    GYROSCOPE = "gyroscope"
    MAGNETOMETER = "magnetometer"


# Every three-axis sensor, in display order
ALL_SENSORS: tuple[SensorType, ...] = (
    SensorType.ACCELEROMETER,
    SensorType.GYROSCOPE,
    SensorType.MAGNETOMETER,
)


@dataclass(frozen=True)
class SensorSample:
    """A raw three-axis reading.

    Attributes:
        sensor: Sensor that produced the reading
        values: Raw axis values, m/s^2, rad/s or uT depending on the sensor
        timestamp_ms: Monotonic timestamp in milliseconds
    """

    sensor: SensorType
    values: _FLOAT_ARRAY
    timestamp_ms: int

    def __post_init__(self) -> None:
        values: _FLOAT_ARRAY = np.array(self.values, dtype=np.float64).reshape(-1)
        if values.shape != (3,):
            raise ValueError(f"values must have shape (3,), got {values.shape}")
        values.setflags(write=False)
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "timestamp_ms", int(self.timestamp_ms))


@dataclass(frozen=True)
class StepCountSample:
    """Cumulative step count since the step counter was last rebooted."""

    count: float
    timestamp_ms: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError("count must be >= 0")

