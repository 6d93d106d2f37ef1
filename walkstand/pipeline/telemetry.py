################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Display-oriented snapshot of the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from walkstand.fusion.fusion_types import ColorCode
from walkstand.fusion.fusion_types import MotionLabel


_FLOAT_ARRAY = NDArray[np.float64]

UNAVAILABLE: str = "unavailable"


@dataclass(frozen=True)
class Telemetry:
    """Latest filtered values and decision, formatted by lines()."""

    status_message: str
    color: ColorCode
    label: Optional[MotionLabel] = None
    accel: Optional[_FLOAT_ARRAY] = None
    gyro: Optional[_FLOAT_ARRAY] = None
    mag: Optional[_FLOAT_ARRAY] = None
    azimuth_deg: Optional[float] = None
    steps: Optional[float] = None
    accel_available: bool = True
    gyro_available: bool = True
    mag_available: bool = True
    step_counter_available: bool = True
    location_moving: bool = False

    def lines(self) -> list[str]:
        """Return human-readable telemetry strings."""

        lines: list[str] = [
            _vector_line("Accelerometer Filtered", self.accel, self.accel_available),
            _vector_line("Gyroscope Filtered", self.gyro, self.gyro_available),
            _vector_line("Magnetometer Filtered", self.mag, self.mag_available),
        ]

        if not self.accel_available or not self.mag_available:
            lines.append(f"Orientation (Azimuth): {UNAVAILABLE}")
        elif self.azimuth_deg is not None:
            lines.append(f"Orientation (Azimuth): {self.azimuth_deg:.2f}°")

        if not self.step_counter_available:
            lines.append(f"Pedometer: {UNAVAILABLE}")
        elif self.steps is not None:
            lines.append(f"Pedometer: {self.steps:.0f} steps")

        if self.location_moving:
            lines.append("Walking (via GPS)")

        if self.label is not None:
            lines.append(f"Prediction: {self.label.value}")
        lines.append(self.status_message)

        return [line for line in lines if line]


def _vector_line(name: str, vec: Optional[_FLOAT_ARRAY], available: bool) -> str:
    if not available:
        return f"{name}: {UNAVAILABLE}"
    if vec is None:
        return ""
    return f"{name}: x={vec[0]:.2f}, y={vec[1]:.2f}, z={vec[2]:.2f}"
