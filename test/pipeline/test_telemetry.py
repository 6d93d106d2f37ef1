################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

from __future__ import annotations

import numpy as np

from walkstand.fusion.fusion_types import ColorCode
from walkstand.fusion.fusion_types import MotionLabel
from walkstand.pipeline.telemetry import Telemetry


def test_lines_format_filtered_values() -> None:
    telemetry = Telemetry(
        status_message="Calibration done!",
        color=ColorCode.RED,
        label=MotionLabel.STANDING,
        accel=np.array([0.123, -0.5, 9.81]),
        gyro=np.array([0.0, 0.0, 0.0]),
        mag=np.array([20.0, -5.25, -40.0]),
        azimuth_deg=12.346,
        steps=7.0,
    )

    assert telemetry.lines() == [
        "Accelerometer Filtered: x=0.12, y=-0.50, z=9.81",
        "Gyroscope Filtered: x=0.00, y=0.00, z=0.00",
        "Magnetometer Filtered: x=20.00, y=-5.25, z=-40.00",
        "Orientation (Azimuth): 12.35°",
        "Pedometer: 7 steps",
        "Prediction: Standing",
        "Calibration done!",
    ]


def test_missing_values_are_omitted() -> None:
    telemetry = Telemetry(status_message="", color=ColorCode.WHITE)

    assert telemetry.lines() == []


def test_unavailable_sensors() -> None:
    telemetry = Telemetry(
        status_message="",
        color=ColorCode.WHITE,
        accel=np.array([0.0, 0.0, 9.8]),
        azimuth_deg=10.0,
        gyro_available=False,
        mag_available=False,
        step_counter_available=False,
        location_moving=True,
    )

    assert telemetry.lines() == [
        "Accelerometer Filtered: x=0.00, y=0.00, z=9.80",
        "Gyroscope Filtered: unavailable",
        "Magnetometer Filtered: unavailable",
        "Orientation (Azimuth): unavailable",
        "Pedometer: unavailable",
        "Walking (via GPS)",
    ]
