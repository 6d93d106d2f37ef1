################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""
Sensor filtering, calibration and orientation
"""

from walkstand.estimation.calibration_session import CalibrationBiases
from walkstand.estimation.calibration_session import CalibrationSession
from walkstand.estimation.linalg3 import SingularMatrixError
from walkstand.estimation.orientation_tracker import OrientationState
from walkstand.estimation.orientation_tracker import OrientationTracker
from walkstand.estimation.scalar_kalman_filter import ScalarKalmanFilter
from walkstand.estimation.sensor_filter_bank import SensorFilterBank
from walkstand.estimation.vector_kalman_filter import VectorKalmanFilter


__all__ = [
    "CalibrationBiases",
    "CalibrationSession",
    "OrientationState",
    "OrientationTracker",
    "ScalarKalmanFilter",
    "SensorFilterBank",
    "SingularMatrixError",
    "VectorKalmanFilter",
]
