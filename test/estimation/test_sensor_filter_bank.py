################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for the per-sensor filter bank."""

from __future__ import annotations

import numpy as np

from walkstand.config.motion_params import MotionParams
from walkstand.estimation.scalar_kalman_filter import ScalarKalmanFilter
from walkstand.estimation.sensor_filter_bank import SensorFilterBank
from walkstand.estimation.sensor_types import SensorType


def test_accelerometer_axes_filter_independently() -> None:
    params = MotionParams.defaults().replace(adaptive_noise=False)
    bank = SensorFilterBank(params)
    scalars = [ScalarKalmanFilter(q=params.accel_q, r=params.accel_r) for _ in range(3)]

    for z in ([0.1, 0.2, 9.7], [0.0, 0.3, 9.9], [-0.1, 0.1, 9.8]):
        filtered = bank.update(SensorType.ACCELEROMETER, np.array(z))
        expected = [scalars[i].update(z[i]) for i in range(3)]
        np.testing.assert_allclose(filtered, expected, rtol=1e-9)


def test_accelerometer_process_noise_rises_above_threshold() -> None:
    bank = SensorFilterBank(MotionParams.defaults())

    bank.update(SensorType.ACCELEROMETER, np.array([20.0, 0.0, 9.8]))
    Q = bank.filter_for(SensorType.ACCELEROMETER).Q

    np.testing.assert_allclose(np.diag(Q), [0.001, 0.0005, 0.0005])

    bank.update(SensorType.ACCELEROMETER, np.array([0.0, 0.0, 9.8]))
    Q = bank.filter_for(SensorType.ACCELEROMETER).Q

    np.testing.assert_allclose(np.diag(Q), [0.0005, 0.0005, 0.0005])


def test_gyroscope_measurement_noise_rises_above_threshold() -> None:
    bank = SensorFilterBank(MotionParams.defaults())

    bank.update(SensorType.GYROSCOPE, np.array([0.0, -2.0, 0.5]))
    R = bank.filter_for(SensorType.GYROSCOPE).R

    np.testing.assert_allclose(np.diag(R), [0.1, 0.15, 0.1])


def test_singular_update_is_skipped() -> None:
    params = MotionParams.defaults().replace(initial_covariance=0.0)
    bank = SensorFilterBank(params)
    kalman = bank.filter_for(SensorType.MAGNETOMETER)
    kalman.Q = np.zeros((3, 3))
    kalman.R = np.zeros((3, 3))

    filtered = bank.update(SensorType.MAGNETOMETER, np.array([10.0, 20.0, 30.0]))

    np.testing.assert_allclose(filtered, np.zeros(3))
    assert bank.skipped_updates == 1
    np.testing.assert_allclose(bank.latest(SensorType.MAGNETOMETER), np.zeros(3))


def test_latest_is_none_before_first_sample() -> None:
    bank = SensorFilterBank(MotionParams.defaults())

    assert bank.latest(SensorType.GYROSCOPE) is None
