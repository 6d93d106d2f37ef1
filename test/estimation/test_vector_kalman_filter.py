################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for the three-axis Kalman filter."""

from __future__ import annotations

import numpy as np
import pytest

from walkstand.estimation.linalg3 import SingularMatrixError
from walkstand.estimation.scalar_kalman_filter import ScalarKalmanFilter
from walkstand.estimation.vector_kalman_filter import VectorKalmanFilter


def test_matches_independent_scalar_filters_with_diagonal_noise() -> None:
    q = [0.0005, 0.001, 0.0007]
    r = [0.05, 0.1, 0.07]
    vector = VectorKalmanFilter.from_diagonal(q=q, r=r, x0=0.0, p0=1.0)
    scalars = [ScalarKalmanFilter(q=q[i], r=r[i], x=0.0, p=1.0) for i in range(3)]

    rng = np.random.default_rng(7)
    measurements = rng.normal(loc=[0.2, -1.0, 9.8], scale=0.3, size=(100, 3))

    for z in measurements:
        estimate = vector.update(z)
        expected = [scalars[i].update(float(z[i])) for i in range(3)]
        np.testing.assert_allclose(estimate, expected, rtol=1e-9, atol=1e-12)

    np.testing.assert_allclose(
        np.diag(vector.P), [kalman.p for kalman in scalars], rtol=1e-9
    )


def test_first_update_matches_closed_form() -> None:
    vector = VectorKalmanFilter(
        Q=np.eye(3) * 0.5,
        R=np.eye(3) * 1.5,
        x0=np.ones(3),
        P0=np.eye(3),
    )

    estimate = vector.update(np.array([5.0, 1.0, -3.0]))

    # P' = 1.5 I, S = 3 I, K = 0.5 I
    np.testing.assert_allclose(estimate, [3.0, 1.0, -1.0])
    np.testing.assert_allclose(vector.P, np.eye(3) * 0.75)


def test_correlated_noise_couples_axes() -> None:
    R = np.array(
        [
            [0.1, 0.05, 0.0],
            [0.05, 0.1, 0.0],
            [0.0, 0.0, 0.1],
        ]
    )
    vector = VectorKalmanFilter(Q=np.eye(3) * 0.001, R=R)

    estimate = vector.update(np.array([1.0, 0.0, 0.0]))

    # Correlated measurement noise leaks the x innovation into y
    assert estimate[1] != 0.0
    assert estimate[2] == pytest.approx(0.0)


def test_singular_innovation_keeps_prior_state() -> None:
    vector = VectorKalmanFilter(
        Q=np.zeros((3, 3)),
        R=np.zeros((3, 3)),
        x0=np.array([1.0, 2.0, 3.0]),
        P0=np.zeros((3, 3)),
    )

    with pytest.raises(SingularMatrixError):
        vector.update(np.array([4.0, 5.0, 6.0]))

    np.testing.assert_allclose(vector.x, [1.0, 2.0, 3.0])
    np.testing.assert_allclose(vector.P, np.zeros((3, 3)))


def test_non_finite_measurement_is_rejected() -> None:
    vector = VectorKalmanFilter.from_diagonal(q=0.001, r=0.1)

    with pytest.raises(SingularMatrixError):
        vector.update(np.array([np.nan, 0.0, 0.0]))

    assert np.all(np.isfinite(vector.x))


def test_noise_retuning_changes_single_axis() -> None:
    vector = VectorKalmanFilter.from_diagonal(q=0.0005, r=0.05)

    vector.set_process_noise(0, 0.001)
    vector.set_measurement_noise(2, 0.15)

    np.testing.assert_allclose(np.diag(vector.Q), [0.001, 0.0005, 0.0005])
    np.testing.assert_allclose(np.diag(vector.R), [0.05, 0.05, 0.15])


def test_rejects_non_3x3_noise() -> None:
    with pytest.raises(ValueError):
        VectorKalmanFilter(Q=np.eye(2), R=np.eye(3))
