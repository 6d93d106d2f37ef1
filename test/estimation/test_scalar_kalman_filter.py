################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for the scalar Kalman filter."""

from __future__ import annotations

import pytest

from walkstand.estimation.scalar_kalman_filter import ScalarKalmanFilter


def test_converges_monotonically_on_constant_input() -> None:
    kalman = ScalarKalmanFilter(q=0.0005, r=0.05, x=0.0, p=1.0)

    errors: list[float] = []
    for _ in range(200):
        estimate = kalman.update(3.0)
        errors.append(abs(3.0 - estimate))

    assert all(later <= earlier for earlier, later in zip(errors, errors[1:]))
    assert errors[-1] < 1e-3


def test_covariance_non_increasing_with_fixed_noise() -> None:
    kalman = ScalarKalmanFilter(q=0.001, r=0.1, x=0.0, p=1.0)

    covariances: list[float] = [kalman.p]
    for _ in range(100):
        kalman.update(1.0)
        covariances.append(kalman.p)

    assert all(later <= earlier for earlier, later in zip(covariances, covariances[1:]))
    assert kalman.p >= 0.0


def test_single_update_matches_recursion() -> None:
    kalman = ScalarKalmanFilter(q=0.5, r=1.5, x=1.0, p=1.0)

    estimate = kalman.update(5.0)

    # p = 1.5, k = 1.5 / 3.0 = 0.5
    assert kalman.k == pytest.approx(0.5)
    assert estimate == pytest.approx(3.0)
    assert kalman.p == pytest.approx(0.75)


def test_retuned_process_noise_raises_gain() -> None:
    nominal = ScalarKalmanFilter(q=0.0005, r=0.05)
    retuned = ScalarKalmanFilter(q=0.0005, r=0.05)
    for _ in range(50):
        nominal.update(0.0)
        retuned.update(0.0)

    retuned.q = 0.001
    nominal.update(1.0)
    retuned.update(1.0)

    assert retuned.k > nominal.k
    assert retuned.x > nominal.x


@pytest.mark.parametrize(
    "q, r, p",
    [
        (0.0, 0.1, 1.0),
        (0.1, -1.0, 1.0),
        (0.1, 0.1, -0.5),
    ],
)
def test_rejects_invalid_noise(q: float, r: float, p: float) -> None:
    with pytest.raises(ValueError):
        ScalarKalmanFilter(q=q, r=r, p=p)
