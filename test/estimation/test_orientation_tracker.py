################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for the orientation tracker."""

from __future__ import annotations

import math

import numpy as np
import pytest

from walkstand.estimation.orientation_tracker import OrientationTracker


def _tracker() -> OrientationTracker:
    return OrientationTracker(threshold_deg=20.0, stable_duration_ms=1000)


def test_first_azimuth_starts_timer() -> None:
    tracker = _tracker()

    state = tracker.observe_azimuth(10.0, 500)

    assert state.last_azimuth_deg == 10.0
    assert state.stable_since_ms == 500
    assert state.is_stable is False
    assert state.standing_azimuth_deg is None


def test_sustained_heading_becomes_stable() -> None:
    tracker = _tracker()

    headings: list[float] = [10.0, 12.0, 15.0, 9.0, 11.0, 14.0]
    for now_ms, azimuth in zip(range(0, 1001, 200), headings):
        state = tracker.observe_azimuth(azimuth, now_ms)
        assert state.is_stable is False

    state = tracker.observe_azimuth(13.0, 1200)

    assert state.is_stable is True
    assert state.standing_azimuth_deg == 10.0
    assert state.current_azimuth_deg == 13.0


def test_large_move_resets_timer_to_that_sample() -> None:
    tracker = _tracker()
    tracker.observe_azimuth(10.0, 0)
    tracker.observe_azimuth(12.0, 400)

    state = tracker.observe_azimuth(40.0, 600)

    assert state.stable_since_ms == 600
    assert state.last_azimuth_deg == 40.0
    assert state.is_stable is False

    assert tracker.observe_azimuth(45.0, 1500).is_stable is False
    assert tracker.observe_azimuth(45.0, 1700).is_stable is True
    assert tracker.standing_azimuth_deg == 40.0


def test_move_clears_standing_heading() -> None:
    tracker = _tracker()
    tracker.observe_azimuth(10.0, 0)
    tracker.observe_azimuth(10.0, 1100)
    assert tracker.standing_azimuth_deg == 10.0

    tracker.observe_azimuth(90.0, 1200)

    assert tracker.is_stable is False
    assert tracker.standing_azimuth_deg is None


def test_sub_threshold_drift_keeps_reference() -> None:
    tracker = _tracker()
    tracker.observe_azimuth(0.0, 0)
    tracker.observe_azimuth(15.0, 100)
    tracker.observe_azimuth(19.0, 200)

    state = tracker.observe_azimuth(25.0, 300)

    # 25 is within 20 of 19 but not of the first reference
    assert state.last_azimuth_deg == 25.0
    assert state.stable_since_ms == 300


def test_update_smooths_heading_from_vectors() -> None:
    tracker = _tracker()
    accel = np.array([0.0, 0.0, 9.81])
    heading = math.radians(30.0)
    mag = np.array([-20.0 * math.sin(heading), 20.0 * math.cos(heading), -40.0])

    azimuth = 0.0
    for now_ms in range(0, 2000, 20):
        result = tracker.update(accel, mag, now_ms)
        assert result is not None
        azimuth = result

    assert azimuth == pytest.approx(30.0, abs=0.5)
    assert tracker.current_azimuth_deg == azimuth


def test_update_without_rotation_leaves_state() -> None:
    tracker = _tracker()

    result = tracker.update(np.zeros(3), np.array([0.0, 20.0, -40.0]), 0)

    assert result is None
    assert tracker.snapshot().last_azimuth_deg is None
