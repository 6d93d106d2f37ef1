################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for decision fusion rules."""

from __future__ import annotations

from walkstand.fusion.fusion_decision import FusionEvidence
from walkstand.fusion.fusion_decision import fuse_decision
from walkstand.fusion.fusion_types import ColorCode
from walkstand.fusion.fusion_types import MotionLabel


def test_argmax_selects_standing() -> None:
    output = fuse_decision((0.9, 0.1), FusionEvidence())

    assert output.label == MotionLabel.STANDING
    assert output.color == ColorCode.RED
    assert output.step_override is False
    assert output.orientation_override is False


def test_argmax_selects_walking() -> None:
    output = fuse_decision((0.2, 0.8), FusionEvidence())

    assert output.label == MotionLabel.WALKING
    assert output.color == ColorCode.GREEN


def test_tie_is_walking() -> None:
    assert fuse_decision((0.5, 0.5), FusionEvidence()).label == MotionLabel.WALKING


def test_step_delta_forces_walking() -> None:
    output = fuse_decision((0.9, 0.1), FusionEvidence(step_delta=2.0))

    assert output.label == MotionLabel.WALKING
    assert output.color == ColorCode.GREEN
    assert output.step_override is True


def test_single_step_does_not_override() -> None:
    output = fuse_decision((0.9, 0.1), FusionEvidence(step_delta=1.0))

    assert output.label == MotionLabel.STANDING


def test_step_threshold_is_configurable() -> None:
    evidence = FusionEvidence(step_delta=2.0)

    output = fuse_decision((0.9, 0.1), evidence, step_override_min_delta=3.0)

    assert output.label == MotionLabel.STANDING


def test_standing_heading_overrides_walking() -> None:
    evidence = FusionEvidence(current_azimuth_deg=42.0, standing_azimuth_deg=30.0)

    output = fuse_decision((0.1, 0.9), evidence)

    assert output.label == MotionLabel.STANDING
    assert output.color == ColorCode.RED
    assert output.orientation_override is True


def test_heading_outside_threshold_keeps_walking() -> None:
    evidence = FusionEvidence(current_azimuth_deg=55.0, standing_azimuth_deg=30.0)

    output = fuse_decision((0.1, 0.9), evidence)

    assert output.label == MotionLabel.WALKING


def test_no_standing_reference_keeps_walking() -> None:
    evidence = FusionEvidence(current_azimuth_deg=30.0, standing_azimuth_deg=None)

    assert fuse_decision((0.1, 0.9), evidence).label == MotionLabel.WALKING


def test_heading_override_applies_after_step_override() -> None:
    evidence = FusionEvidence(
        step_delta=5.0, current_azimuth_deg=30.0, standing_azimuth_deg=31.0
    )

    output = fuse_decision((0.9, 0.1), evidence)

    assert output.step_override is True
    assert output.orientation_override is True
    assert output.label == MotionLabel.STANDING


def test_heading_never_promotes_standing() -> None:
    evidence = FusionEvidence(current_azimuth_deg=100.0, standing_azimuth_deg=0.0)

    output = fuse_decision((0.9, 0.1), evidence)

    assert output.label == MotionLabel.STANDING
    assert output.orientation_override is False


def test_heading_threshold_is_independent() -> None:
    evidence = FusionEvidence(current_azimuth_deg=42.0, standing_azimuth_deg=30.0)

    output = fuse_decision((0.1, 0.9), evidence, orientation_override_threshold_deg=5.0)

    assert output.label == MotionLabel.WALKING
