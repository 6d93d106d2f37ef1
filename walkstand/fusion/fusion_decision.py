################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Decision fusion of classifier scores with step and heading evidence."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from walkstand.fusion.fusion_types import LABEL_COLORS
from walkstand.fusion.fusion_types import FusionOutput
from walkstand.fusion.fusion_types import MotionLabel


@dataclass(frozen=True)
class FusionEvidence:
    """Auxiliary evidence captured when a window is dispatched.

    Attributes:
        step_delta: Steps counted since the previous window
        current_azimuth_deg: Latest smoothed heading, or None if unknown
        standing_azimuth_deg: Latched standing heading, or None
    """

    step_delta: float = 0.0
    current_azimuth_deg: Optional[float] = None
    standing_azimuth_deg: Optional[float] = None


def fuse_decision(
    scores: tuple[float, float],
    evidence: FusionEvidence,
    step_override_min_delta: float = 1.0,
    orientation_override_threshold_deg: float = 20.0,
) -> FusionOutput:
    """Combine classifier scores with auxiliary evidence.

    Rules apply in a fixed order, each only in its stated direction:

    1. Base label is the argmax of (p_standing, p_walking). A tie is
       Walking.
    2. More than `step_override_min_delta` new steps force Walking.
    3. A Walking label is forced back to Standing when the device still
       points within `orientation_override_threshold_deg` of the latched
       standing heading.
    """

    p_standing, p_walking = scores
    label: MotionLabel = (
        MotionLabel.STANDING if p_standing > p_walking else MotionLabel.WALKING
    )

    # A person cannot register several new steps while standing still
    step_override: bool = evidence.step_delta > step_override_min_delta
    if step_override:
        label = MotionLabel.WALKING

    orientation_override: bool = False
    if (
        label == MotionLabel.WALKING
        and evidence.standing_azimuth_deg is not None
        and evidence.current_azimuth_deg is not None
    ):
        diff: float = abs(evidence.current_azimuth_deg - evidence.standing_azimuth_deg)
        if diff < orientation_override_threshold_deg:
            label = MotionLabel.STANDING
            orientation_override = True

    return FusionOutput(
        label=label,
        color=LABEL_COLORS[label],
        scores=(p_standing, p_walking),
        step_override=step_override,
        orientation_override=orientation_override,
    )
