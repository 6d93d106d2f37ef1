################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Motion labels, display colors and fused decision results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MotionLabel(Enum):
    STANDING = "Standing"
    WALKING = "Walking"


class ColorCode(Enum):
    """Display color paired with a label."""

    RED = "red"
    GREEN = "green"

    # Idle or uncalibrated
    WHITE = "white"


# Display color for each label
LABEL_COLORS: dict[MotionLabel, ColorCode] = {
    MotionLabel.STANDING: ColorCode.RED,
    MotionLabel.WALKING: ColorCode.GREEN,
}


@dataclass(frozen=True)
class FusionOutput:
    """Final decision for one classifier window.

    Attributes:
        label: Fused motion label
        color: Display color for the label
        scores: Classifier scores as (p_standing, p_walking)
        step_override: True if the step counter forced Walking
        orientation_override: True if heading stability forced Standing
    """

    label: MotionLabel
    color: ColorCode
    scores: tuple[float, float] = (0.0, 0.0)
    step_override: bool = False
    orientation_override: bool = False
