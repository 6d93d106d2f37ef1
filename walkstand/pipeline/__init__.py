################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

from walkstand.pipeline.motion_pipeline import MotionPipeline
from walkstand.pipeline.motion_pipeline import NotCalibratedError
from walkstand.pipeline.motion_pipeline import PipelineStatus


__all__ = [
    "MotionPipeline",
    "NotCalibratedError",
    "PipelineStatus",
]
