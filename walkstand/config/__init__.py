################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

from walkstand.config.motion_config import MotionConfig
from walkstand.config.motion_config import MotionConfigError
from walkstand.config.motion_config import load_motion_config
from walkstand.config.motion_params import MotionParams


__all__ = [
    "MotionConfig",
    "MotionConfigError",
    "MotionParams",
    "load_motion_config",
]
