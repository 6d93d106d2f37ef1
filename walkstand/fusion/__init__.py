################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

from walkstand.fusion.classifier import Classifier
from walkstand.fusion.classifier import ClassifierError
from walkstand.fusion.fusion_engine import FusionEngine
from walkstand.fusion.fusion_types import ColorCode
from walkstand.fusion.fusion_types import FusionOutput
from walkstand.fusion.fusion_types import MotionLabel


__all__ = [
    "Classifier",
    "ClassifierError",
    "ColorCode",
    "FusionEngine",
    "FusionOutput",
    "MotionLabel",
]
