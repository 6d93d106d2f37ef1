################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Boundary contract for the external standing/walking classifier."""

from __future__ import annotations

import math
from typing import Protocol
from typing import Sequence

import numpy as np
from numpy.typing import NDArray


_FEATURE_ARRAY = NDArray[np.float32]

# Scores returned per window, (p_standing, p_walking)
SCORE_COUNT: int = 2


class ClassifierError(Exception):
    """Raised when a classifier call fails or violates its contract."""


class Classifier(Protocol):
    """
    Binary motion classifier.

    Accepts a flat feature vector of interleaved (|mag|, |gyro|) pairs and
    returns exactly two scores, (p_standing, p_walking).
    """

    def predict(self, features: _FEATURE_ARRAY) -> Sequence[float]: ...


def validate_scores(scores: Sequence[float]) -> tuple[float, float]:
    """Check the classifier output shape and return it as a float pair."""

    try:
        flat: NDArray[np.float64] = np.asarray(scores, dtype=np.float64).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise ClassifierError(f"non-numeric classifier output: {exc}") from exc
    values: list[float] = [float(score) for score in flat]

    if len(values) != SCORE_COUNT:
        raise ClassifierError(
            f"classifier must return {SCORE_COUNT} scores, got {len(values)}"
        )
    if not all(math.isfinite(value) for value in values):
        raise ClassifierError("classifier returned non-finite scores")

    return values[0], values[1]
