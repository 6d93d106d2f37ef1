################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""One-dimensional Kalman filter with identity dynamics."""

from __future__ import annotations

import math


class ScalarKalmanFilter:
    """
    Recursive estimator for a single noisy scalar signal.

    The process noise `q` and measurement noise `r` are public so callers can
    retune them between updates, e.g. to model higher platform dynamics when
    the raw signal is large.
    """

    def __init__(self, q: float, r: float, x: float = 0.0, p: float = 1.0) -> None:
        if not (math.isfinite(q) and q > 0.0):
            raise ValueError("q must be > 0")
        if not (math.isfinite(r) and r > 0.0):
            raise ValueError("r must be > 0")
        if not (math.isfinite(p) and p >= 0.0):
            raise ValueError("p must be >= 0")

        # Process noise variance
        self.q: float = float(q)

        # Measurement noise variance
        self.r: float = float(r)

        # State estimate
        self.x: float = float(x)

        # Error covariance
        self.p: float = float(p)

        # Kalman gain from the last update
        self.k: float = 0.0

    def update(self, measurement: float) -> float:
        """Fold a new measurement into the estimate and return the estimate."""

        self.p += self.q
        self.k = self.p / (self.p + self.r)
        self.x += self.k * (float(measurement) - self.x)
        self.p *= 1.0 - self.k
        return self.x
