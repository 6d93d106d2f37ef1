################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Informational movement detection from successive location fixes."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


# Mean Earth radius in meters
EARTH_RADIUS_M: float = 6371008.8


@dataclass(frozen=True)
class LocationFix:
    """A geographic fix, in degrees."""

    latitude_deg: float
    longitude_deg: float
    timestamp_ms: int


def distance_m(a: LocationFix, b: LocationFix) -> float:
    """Return the great-circle distance between two fixes in meters."""

    lat_a: float = math.radians(a.latitude_deg)
    lat_b: float = math.radians(b.latitude_deg)
    d_lat: float = lat_b - lat_a
    d_lon: float = math.radians(b.longitude_deg - a.longitude_deg)

    h: float = (
        math.sin(d_lat / 2.0) ** 2
        + math.cos(lat_a) * math.cos(lat_b) * math.sin(d_lon / 2.0) ** 2
    )
    return 2.0 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


class LocationMonitor:
    """
    Asserts "moving" when a fix lands far enough from the previous one.

    This is an independent signal and is never folded into the fused
    standing/walking decision.
    """

    def __init__(self, movement_threshold_m: float = 3.0) -> None:
        if movement_threshold_m <= 0.0:
            raise ValueError("movement_threshold_m must be > 0")

        self._movement_threshold_m: float = float(movement_threshold_m)
        self._last_fix: Optional[LocationFix] = None
        self._moving: bool = False

    @property
    def moving(self) -> bool:
        """Return the verdict of the last fix."""

        return self._moving

    def update(self, fix: LocationFix) -> bool:
        """Record a fix and return True if it asserts movement."""

        moving: bool = False
        if self._last_fix is not None:
            moving = distance_m(self._last_fix, fix) >= self._movement_threshold_m
        self._last_fix = fix
        self._moving = moving
        return moving

    def reset(self) -> None:
        self._last_fix = None
        self._moving = False
