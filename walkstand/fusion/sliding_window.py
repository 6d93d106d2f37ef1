################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Fixed-capacity window of classifier features."""

from __future__ import annotations

from typing import Optional

import numpy as np
from numpy.typing import NDArray


_FEATURE_ARRAY = NDArray[np.float32]

# Features per slot, (|mag|, |gyro|)
FEATURES_PER_SLOT: int = 2


class SlidingWindow:
    """
    Buffer of (|mag|, |gyro|) pairs consumed as one classifier batch.

    Pairs are stored interleaved, [mag0, gyro0, mag1, gyro1, ...]. When the
    last slot is written the write index wraps to 0 and a copy of the full
    buffer is returned, so the caller never hands out the live buffer.
    """

    def __init__(self, capacity: int = 100) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")

        self._capacity: int = int(capacity)
        self._buffer: _FEATURE_ARRAY = np.zeros(
            self._capacity * FEATURES_PER_SLOT, dtype=np.float32
        )
        self._index: int = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def index(self) -> int:
        """Return the next slot to be written."""

        return self._index

    def __len__(self) -> int:
        return self._index

    def append(
        self, mag_magnitude: float, gyro_magnitude: float
    ) -> Optional[_FEATURE_ARRAY]:
        """Write a pair into the current slot.

        Returns:
            A snapshot of the full window when this write fills it, else None
        """

        offset: int = self._index * FEATURES_PER_SLOT
        self._buffer[offset] = mag_magnitude
        self._buffer[offset + 1] = gyro_magnitude
        self._index += 1

        if self._index < self._capacity:
            return None

        self._index = 0
        return self._buffer.copy()

    def reset(self) -> None:
        """Discard the partially filled window."""

        self._index = 0
