################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""
Windowed classifier invocation and decision fusion
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any
from typing import Callable
from typing import Optional
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from walkstand.config.motion_params import MotionParams
from walkstand.estimation.orientation_tracker import OrientationState
from walkstand.fusion.classifier import Classifier
from walkstand.fusion.classifier import ClassifierError
from walkstand.fusion.classifier import validate_scores
from walkstand.fusion.fusion_decision import FusionEvidence
from walkstand.fusion.fusion_decision import fuse_decision
from walkstand.fusion.fusion_types import FusionOutput
from walkstand.fusion.inference_worker import InferenceWorker
from walkstand.fusion.sliding_window import SlidingWindow


_FLOAT_ARRAY = NDArray[np.float64]
_FEATURE_ARRAY = NDArray[np.float32]

OutputSink = Callable[[FusionOutput], None]

_LOG: logging.Logger = logging.getLogger(__name__)


class FusionEngine:
    """
    Fills the feature window and fuses each classifier verdict.

    Sensor-side calls (on_gyroscope, on_magnetometer, on_step_count) run on
    the caller's thread and never block on the classifier. Each full window
    is copied, paired with the evidence known at that moment and handed to a
    single background worker, which calls the classifier, fuses the result
    and passes the FusionOutput to the sink.
    """

    def __init__(
        self,
        classifier: Classifier,
        sink: OutputSink,
        params: Optional[MotionParams] = None,
        worker: Optional[InferenceWorker] = None,
    ) -> None:
        self._params: MotionParams = params if params is not None else MotionParams()
        self._classifier: Classifier = classifier
        self._sink: OutputSink = sink
        self._window: SlidingWindow = SlidingWindow(self._params.window_size)
        self._worker: InferenceWorker = (
            worker
            if worker is not None
            else InferenceWorker(max_pending=self._params.max_pending_inferences)
        )

        self._latest_gyro_magnitude: float = 0.0

        # Cumulative step counter readings, None until the first reading
        self._last_step_count: Optional[float] = None
        self._step_count_at_last_inference: Optional[float] = None

        self._dispatched_windows: int = 0
        self._dropped_windows: int = 0

    @property
    def window(self) -> SlidingWindow:
        return self._window

    @property
    def latest_gyro_magnitude(self) -> float:
        return self._latest_gyro_magnitude

    @property
    def last_step_count(self) -> Optional[float]:
        return self._last_step_count

    @property
    def step_count_at_last_inference(self) -> Optional[float]:
        return self._step_count_at_last_inference

    @property
    def dispatched_windows(self) -> int:
        return self._dispatched_windows

    @property
    def dropped_windows(self) -> int:
        return self._dropped_windows

    def on_gyroscope(self, filtered: _FLOAT_ARRAY) -> float:
        """Record the magnitude of the latest filtered gyroscope vector."""

        self._latest_gyro_magnitude = _magnitude(filtered)
        return self._latest_gyro_magnitude

    def on_step_count(self, count: float) -> None:
        """Record a cumulative step count. The first reading is the baseline."""

        count_val: float = float(count)
        if self._last_step_count is None:
            self._step_count_at_last_inference = count_val
        self._last_step_count = count_val

    def on_magnetometer(
        self,
        filtered: _FLOAT_ARRAY,
        orientation: Optional[OrientationState] = None,
    ) -> Optional[Future[Any]]:
        """Write (|mag|, |gyro|) into the window.

        Args:
            filtered: Filtered magnetometer vector
            orientation: Orientation snapshot used for the heading override

        Returns:
            The classifier job future when this sample completed a window
        """

        snapshot: Optional[_FEATURE_ARRAY] = self._window.append(
            _magnitude(filtered), self._latest_gyro_magnitude
        )
        if snapshot is None:
            return None

        baseline: Optional[float] = self._step_count_at_last_inference
        future: Optional[Future[Any]] = self._dispatch(
            snapshot, self._take_evidence(orientation)
        )
        if future is None:
            # Steps taken during a dropped window count toward the next one
            self._step_count_at_last_inference = baseline

        return future

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for dispatched windows to be classified."""

        return self._worker.flush(timeout)

    def reset(self) -> None:
        """Discard the partially filled window."""

        self._window.reset()

    def shutdown(self, wait_for_jobs: bool = True) -> None:
        self._worker.shutdown(wait_for_jobs)

    def _take_evidence(self, orientation: Optional[OrientationState]) -> FusionEvidence:
        step_delta: float = 0.0
        if (
            self._last_step_count is not None
            and self._step_count_at_last_inference is not None
        ):
            step_delta = self._last_step_count - self._step_count_at_last_inference
        self._step_count_at_last_inference = self._last_step_count

        return FusionEvidence(
            step_delta=step_delta,
            current_azimuth_deg=(
                orientation.current_azimuth_deg if orientation is not None else None
            ),
            standing_azimuth_deg=(
                orientation.standing_azimuth_deg if orientation is not None else None
            ),
        )

    def _dispatch(
        self, features: _FEATURE_ARRAY, evidence: FusionEvidence
    ) -> Optional[Future[Any]]:
        future: Optional[Future[Any]] = self._worker.submit(
            lambda: self._classify(features, evidence)
        )
        if future is None:
            self._dropped_windows += 1
        else:
            self._dispatched_windows += 1
        return future

    def _classify(
        self, features: _FEATURE_ARRAY, evidence: FusionEvidence
    ) -> Optional[FusionOutput]:
        try:
            raw_scores: Sequence[float] = self._classifier.predict(features)
            scores: tuple[float, float] = validate_scores(raw_scores)
        except ClassifierError as exc:
            _LOG.error("Dropping window, %s", exc)
            return None

        output: FusionOutput = fuse_decision(
            scores,
            evidence,
            step_override_min_delta=self._params.step_override_min_delta,
            orientation_override_threshold_deg=(
                self._params.orientation_override_threshold_deg
            ),
        )

        _LOG.debug(
            "Fused window scores=%s label=%s step_override=%s orientation_override=%s",
            scores,
            output.label.value,
            output.step_override,
            output.orientation_override,
        )

        self._sink(output)

        return output


def _magnitude(vec: _FLOAT_ARRAY) -> float:
    return float(np.linalg.norm(np.asarray(vec, dtype=np.float64)))
