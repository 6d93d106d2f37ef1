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
Owned state object driving calibration, filtering and fusion
"""

from __future__ import annotations

import logging
import queue
from enum import Enum
from typing import Iterable
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from walkstand.config.motion_config import MotionConfig
from walkstand.config.motion_params import MotionParams
from walkstand.estimation.calibration_session import CalibrationBiases
from walkstand.estimation.calibration_session import CalibrationSession
from walkstand.estimation.orientation_tracker import OrientationTracker
from walkstand.estimation.sensor_filter_bank import SensorFilterBank
from walkstand.estimation.sensor_types import ALL_SENSORS
from walkstand.estimation.sensor_types import SensorSample
from walkstand.estimation.sensor_types import SensorType
from walkstand.estimation.sensor_types import StepCountSample
from walkstand.fusion.classifier import Classifier
from walkstand.fusion.fusion_engine import FusionEngine
from walkstand.fusion.fusion_types import ColorCode
from walkstand.fusion.fusion_types import FusionOutput
from walkstand.fusion.fusion_types import MotionLabel
from walkstand.pipeline.location_monitor import LocationFix
from walkstand.pipeline.location_monitor import LocationMonitor
from walkstand.pipeline.telemetry import Telemetry


_FLOAT_ARRAY = NDArray[np.float64]

_LOG: logging.Logger = logging.getLogger(__name__)

# Status messages
MSG_CALIBRATE_FIRST: str = "Please calibrate your sensors first."
MSG_CALIBRATE: str = "Please calibrate your sensors"
MSG_CALIBRATING: str = "Calibration in progress..."
MSG_CALIBRATED: str = "Calibration done!"


class NotCalibratedError(Exception):
    """Raised when classification is requested before calibration completes."""


class PipelineStatus(Enum):
    UNCALIBRATED = "uncalibrated"
    CALIBRATING = "calibrating"
    READY = "ready"
    RUNNING = "running"


class MotionPipeline:
    """
    Standing/walking engine driven by an external sample pump.

    The pump feeds raw samples through process_sample() and
    process_step_count() on a single thread. Calibration and classification
    are mutually exclusive: while calibrating, raw samples only reach the
    calibration buffers, and classification is refused until a calibration
    pass has completed. Fused outputs are produced on a background worker
    and queued; the owning thread collects them with poll_outputs().
    """

    def __init__(
        self,
        classifier: Classifier,
        params: Optional[MotionParams] = None,
        available_sensors: Iterable[SensorType] = ALL_SENSORS,
        step_counter_available: bool = True,
    ) -> None:
        self._config: MotionConfig = MotionConfig(
            params if params is not None else MotionParams.defaults()
        )
        self._params: MotionParams = self._config.params
        self._classifier: Classifier = classifier
        self._available: frozenset[SensorType] = frozenset(available_sensors)
        self._step_counter_available: bool = step_counter_available

        self._calibration: CalibrationSession = CalibrationSession(
            duration_ms=self._params.calibration_duration_ms,
            gravity_mps2=self._params.gravity_mps2,
        )
        self._biases: Optional[CalibrationBiases] = None
        self._status: PipelineStatus = PipelineStatus.UNCALIBRATED
        self._status_message: str = ""

        # Runtime components, created by start()
        self._filters: Optional[SensorFilterBank] = None
        self._orientation: Optional[OrientationTracker] = None
        self._fusion: Optional[FusionEngine] = None
        self._location: LocationMonitor = LocationMonitor(
            self._params.location_movement_threshold_m
        )

        self._latest_accel: Optional[_FLOAT_ARRAY] = None
        self._latest_mag: Optional[_FLOAT_ARRAY] = None
        self._initial_step_count: Optional[float] = None
        self._last_step_count: Optional[float] = None

        self._outputs: queue.Queue[FusionOutput] = queue.Queue()
        self._last_output: Optional[FusionOutput] = None
        self._color: ColorCode = ColorCode.WHITE

    @property
    def params(self) -> MotionParams:
        return self._params

    @property
    def sampling_period_us(self) -> int:
        """Return the maximum sensor sampling period the pump should request."""

        return self._params.sampling_period_us

    @property
    def status(self) -> PipelineStatus:
        return self._status

    @property
    def status_message(self) -> str:
        return self._status_message

    @property
    def is_calibrated(self) -> bool:
        return self._biases is not None

    @property
    def biases(self) -> Optional[CalibrationBiases]:
        return self._biases

    @property
    def color(self) -> ColorCode:
        return self._color

    @property
    def last_output(self) -> Optional[FusionOutput]:
        return self._last_output

    @property
    def orientation(self) -> Optional[OrientationTracker]:
        return self._orientation

    @property
    def fusion(self) -> Optional[FusionEngine]:
        return self._fusion

    def is_available(self, sensor: SensorType) -> bool:
        return sensor in self._available

    def start_calibration(self, now_ms: int) -> bool:
        """Begin a calibration pass, stopping classification first.

        Returns:
            False if a pass is already in progress
        """

        if self._status == PipelineStatus.CALIBRATING:
            return False
        if self._status == PipelineStatus.RUNNING:
            self.stop()

        self._calibration.start(now_ms)
        self._biases = None
        self._status = PipelineStatus.CALIBRATING
        self._status_message = MSG_CALIBRATING

        return True

    def finish_calibration(self) -> CalibrationBiases:
        """Complete the calibration pass immediately."""

        if self._status != PipelineStatus.CALIBRATING:
            raise NotCalibratedError("no calibration pass in progress")
        return self._complete_calibration(self._calibration.finish())

    def start(self) -> None:
        """Start classification.

        Raises:
            NotCalibratedError: if no calibration pass has completed
        """

        if self._status == PipelineStatus.RUNNING:
            return
        if self._biases is None or self._status != PipelineStatus.READY:
            self._status_message = MSG_CALIBRATE_FIRST
            raise NotCalibratedError(MSG_CALIBRATE_FIRST)

        for sensor in ALL_SENSORS:
            if sensor not in self._available:
                _LOG.warning(
                    "%s unavailable, dependent features disabled", sensor.value
                )
        if not self._step_counter_available:
            _LOG.warning("Step counter unavailable, step override disabled")

        self._filters = SensorFilterBank(self._params)
        self._orientation = OrientationTracker(
            threshold_deg=self._params.orientation_threshold_deg,
            stable_duration_ms=self._params.orientation_stable_duration_ms,
            azimuth_q=self._params.azimuth_q,
            azimuth_r=self._params.azimuth_r,
        )
        self._fusion = FusionEngine(
            classifier=self._classifier,
            sink=self._outputs.put,
            params=self._params,
        )
        self._latest_accel = None
        self._latest_mag = None
        self._initial_step_count = None
        self._last_step_count = None
        self._location.reset()

        self._status = PipelineStatus.RUNNING
        self._status_message = ""

        _LOG.info("Motion pipeline started")

    def stop(self) -> None:
        """Stop classification and return the display to idle."""

        if self._status != PipelineStatus.RUNNING:
            return

        if self._fusion is not None:
            self._fusion.reset()
            self._fusion.shutdown(wait_for_jobs=True)
        self._fusion = None
        self._location.reset()

        self._status = PipelineStatus.READY
        self._status_message = ""
        self._color = ColorCode.WHITE
        self._last_output = None

        # Outputs of the last windows belong to the stopped run
        self._drain()

        _LOG.info("Motion pipeline stopped")

    def close(self) -> None:
        self.stop()

    def process_sample(self, sample: SensorSample) -> Optional[_FLOAT_ARRAY]:
        """Feed a raw three-axis reading.

        Readings from sensors outside available_sensors are ignored.

        Returns:
            The filtered vector while running, else None
        """

        if sample.sensor not in self._available:
            return None

        if self._status == PipelineStatus.CALIBRATING:
            biases: Optional[CalibrationBiases] = self._calibration.poll(
                sample.timestamp_ms
            )
            if biases is not None:
                self._complete_calibration(biases)
            else:
                self._calibration.add_sample(sample.sensor, sample.values)
            return None

        if self._biases is None:
            self._status_message = MSG_CALIBRATE
            return None

        if (
            self._status != PipelineStatus.RUNNING
            or self._filters is None
            or self._orientation is None
            or self._fusion is None
        ):
            return None

        calibrated: _FLOAT_ARRAY = self._biases.apply(sample.sensor, sample.values)
        filtered: _FLOAT_ARRAY = self._filters.update(sample.sensor, calibrated)

        if sample.sensor == SensorType.ACCELEROMETER:
            self._latest_accel = filtered
            self._update_orientation(sample.timestamp_ms)
        elif sample.sensor == SensorType.GYROSCOPE:
            self._fusion.on_gyroscope(filtered)
        elif sample.sensor == SensorType.MAGNETOMETER:
            self._latest_mag = filtered
            self._update_orientation(sample.timestamp_ms)
            self._fusion.on_magnetometer(filtered, self._orientation.snapshot())

        return filtered

    def process_step_count(self, sample: StepCountSample) -> None:
        """Feed a cumulative step counter reading."""

        if self._status != PipelineStatus.RUNNING or self._fusion is None:
            return

        if self._initial_step_count is None:
            self._initial_step_count = float(sample.count)
        self._last_step_count = float(sample.count)
        self._fusion.on_step_count(sample.count)

    def process_location(self, fix: LocationFix) -> bool:
        """Feed a location fix. The verdict is informational only."""

        if self._status != PipelineStatus.RUNNING:
            return False
        return self._location.update(fix)

    def poll_outputs(self) -> list[FusionOutput]:
        """Collect fused outputs produced since the last call."""

        outputs: list[FusionOutput] = self._drain()
        if outputs and self._status == PipelineStatus.RUNNING:
            self._last_output = outputs[-1]
            self._color = outputs[-1].color
        return outputs

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait until dispatched windows have been classified."""

        if self._fusion is None:
            return True
        return self._fusion.flush(timeout)

    def telemetry(self) -> Telemetry:
        """Return a display snapshot of the pipeline."""

        steps: Optional[float] = None
        if self._initial_step_count is not None and self._last_step_count is not None:
            steps = self._last_step_count - self._initial_step_count

        label: Optional[MotionLabel] = (
            self._last_output.label if self._last_output is not None else None
        )

        return Telemetry(
            status_message=self._status_message,
            color=self._color,
            label=label,
            accel=self._latest_accel,
            gyro=self._filters.latest(SensorType.GYROSCOPE) if self._filters else None,
            mag=self._latest_mag,
            azimuth_deg=(
                self._orientation.current_azimuth_deg if self._orientation else None
            ),
            steps=steps,
            accel_available=SensorType.ACCELEROMETER in self._available,
            gyro_available=SensorType.GYROSCOPE in self._available,
            mag_available=SensorType.MAGNETOMETER in self._available,
            step_counter_available=self._step_counter_available,
            location_moving=self._location.moving,
        )

    def _complete_calibration(self, biases: CalibrationBiases) -> CalibrationBiases:
        self._biases = biases
        self._status = PipelineStatus.READY
        self._status_message = MSG_CALIBRATED
        return biases

    def _update_orientation(self, timestamp_ms: int) -> None:
        if self._orientation is None:
            return
        if self._latest_accel is None or self._latest_mag is None:
            return
        self._orientation.update(self._latest_accel, self._latest_mag, timestamp_ms)

    def _drain(self) -> list[FusionOutput]:
        outputs: list[FusionOutput] = []
        while True:
            try:
                outputs.append(self._outputs.get_nowait())
            except queue.Empty:
                break
        return outputs
