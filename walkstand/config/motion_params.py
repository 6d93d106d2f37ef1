################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import fields
from dataclasses import replace
from typing import Any
from typing import Mapping


# Standard gravity in m/s^2
STANDARD_GRAVITY: float = 9.80665


@dataclass(frozen=True, slots=True)
class MotionParams:
    """Configuration parameters for the motion state engine.

    Calibration:
        - calibration_duration_ms: length of the passive sampling pass.
        - gravity_mps2: gravity removed from the accelerometer Z bias.

    Sensor filters (diagonal Q/R per sensor, unitless variances):
        - accel_q, accel_r, gyro_q, gyro_r, mag_q, mag_r.
        - initial_covariance: diagonal of P at filter creation.

    Adaptive noise:
        - adaptive_noise: enable per-axis noise retuning.
        - accel_adaptive_threshold: raw |a_i| (m/s^2) above which
          accel_q_elevated replaces accel_q on that axis.
        - gyro_adaptive_threshold: raw |w_i| (rad/s) above which
          gyro_r_elevated replaces gyro_r on that axis.

    Orientation:
        - azimuth_q, azimuth_r: heading smoother noise.
        - orientation_threshold_deg: heading delta treated as "still".
        - orientation_stable_duration_ms: dwell before latching a standing
          heading.

    Fusion:
        - window_size: (|mag|, |gyro|) pairs per classifier call.
        - step_override_min_delta: new steps strictly above this force
          Walking.
        - orientation_override_threshold_deg: heading delta to the standing
          reference under which Walking is overridden to Standing.
        - max_pending_inferences: windows allowed to queue on the worker.

    Auxiliary:
        - location_movement_threshold_m: fix-to-fix distance asserting
          movement.
        - sampling_period_us: requested maximum sensor sampling period.

    validate() rejects non-positive noise values, durations and sizes.
    """

    calibration_duration_ms: int = 5000
    gravity_mps2: float = STANDARD_GRAVITY
    accel_q: float = 0.0005
    accel_r: float = 0.05
    gyro_q: float = 0.001
    gyro_r: float = 0.1
    mag_q: float = 0.0007
    mag_r: float = 0.07
    initial_covariance: float = 1.0
    adaptive_noise: bool = True
    accel_adaptive_threshold: float = 15.0
    accel_q_elevated: float = 0.001
    gyro_adaptive_threshold: float = 1.0
    gyro_r_elevated: float = 0.15
    azimuth_q: float = 0.0005
    azimuth_r: float = 0.05
    orientation_threshold_deg: float = 20.0
    orientation_stable_duration_ms: int = 1000
    window_size: int = 100
    step_override_min_delta: float = 1.0
    orientation_override_threshold_deg: float = 20.0
    max_pending_inferences: int = 2
    location_movement_threshold_m: float = 3.0
    sampling_period_us: int = 10000

    @staticmethod
    def defaults() -> MotionParams:
        """Return a stable default parameter set."""
        params: MotionParams = MotionParams()
        params.validate()
        return params

    @classmethod
    def from_dict(cls, params: Mapping[str, object]) -> MotionParams:
        """Construct parameters from a mapping, rejecting unknown keys."""
        if not isinstance(params, Mapping):
            raise ValueError("params must be a mapping")
        unknown_keys: list[str] = sorted(set(params.keys()) - set(cls._field_order()))
        if unknown_keys:
            raise ValueError(f"unknown parameter: {unknown_keys[0]}")

        defaults: MotionParams = cls.defaults()
        values: dict[str, Any] = {}
        for name in cls._field_order():
            default: object = getattr(defaults, name)
            value: object = params.get(name, default)
            if isinstance(default, bool):
                values[name] = cls._as_bool(name, value)
            elif isinstance(default, int):
                values[name] = cls._as_int(name, value)
            else:
                values[name] = cls._as_float(name, value)

        result: MotionParams = cls(**values)
        result.validate()
        return result

    def validate(self) -> None:
        """Validate parameters and raise ValueError on failure."""
        if self.calibration_duration_ms <= 0:
            raise ValueError("calibration_duration_ms must be > 0")
        self._validate_positive("gravity_mps2", self.gravity_mps2)
        self._validate_positive("accel_q", self.accel_q)
        self._validate_positive("accel_r", self.accel_r)
        self._validate_positive("gyro_q", self.gyro_q)
        self._validate_positive("gyro_r", self.gyro_r)
        self._validate_positive("mag_q", self.mag_q)
        self._validate_positive("mag_r", self.mag_r)
        self._validate_non_negative("initial_covariance", self.initial_covariance)
        self._validate_non_negative(
            "accel_adaptive_threshold", self.accel_adaptive_threshold
        )
        self._validate_positive("accel_q_elevated", self.accel_q_elevated)
        self._validate_non_negative(
            "gyro_adaptive_threshold", self.gyro_adaptive_threshold
        )
        self._validate_positive("gyro_r_elevated", self.gyro_r_elevated)
        self._validate_positive("azimuth_q", self.azimuth_q)
        self._validate_positive("azimuth_r", self.azimuth_r)
        self._validate_positive(
            "orientation_threshold_deg", self.orientation_threshold_deg
        )
        if self.orientation_stable_duration_ms < 0:
            raise ValueError("orientation_stable_duration_ms must be >= 0")
        if self.window_size <= 0:
            raise ValueError("window_size must be > 0")
        self._validate_non_negative(
            "step_override_min_delta", self.step_override_min_delta
        )
        self._validate_positive(
            "orientation_override_threshold_deg",
            self.orientation_override_threshold_deg,
        )
        if self.max_pending_inferences <= 0:
            raise ValueError("max_pending_inferences must be > 0")
        self._validate_positive(
            "location_movement_threshold_m", self.location_movement_threshold_m
        )
        if self.sampling_period_us <= 0:
            raise ValueError("sampling_period_us must be > 0")

    def as_dict(self) -> dict[str, object]:
        """Return a YAML-serializable dict representation."""
        return {name: getattr(self, name) for name in self._field_order()}

    def replace(self, **overrides: Any) -> MotionParams:
        """Return a modified copy of the parameters."""
        return replace(self, **overrides)

    @staticmethod
    def _as_float(name: str, value: object) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{name} must be a float")
        return float(value)

    @staticmethod
    def _as_int(name: str, value: object) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{name} must be an int")
        return int(value)

    @staticmethod
    def _as_bool(name: str, value: object) -> bool:
        if not isinstance(value, bool):
            raise ValueError(f"{name} must be a bool")
        return value

    @staticmethod
    def _validate_positive(name: str, value: float) -> None:
        if not value > 0.0:
            raise ValueError(f"{name} must be > 0")

    @staticmethod
    def _validate_non_negative(name: str, value: float) -> None:
        if not value >= 0.0:
            raise ValueError(f"{name} must be >= 0")

    @staticmethod
    def _field_order() -> list[str]:
        return [field.name for field in fields(MotionParams)]
