################################################################################
#
#  Copyright (C) 2026 WalkStand contributors
#  This file is part of WalkStand
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""High-level configuration wrapper for the motion state engine."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Mapping

import yaml

from walkstand.config.motion_params import MotionParams


class MotionConfigError(Exception):
    """Raised when motion configuration validation fails."""


@dataclass(frozen=True)
class MotionConfig:
    """Convenience wrapper around validated motion parameters."""

    params: MotionParams

    def __init__(self, params: MotionParams) -> None:
        """Initialize the configuration wrapper and validate."""
        object.__setattr__(self, "params", params)
        self.validate()

    def validate(self) -> None:
        """Validate parameter invariants."""
        try:
            self.params.validate()
        except ValueError as exc:
            raise MotionConfigError(str(exc)) from exc

    @classmethod
    def defaults(cls) -> MotionConfig:
        """Return a configuration built from default parameters."""
        return cls(MotionParams.defaults())

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> MotionConfig:
        """Build a configuration from a flat parameter mapping."""
        try:
            params: MotionParams = MotionParams.from_dict(data)
        except ValueError as exc:
            raise MotionConfigError(str(exc)) from exc
        return cls(params)

    def to_yaml(self) -> str:
        """Serialize the parameters to a YAML document."""
        return yaml.safe_dump(self.params.as_dict(), sort_keys=False)


def load_motion_config(path: str | Path) -> MotionConfig:
    """Load a motion configuration from a YAML file.

    An empty document yields the defaults. A top-level "walkstand" key may
    wrap the parameter mapping.
    """

    config_path: Path = Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data: Any = yaml.safe_load(handle)
    except OSError as exc:
        raise MotionConfigError(f"unable to read {config_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise MotionConfigError(f"invalid YAML in {config_path}: {exc}") from exc

    if data is None:
        return MotionConfig.defaults()
    if isinstance(data, Mapping) and "walkstand" in data and len(data) == 1:
        data = data["walkstand"]
    if not isinstance(data, Mapping):
        raise MotionConfigError("configuration root must be a mapping")

    return MotionConfig.from_mapping(data)
