"""
Configuration schema for the dredge selection dashboard.

This module defines the configuration structure for the selection engine:
default depth filter, target (design) depth for shallow-point flagging,
export naming and the optional MQTT export sink.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from dredge_zone.analytics.aggregator import DepthRange
from dredge_zone.analytics.trends import DEFAULT_TARGET_DEPTH
from dredge_zone.export.serializer import DEFAULT_EXPORT_PREFIX


@dataclass(frozen=True)
class MQTTConfig:
    """MQTT broker configuration for the export sink."""

    broker: str
    topic: str = "dredge/exports"
    port: int = 1883
    username: Optional[str] = None
    password: Optional[str] = None
    qos: int = 1

    def __post_init__(self):
        """Validate MQTT configuration."""
        if not self.broker:
            raise ValueError("MQTT broker cannot be empty")

        if not 1 <= self.port <= 65535:
            raise ValueError(
                f"MQTT port must be in [1, 65535], got {self.port}"
            )

        if self.qos not in {0, 1, 2}:
            raise ValueError(
                f"MQTT QoS must be 0, 1, or 2, got {self.qos}"
            )


@dataclass(frozen=True)
class DashboardConfig:
    """
    Main configuration for the selection engine.

    Loaded from YAML and validated at startup.
    Immutable after construction (frozen dataclass).
    """

    depth_range: DepthRange = field(default_factory=DepthRange)
    target_depth: float = DEFAULT_TARGET_DEPTH
    export_prefix: str = DEFAULT_EXPORT_PREFIX
    log_level: str = "INFO"
    mqtt: Optional[MQTTConfig] = None

    def __post_init__(self):
        """Validate dashboard configuration."""
        if self.target_depth < 0:
            raise ValueError(
                f"target_depth must be >= 0, got {self.target_depth}"
            )

        if not self.export_prefix:
            raise ValueError("export_prefix cannot be empty")

        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(
                f"Invalid log_level: {self.log_level}. "
                f"Must be one of DEBUG, INFO, WARNING, ERROR"
            )

    @property
    def logging_level(self) -> int:
        """Numeric logging level."""
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "DashboardConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            depth_range: [0, 30]      # [min, max] meters
            target_depth: 12.0
            export_prefix: "dredge_selection"
            log_level: "INFO"

            mqtt:
              broker: "localhost"
              port: 1883
              topic: "dredge/exports"
              qos: 1
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        depth_range_data = data.get("depth_range", [0, 30])
        if len(depth_range_data) != 2:
            raise ValueError(
                f"depth_range must be [min, max], got {depth_range_data}"
            )
        depth_range = DepthRange(
            minimum=float(depth_range_data[0]),
            maximum=float(depth_range_data[1]),
        )

        mqtt_data = data.get("mqtt")
        mqtt_config = MQTTConfig(**mqtt_data) if mqtt_data else None

        return cls(
            depth_range=depth_range,
            target_depth=float(data.get("target_depth", DEFAULT_TARGET_DEPTH)),
            export_prefix=data.get("export_prefix", DEFAULT_EXPORT_PREFIX),
            log_level=str(data.get("log_level", "INFO")).upper(),
            mqtt=mqtt_config,
        )
