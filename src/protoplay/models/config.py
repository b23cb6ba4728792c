"""
Engine configuration models

Typed view over the merged YAML config. Missing keys keep the defaults
below so a partial config file is always valid.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from protoplay.models.enums import LogLevel
from protoplay.utils.enum_helper import EnumHelper


@dataclass
class AnimationConfig:
    default_duration: float = 0.3
    default_easing: str = "ease-out"
    enable_smart_animate: bool = True
    frame_interval: float = 0.0  # seconds per frame, 0 = bare loop yield

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AnimationConfig":
        data = data or {}
        return cls(
            default_duration=float(data.get("default_duration", cls.default_duration)),
            default_easing=str(data.get("default_easing", cls.default_easing)),
            enable_smart_animate=bool(data.get("enable_smart_animate", cls.enable_smart_animate)),
            frame_interval=float(data.get("frame_interval", cls.frame_interval)),
        )


@dataclass
class LayoutConfig:
    enable_position_adjustment: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LayoutConfig":
        data = data or {}
        return cls(
            enable_position_adjustment=bool(
                data.get("enable_position_adjustment", cls.enable_position_adjustment)
            ),
        )


@dataclass
class LoggingConfig:
    level: LogLevel = LogLevel.INFO
    colors: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LoggingConfig":
        data = data or {}
        return cls(
            level=EnumHelper.from_string(LogLevel, str(data.get("level", "INFO")), default=LogLevel.INFO),
            colors=bool(data.get("colors", True)),
        )


@dataclass
class EngineConfig:
    """
    Root engine configuration

    Example:
        config = EngineConfig.from_dict(yaml.safe_load(text))
        config.animation.default_duration  # 0.3
    """
    animation: AnimationConfig = field(default_factory=AnimationConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EngineConfig":
        data = data or {}
        return cls(
            animation=AnimationConfig.from_dict(data.get("animation")),
            layout=LayoutConfig.from_dict(data.get("layout")),
            logging=LoggingConfig.from_dict(data.get("logging")),
        )
