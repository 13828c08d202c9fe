"""
Preview configuration for the G-code pipeline.
Simple, clean configuration system with a few presets.
"""
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Tuple
import json
import math

Color = Tuple[float, float, float]


class ConfigError(ValueError):
    """Raised when a configuration file or value is invalid."""


@dataclass
class PreviewConfig:
    """Tolerances and colors used by the interpreter and tessellator."""
    name: str = "Default"

    # Tessellation
    chord_tolerance: float = 0.01
    sweep_epsilon: float = 5e-7

    # Arc validation: reject when the radius difference exceeds the absolute
    # tolerance, or exceeds both the minimum and the relative tolerance
    arc_absolute_tolerance: float = 0.5
    arc_minimum_tolerance: float = 0.005
    arc_relative_tolerance: float = 0.001

    # Segment colors (RGB, 0..1)
    rapid_color: Color = (1.0, 0.0, 0.0)
    feed_color: Color = (0.0, 1.0, 0.0)

    def validate(self):
        """Check value ranges, raising ConfigError on the first problem."""
        for key in ("chord_tolerance", "sweep_epsilon", "arc_absolute_tolerance",
                    "arc_minimum_tolerance", "arc_relative_tolerance"):
            if not math.isfinite(getattr(self, key)):
                raise ConfigError(f"{key} must be a finite number")
        if self.chord_tolerance <= 0:
            raise ConfigError("chord_tolerance must be positive")
        for key in ("sweep_epsilon", "arc_absolute_tolerance",
                    "arc_minimum_tolerance", "arc_relative_tolerance"):
            if getattr(self, key) < 0:
                raise ConfigError(f"{key} must not be negative")
        for key in ("rapid_color", "feed_color"):
            color = getattr(self, key)
            if len(color) != 3 or not all(0.0 <= c <= 1.0 for c in color):
                raise ConfigError(f"{key} must be three components between 0 and 1")


class ConfigManager:
    """Manages preview configurations with simple presets."""

    @staticmethod
    def default() -> PreviewConfig:
        """Standard preview tolerances."""
        return PreviewConfig()

    @staticmethod
    def fine() -> PreviewConfig:
        """Tighter chords for close-up inspection of small arcs."""
        return PreviewConfig(name="Fine", chord_tolerance=0.001)

    @staticmethod
    def coarse() -> PreviewConfig:
        """Fewer chords for very large programs."""
        return PreviewConfig(name="Coarse", chord_tolerance=0.1)

    @staticmethod
    def get_config(preset: str) -> PreviewConfig:
        """Get configuration by preset name."""
        configs = {
            "default": ConfigManager.default,
            "fine": ConfigManager.fine,
            "coarse": ConfigManager.coarse,
        }
        factory = configs.get(preset.lower())
        if factory is None:
            raise ConfigError(f"Unknown preset '{preset}', expected one of {sorted(configs)}")
        return factory()

    @staticmethod
    def to_dict(config: PreviewConfig) -> Dict[str, Any]:
        data = asdict(config)
        data["rapid_color"] = list(config.rapid_color)
        data["feed_color"] = list(config.feed_color)
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> PreviewConfig:
        """Build a config from a mapping; missing keys keep their defaults."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object")

        known = {f.name for f in fields(PreviewConfig)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")

        values = dict(data)
        try:
            for key in ("rapid_color", "feed_color"):
                if key in values:
                    values[key] = tuple(float(c) for c in values[key])
            for key in known - {"name", "rapid_color", "feed_color"}:
                if key in values:
                    values[key] = float(values[key])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e

        config = PreviewConfig(**values)
        config.validate()
        return config

    @staticmethod
    def save_config(config: PreviewConfig, filepath: str):
        """Save configuration to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(ConfigManager.to_dict(config), f, indent=2)

    @staticmethod
    def load_config(filepath: str) -> PreviewConfig:
        """Load configuration from JSON file."""
        try:
            with open(filepath, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{filepath}: {e}") from e

        return ConfigManager.from_dict(data)
