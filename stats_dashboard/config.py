"""
Configuration management for the Statistics Dashboard.

This module provides dataclasses for all configurable thresholds and settings,
with support for loading from YAML files and runtime modification via UI.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Optional, Dict, Any
import yaml

from stats_dashboard.utils.units import GlucoseUnits, EA1cDisplayUnit, TimeInRangeType


@dataclass
class GlucoseThresholds:
    """Glucose thresholds in mg/dL.

    low_limit/high_limit are the user's target range; tight_high is the upper
    bound of the tight range (TITR).
    """
    very_low: float = 54      # Level 2 hypoglycemia
    low_limit: float = 70     # Target range lower bound
    tight_high: float = 140   # Tight range upper bound
    high_limit: float = 180   # Target range upper bound
    very_high: float = 250    # Level 2 hyperglycemia


@dataclass
class DisplaySettings:
    """User-facing display preferences."""
    units: GlucoseUnits = GlucoseUnits.MG_DL
    time_in_range_type: TimeInRangeType = TimeInRangeType.STANDARD
    ea1c_display_unit: EA1cDisplayUnit = EA1cDisplayUnit.PERCENT
    color_scheme: str = "light"


@dataclass
class AnalysisSettings:
    """Settings for aggregation algorithms."""
    # Readings frequency
    readings_per_hour: int = 12  # 5-minute intervals

    # Timezone that tz-aware timestamps are converted to before being made naive
    timezone: Optional[str] = None


@dataclass
class SelectionDefaults:
    """Initial interval per tab (raw enum values)."""
    glucose_interval: str = "today"
    insulin_interval: str = "week"
    loop_interval: str = "today"
    meal_interval: str = "week"


@dataclass
class LoggingSettings:
    """Logging setup."""
    level: str = "INFO"
    log_file: Optional[str] = None
    max_bytes: int = 5 * 1024 * 1024
    backup_count: int = 3


@dataclass
class DashboardConfig:
    """Master configuration container."""
    glucose: GlucoseThresholds = field(default_factory=GlucoseThresholds)
    display: DisplaySettings = field(default_factory=DisplaySettings)
    analysis: AnalysisSettings = field(default_factory=AnalysisSettings)
    defaults: SelectionDefaults = field(default_factory=SelectionDefaults)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a plain dictionary (YAML-safe)."""
        data = asdict(self)
        for key, value in data['display'].items():
            if isinstance(value, Enum):
                data['display'][key] = value.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DashboardConfig':
        """Create config from dictionary, ignoring unknown keys."""
        config = cls()
        _apply(config.glucose, data.get('glucose'))
        _apply(config.display, data.get('display'))
        _apply(config.analysis, data.get('analysis'))
        _apply(config.defaults, data.get('defaults'))
        _apply(config.logging, data.get('logging'))

        # Coerce raw YAML values back into their typed form
        display = config.display
        display.units = GlucoseUnits(display.units)
        display.time_in_range_type = TimeInRangeType(display.time_in_range_type)
        display.ea1c_display_unit = EA1cDisplayUnit(display.ea1c_display_unit)
        return config


def _apply(section: Any, values: Optional[Dict[str, Any]]) -> None:
    if not values:
        return
    for key, value in values.items():
        if hasattr(section, key):
            setattr(section, key, value)


def load_config(config_path: Optional[Path] = None) -> DashboardConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config.yaml. If None, looks for config.yaml
                    in the stats_dashboard package directory.

    Returns:
        DashboardConfig with values from file merged with defaults.
    """
    if config_path is None:
        config_path = Path(__file__).parent / "config.yaml"

    if not config_path.exists():
        return DashboardConfig()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return DashboardConfig.from_dict(data)


def save_config(config: DashboardConfig, config_path: Path) -> None:
    """Save configuration to YAML file."""
    with open(config_path, 'w') as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
