"""Configuration management."""

from stock_assess.config.config_manager import (
    AssessmentConfig,
    BaranovConfig,
    BarrierConfig,
    ChapmanRobsonConfig,
    ConfigManager,
    LogisticNormalConfig,
    MiscConfig,
    load_config,
)

__all__ = [
    "AssessmentConfig",
    "BaranovConfig",
    "BarrierConfig",
    "ChapmanRobsonConfig",
    "ConfigManager",
    "LogisticNormalConfig",
    "MiscConfig",
    "load_config",
]
