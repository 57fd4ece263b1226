"""Configuration manager for stock assessment routines."""

import yaml
import json
from pathlib import Path
from typing import Any, Dict, Optional, Union
from dataclasses import dataclass, field, asdict
from copy import deepcopy

import torch


@dataclass
class BarrierConfig:
    """Positivity barrier (posfun) parameters."""
    eps: float = 1e-3


@dataclass
class BaranovConfig:
    """Newton-Raphson settings for the Baranov catch equation."""
    n_iter: int = 10
    b_step: float = 1.0


@dataclass
class ChapmanRobsonConfig:
    """Age window and truncation threshold for the Chapman-Robson estimator."""
    kage: int = 3
    aplus: int = 20
    min_obs: float = 1


@dataclass
class LogisticNormalConfig:
    """Logistic-normal likelihood parameters."""
    var: float = 0.1


@dataclass
class MiscConfig:
    """Miscellaneous parameters."""
    dtype: str = "float64"
    device: str = "cpu"
    seed: int = 123

    @property
    def torch_dtype(self) -> torch.dtype:
        dtype = getattr(torch, self.dtype, None)
        if not isinstance(dtype, torch.dtype):
            raise ValueError(f"Unknown torch dtype: {self.dtype}")
        return dtype


_SECTIONS = {
    "barrier": BarrierConfig,
    "baranov": BaranovConfig,
    "chapman_robson": ChapmanRobsonConfig,
    "logistic_normal": LogisticNormalConfig,
    "misc": MiscConfig,
}


@dataclass
class AssessmentConfig:
    """Complete configuration."""
    barrier: BarrierConfig = field(default_factory=BarrierConfig)
    baranov: BaranovConfig = field(default_factory=BaranovConfig)
    chapman_robson: ChapmanRobsonConfig = field(default_factory=ChapmanRobsonConfig)
    logistic_normal: LogisticNormalConfig = field(default_factory=LogisticNormalConfig)
    misc: MiscConfig = field(default_factory=MiscConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def save(self, path: Union[str, Path]) -> None:
        """Save configuration to file (YAML or JSON based on extension)."""
        path = Path(path)
        config_dict = self.to_dict()

        if path.suffix == ".yaml" or path.suffix == ".yml":
            with open(path, 'w') as f:
                yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
        elif path.suffix == ".json":
            with open(path, 'w') as f:
                json.dump(config_dict, f, indent=2)
        else:
            raise ValueError(f"Unsupported file extension: {path.suffix}. Use .yaml, .yml, or .json")


class ConfigManager:
    """Manager for loading and managing assessment configurations."""

    def __init__(self, config: Optional[AssessmentConfig] = None):
        """Initialize configuration manager.

        Args:
            config: AssessmentConfig object. If None, uses defaults.
        """
        self.config = config or AssessmentConfig()

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ConfigManager":
        """Load configuration from YAML or JSON file.

        Args:
            path: Path to configuration file (.yaml, .yml, or .json)

        Returns:
            ConfigManager instance with loaded configuration
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        if path.suffix in [".yaml", ".yml"]:
            with open(path, 'r') as f:
                config_dict = yaml.safe_load(f) or {}
        elif path.suffix == ".json":
            with open(path, 'r') as f:
                config_dict = json.load(f)
        else:
            raise ValueError(f"Unsupported file extension: {path.suffix}. Use .yaml, .yml, or .json")

        return cls(cls._dict_to_config(config_dict))

    @staticmethod
    def _dict_to_config(config_dict: Dict[str, Any]) -> AssessmentConfig:
        """Convert dictionary to AssessmentConfig, filling missing sections with defaults."""
        unknown = set(config_dict) - set(_SECTIONS)
        if unknown:
            raise ValueError(f"Invalid section(s): {', '.join(sorted(unknown))}")

        sections = {
            name: section_cls(**(config_dict.get(name) or {}))
            for name, section_cls in _SECTIONS.items()
        }
        return AssessmentConfig(**sections)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "ConfigManager":
        """Create ConfigManager from dictionary."""
        return cls(cls._dict_to_config(config_dict))

    def update(self, updates: Dict[str, Any]) -> None:
        """Update configuration with new values.

        Args:
            updates: Dictionary of updates in the format:
                     {'section.parameter': value}
                     e.g., {'baranov.n_iter': 20, 'barrier.eps': 1e-4}
        """
        for key, value in updates.items():
            parts = key.split('.')
            if len(parts) != 2:
                raise ValueError(f"Invalid update key: {key}. Expected format: 'section.parameter'")

            section, param = parts
            if not hasattr(self.config, section):
                raise ValueError(f"Invalid section: {section}")

            section_obj = getattr(self.config, section)
            if not hasattr(section_obj, param):
                raise ValueError(f"Invalid parameter: {param} in section {section}")

            setattr(section_obj, param, value)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by 'section.parameter' key."""
        parts = key.split('.')
        if len(parts) != 2:
            return default

        section, param = parts
        if not hasattr(self.config, section):
            return default

        return getattr(getattr(self.config, section), param, default)

    def save(self, path: Union[str, Path]) -> None:
        """Save configuration to file."""
        self.config.save(path)

    def copy(self) -> "ConfigManager":
        """Create a deep copy of the configuration manager."""
        return ConfigManager(deepcopy(self.config))


def load_config(path: Union[str, Path]) -> ConfigManager:
    """Convenience function to load configuration from file."""
    return ConfigManager.from_file(path)
