"""Configuration loader for multi-hypotheses tracking."""

import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union
from dataclasses import dataclass, field, asdict

logger = logging.getLogger(__name__)


@dataclass
class SolverConfig:
    """Inference backend configuration."""
    backend: str = "milp"
    mip_rel_gap: float = 0.0
    presolve: bool = True
    verbose: bool = False
    max_brute_force_variables: int = 20


@dataclass
class LearningConfig:
    """Structured max-margin learning configuration."""
    max_iterations: int = 100
    learning_rate: float = 0.1
    regularizer_weight: float = 1.0
    epsilon: float = 1e-6
    initial_weight: float = 0.0
    verbose: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


@dataclass
class Config:
    """Main configuration class."""
    solver: SolverConfig = field(default_factory=SolverConfig)
    learning: LearningConfig = field(default_factory=LearningConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]]) -> 'Config':
        """Create Config from dictionary."""
        config_dict = config_dict or {}
        return cls(
            solver=SolverConfig(**config_dict.get('solver', {})),
            learning=LearningConfig(**config_dict.get('learning', {})),
            logging=LoggingConfig(**config_dict.get('logging', {}))
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Config to dictionary."""
        return {
            'solver': asdict(self.solver),
            'learning': asdict(self.learning),
            'logging': asdict(self.logging)
        }


def load_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file. If None, defaults are used.

    Returns:
        Config object with all settings.
    """
    if config_path is None:
        return Config()

    config_path = Path(config_path)

    if not config_path.exists():
        logger.warning("Config file %s not found. Using defaults.", config_path)
        return Config()

    with open(config_path, 'r') as f:
        config_dict = yaml.safe_load(f)

    return Config.from_dict(config_dict)


def save_config(config: Config, path: Union[str, Path]):
    """
    Save configuration to YAML file.

    Args:
        config: Config object to save.
        path: Path where to save the config.
    """
    config_dict = config.to_dict()

    with open(path, 'w') as f:
        yaml.dump(config_dict, f, default_flow_style=False, indent=2)
