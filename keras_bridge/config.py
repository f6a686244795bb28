"""
Configuration for keras-bridge.

Settings are read from an optional YAML file and overridden by
``KERAS_BRIDGE_*`` environment variables.
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging
import os

import yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "KERAS_BRIDGE_"
CONFIG_ENV_VAR = "KERAS_BRIDGE_CONFIG"

VALID_BACKENDS = ["torch", "jax", "tensorflow"]
VALID_TRACKERS = ["auto", "file", "wandb", "null"]


@dataclass
class BridgeConfig:
    """Process-wide settings for the adapter layer."""

    backend: str = "torch"  # Keras backend selected before import
    view_metrics: Union[str, bool] = "auto"  # "auto", True or False
    tracker: str = "auto"  # "auto" resolves to "file" when run_dir is set
    run_dir: Optional[str] = None
    wandb_project: str = "keras-bridge"
    wandb_entity: Optional[str] = None
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration."""
        if self.backend not in VALID_BACKENDS:
            raise ValueError(
                f"Invalid backend: {self.backend}. "
                f"Must be one of {VALID_BACKENDS}"
            )

        if self.tracker not in VALID_TRACKERS:
            raise ValueError(
                f"Invalid tracker: {self.tracker}. "
                f"Must be one of {VALID_TRACKERS}"
            )

        if isinstance(self.view_metrics, str):
            value = self.view_metrics.strip().lower()
            if value == "auto":
                self.view_metrics = "auto"
            elif value in ("true", "1", "yes"):
                self.view_metrics = True
            elif value in ("false", "0", "no"):
                self.view_metrics = False
            else:
                raise ValueError(
                    f"Invalid view_metrics: {self.view_metrics}. "
                    f"Must be 'auto', true or false"
                )

        if not hasattr(logging, str(self.log_level).upper()):
            raise ValueError(f"Invalid log_level: {self.log_level}")

    def resolved_tracker(self) -> str:
        """Tracker name with "auto" resolved against ``run_dir``."""
        if self.tracker == "auto":
            return "file" if self.run_dir else "null"
        return self.tracker


def load_config(config_path: Union[str, Path]) -> BridgeConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        BridgeConfig instance

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file contains unknown keys
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    known = {f.name for f in fields(BridgeConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {unknown}")

    return BridgeConfig(**data)


def apply_env_overrides(
    config: BridgeConfig,
    environ: Optional[Dict[str, str]] = None,
) -> BridgeConfig:
    """
    Return a copy of ``config`` with ``KERAS_BRIDGE_*`` variables applied.

    Args:
        config: Base configuration
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        New BridgeConfig instance
    """
    if environ is None:
        environ = os.environ

    overrides: Dict[str, Any] = {}
    for f in fields(BridgeConfig):
        key = ENV_PREFIX + f.name.upper()
        if key in environ:
            overrides[f.name] = environ[key]

    if not overrides:
        return config

    logger.debug(f"Applying environment overrides: {sorted(overrides)}")
    return replace(config, **overrides)


_config: Optional[BridgeConfig] = None


def get_config() -> BridgeConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)
        config = load_config(config_path) if config_path else BridgeConfig()
        _config = apply_env_overrides(config)
    return _config


def set_config(config: Optional[BridgeConfig]) -> None:
    """Replace the process-wide configuration (``None`` reloads on next use)."""
    global _config
    _config = config
