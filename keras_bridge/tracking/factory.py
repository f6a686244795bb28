"""
Tracker Factory - registry and factory for run trackers.

Tracker classes register under a name and are created from the
process configuration.
"""

from typing import Dict, List, Optional, Type
import logging

from ..config import BridgeConfig, get_config
from .protocol import RunTracker

logger = logging.getLogger(__name__)


class TrackerRegistry:
    """
    Registry for run-tracker implementations.

    Registered classes provide ``from_config(config)``.
    """

    _trackers: Dict[str, Type[RunTracker]] = {}

    @classmethod
    def register(cls, name: str, tracker_class: Type[RunTracker]) -> None:
        """
        Register a tracker implementation.

        Args:
            name: Tracker name (e.g., "file", "wandb")
            tracker_class: Class implementing RunTracker
        """
        if name in cls._trackers:
            logger.warning(
                f"Tracker '{name}' already registered. Overwriting with {tracker_class}"
            )

        cls._trackers[name] = tracker_class
        logger.debug(f"Registered tracker: {name} -> {tracker_class.__name__}")

    @classmethod
    def create(cls, name: str, config: BridgeConfig) -> RunTracker:
        """
        Create a tracker by name.

        Args:
            name: Registered tracker name
            config: Configuration passed to the tracker

        Returns:
            Tracker instance

        Raises:
            ValueError: If no tracker is registered under ``name``
        """
        name = name.lower()

        if not cls.is_registered(name):
            available = ", ".join(cls.list_trackers())
            raise ValueError(
                f"Unknown tracker: {name}. "
                f"Available trackers: {available}"
            )

        tracker_class = cls._trackers[name]
        logger.info(f"Creating {name} run tracker")

        return tracker_class.from_config(config)

    @classmethod
    def list_trackers(cls) -> List[str]:
        """List registered tracker names."""
        return list(cls._trackers.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a tracker is registered."""
        return name.lower() in cls._trackers


def create_tracker(config: Optional[BridgeConfig] = None) -> RunTracker:
    """
    Create the tracker selected by the configuration.

    Args:
        config: Configuration (defaults to the process-wide one)

    Returns:
        Tracker instance
    """
    if config is None:
        config = get_config()
    return TrackerRegistry.create(config.resolved_tracker(), config)


def register_tracker(name: str):
    """
    Decorator for registering tracker classes.

    Example:
        @register_tracker("file")
        class FileRunTracker:
            ...
    """

    def decorator(cls):
        TrackerRegistry.register(name, cls)
        return cls

    return decorator
