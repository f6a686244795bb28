"""
Tracker that discards run records.
"""

from typing import Any, Mapping
import logging

from ..config import BridgeConfig
from .factory import register_tracker

logger = logging.getLogger(__name__)


@register_tracker("null")
class NullTracker:
    """Used when no run directory or tracking service is configured."""

    @classmethod
    def from_config(cls, config: BridgeConfig) -> "NullTracker":
        return cls()

    @property
    def name(self) -> str:
        return "null"

    def write_run_metadata(self, kind: str, data: Mapping[str, Any]) -> None:
        logger.debug(f"Discarding {kind} record ({len(data)} fields)")

    def finish(self) -> None:
        pass
