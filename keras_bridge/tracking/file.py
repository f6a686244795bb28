"""
File-based run tracking.

Each record kind is written as ``<run_dir>/<kind>.json``; writing the same
kind again replaces the previous record.
"""

from pathlib import Path
from typing import Any, Mapping, Union
import json
import logging

import numpy as np

from ..config import BridgeConfig
from .factory import register_tracker
from .protocol import RECORD_KINDS

logger = logging.getLogger(__name__)


def _to_json(value: Any) -> Any:
    """JSON fallback for NumPy scalars and arrays."""
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@register_tracker("file")
class FileRunTracker:
    """Writes run records as JSON files in a run directory."""

    def __init__(self, run_dir: Union[str, Path]):
        """
        Initialize file tracker.

        Args:
            run_dir: Directory receiving the records (created on first write)
        """
        self.run_dir = Path(run_dir)

    @classmethod
    def from_config(cls, config: BridgeConfig) -> "FileRunTracker":
        if not config.run_dir:
            raise ValueError("The file tracker requires run_dir to be configured")
        return cls(config.run_dir)

    @property
    def name(self) -> str:
        return "file"

    def record_path(self, kind: str) -> Path:
        """Path of the JSON file holding ``kind`` records."""
        return self.run_dir / f"{kind}.json"

    def write_run_metadata(self, kind: str, data: Mapping[str, Any]) -> None:
        if kind not in RECORD_KINDS:
            raise ValueError(f"Unknown record kind: {kind}. Must be one of {RECORD_KINDS}")

        self.run_dir.mkdir(parents=True, exist_ok=True)
        path = self.record_path(kind)
        with open(path, "w") as f:
            json.dump(dict(data), f, indent=2, default=_to_json)

        logger.debug(f"Wrote {kind} record to {path}")

    def read_run_metadata(self, kind: str) -> Mapping[str, Any]:
        """Read a previously written record (empty if none)."""
        path = self.record_path(kind)
        if not path.exists():
            return {}
        with open(path) as f:
            return json.load(f)

    def finish(self) -> None:
        pass
