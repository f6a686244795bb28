"""
Run tracking.

The model adapter reports evaluation results, run properties and training
metrics to a run tracker:
- file: JSON records in a run directory
- wandb: Weights & Biases run
- null: records discarded

Usage:
    from keras_bridge.tracking import FileRunTracker, set_tracker

    set_tracker(FileRunTracker("runs/2024-01-01"))
"""

from typing import Optional

from .protocol import RunTracker, RECORD_KINDS
from .factory import TrackerRegistry, create_tracker, register_tracker
from .file import FileRunTracker
from .null import NullTracker
from .wandb import WandBTracker, WandBConfig

_tracker: Optional[RunTracker] = None


def get_tracker() -> RunTracker:
    """Get the process-wide tracker, creating it from the config on first use."""
    global _tracker
    if _tracker is None:
        _tracker = create_tracker()
    return _tracker


def set_tracker(tracker: Optional[RunTracker]) -> None:
    """Replace the process-wide tracker (``None`` recreates it on next use)."""
    global _tracker
    _tracker = tracker


__all__ = [
    "RunTracker",
    "RECORD_KINDS",
    "TrackerRegistry",
    "create_tracker",
    "register_tracker",
    "FileRunTracker",
    "NullTracker",
    "WandBTracker",
    "WandBConfig",
    "get_tracker",
    "set_tracker",
]
