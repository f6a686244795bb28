"""
Weights & Biases integration for run tracking.

Maps run records onto a W&B run:
- evaluation results -> run summary (``evaluation/<metric>``)
- run properties -> run config
- per-epoch metrics -> logged history, one step per epoch
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..config import BridgeConfig
from .factory import register_tracker
from .protocol import RECORD_KINDS


@dataclass
class WandBConfig:
    """W&B configuration."""
    project: str = "keras-bridge"
    entity: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    notes: str = ""


@register_tracker("wandb")
class WandBTracker:
    """Weights & Biases run tracker."""

    def __init__(self, config: WandBConfig, run_config: Optional[Dict[str, Any]] = None):
        """
        Initialize W&B tracker.

        Args:
            config: W&B configuration
            run_config: Run configuration to log
        """
        import wandb

        self.wandb = wandb
        self.run = wandb.init(
            project=config.project,
            entity=config.entity,
            config=run_config,
            tags=config.tags if config.tags else None,
            notes=config.notes if config.notes else None,
        )

    @classmethod
    def from_config(cls, config: BridgeConfig) -> "WandBTracker":
        return cls(WandBConfig(project=config.wandb_project, entity=config.wandb_entity))

    @property
    def name(self) -> str:
        return "wandb"

    def write_run_metadata(self, kind: str, data: Mapping[str, Any]) -> None:
        if kind not in RECORD_KINDS:
            raise ValueError(f"Unknown record kind: {kind}. Must be one of {RECORD_KINDS}")

        if kind == "evaluation":
            self.run.summary.update({f"evaluation/{k}": v for k, v in data.items()})
        elif kind == "properties":
            self.run.config.update(dict(data), allow_val_change=True)
        else:
            self.log_history(data)

    def log_history(self, metrics: Mapping[str, List[float]]) -> None:
        """
        Log per-epoch metrics.

        Args:
            metrics: Metric name -> per-epoch values
        """
        epochs = max((len(values) for values in metrics.values()), default=0)
        for epoch in range(epochs):
            row = {
                name: values[epoch]
                for name, values in metrics.items()
                if epoch < len(values)
            }
            self.run.log({**row, "epoch": epoch + 1})

    def finish(self) -> None:
        """Finish run."""
        if self.run:
            self.run.finish()
