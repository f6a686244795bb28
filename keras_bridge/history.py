"""
Training history reshaping.

Turns the History object returned by ``Model.fit`` into a plain record:
run parameters plus metric name -> ordered per-epoch values.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

import numpy as np

from .convert import num_samples

logger = logging.getLogger(__name__)


@dataclass
class TrainingHistory:
    """
    Per-epoch metric record of a training run.

    Attributes:
        params: Run parameters reported by Keras (epochs, steps, verbose, ...)
            plus ``validation_samples``
        metrics: Metric name -> per-epoch values, in epoch order
    """

    params: Dict[str, Any] = field(default_factory=dict)
    metrics: Dict[str, List[float]] = field(default_factory=dict)

    @property
    def epochs_completed(self) -> int:
        """Number of epochs with recorded values."""
        return max((len(values) for values in self.metrics.values()), default=0)

    def final_metrics(self) -> Dict[str, float]:
        """Last recorded value of each metric."""
        return {name: values[-1] for name, values in self.metrics.items() if values}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "params": dict(self.params),
            "metrics": {name: list(values) for name, values in self.metrics.items()},
        }

    def __str__(self) -> str:
        lines = []

        samples = self.params.get("samples")
        validation_samples = self.params.get("validation_samples")
        details = ", ".join(
            f"{key}={self.params[key]}"
            for key in ("batch_size", "epochs")
            if self.params.get(key) is not None
        )
        if samples is not None:
            trained = f"Trained on {samples:,} samples"
            if validation_samples is not None:
                trained += f", validated on {validation_samples:,} samples"
            lines.append(f"{trained} ({details})" if details else trained)
        elif details:
            lines.append(f"Trained for {self.epochs_completed} epochs ({details})")

        final = self.final_metrics()
        if final:
            lines.append("Final epoch:")
            width = max(len(name) for name in final)
            for name, value in final.items():
                lines.append(f"  {name:>{width}}: {value:.4f}")

        return "\n".join(lines)


def _epoch_value(value: Any) -> float:
    """Reduce one epoch's value to a float (mean for multi-output arrays)."""
    return float(np.mean(value))


def _validation_samples(params: Dict[str, Any], history: Any) -> Optional[int]:
    """Validation sample count reported by older Keras History objects."""
    if not params.get("do_validation"):
        return None

    if params.get("validation_steps") is not None:
        return int(params["validation_steps"])

    validation_data = getattr(history, "validation_data", None)
    if validation_data:
        return num_samples(validation_data[0])

    return None


def to_training_history(
    history: Any,
    validation_samples: Optional[int] = None,
) -> TrainingHistory:
    """
    Reshape a training history into a :class:`TrainingHistory`.

    Accepts a Keras ``History`` callback, an existing TrainingHistory, or a
    mapping of metric name to per-epoch values. Reshaping a TrainingHistory
    again yields the same metrics.

    Args:
        history: History to reshape
        validation_samples: Sample count to record when the history itself
            does not report one (newer Keras versions)

    Returns:
        TrainingHistory instance
    """
    if isinstance(history, TrainingHistory):
        params = dict(history.params)
        raw_metrics = history.metrics
    elif isinstance(history, Mapping):
        params = {}
        raw_metrics = history
    else:
        params = dict(getattr(history, "params", None) or {})
        raw_metrics = getattr(history, "history", None) or {}

    metrics = {
        str(name): [_epoch_value(value) for value in values]
        for name, values in raw_metrics.items()
    }

    if params.get("validation_samples") is None:
        reported = _validation_samples(params, history)
        params["validation_samples"] = (
            reported if reported is not None else validation_samples
        )

    return TrainingHistory(params=params, metrics=metrics)


def validation_sample_count(
    x: Any,
    validation_data: Any = None,
    validation_split: float = 0.0,
) -> Optional[int]:
    """
    Number of validation samples a fit() call will use.

    Args:
        x: Training inputs
        validation_data: Explicit validation tuple (inputs, targets[, weights])
        validation_split: Fraction of ``x`` held out for validation

    Returns:
        Sample count, or None when it cannot be determined
    """
    if validation_data is not None:
        if isinstance(validation_data, (list, tuple)) and validation_data:
            return num_samples(validation_data[0])
        return None

    if validation_split and x is not None:
        total = num_samples(x)
        if total is None:
            return None
        # Keras holds out the tail after int(n * (1 - split)) samples
        return total - int(total * (1.0 - validation_split))

    return None
