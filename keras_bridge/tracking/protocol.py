"""
Run Tracker Protocol - interface for run-metadata collaborators.

The model adapter writes records to a tracker as a side effect of
training and evaluation:

- "evaluation": named metric results after evaluate()
- "properties": run properties (validation sample count) after fit()
- "metrics": per-epoch metric values after fit()
"""

from typing import Any, Mapping, Protocol

RECORD_KINDS = ("evaluation", "properties", "metrics")


class RunTracker(Protocol):
    """Protocol all run trackers implement."""

    @property
    def name(self) -> str:
        """Tracker name (e.g., 'file', 'wandb')."""
        ...

    def write_run_metadata(self, kind: str, data: Mapping[str, Any]) -> None:
        """
        Record run metadata.

        Args:
            kind: Record kind ("evaluation", "properties" or "metrics")
            data: Record contents
        """
        ...

    def finish(self) -> None:
        """Flush and close the run."""
        ...
