"""
Training callbacks.

Normalizes the callbacks passed to fit() and provides a live metrics
viewer for notebook sessions.
"""

from typing import Any, Dict, List, Optional
import logging
import sys

from .compat import keras
from .utils import have_matplotlib

logger = logging.getLogger(__name__)


def in_notebook() -> bool:
    """True when running inside a Jupyter/IPython kernel."""
    ipython = sys.modules.get("IPython")
    if ipython is None:
        return False
    shell = ipython.get_ipython()
    return shell is not None and "IPKernelApp" in getattr(shell, "config", {})


def resolve_view_metrics(verbose: int, epochs: int, metrics: Optional[List[Any]]) -> bool:
    """
    Decide whether "auto" view_metrics shows the live metrics plot.

    Requires more than one epoch, at least one compiled metric, verbose
    output, a notebook session and matplotlib.
    """
    return (
        epochs > 1
        and bool(metrics)
        and verbose > 0
        and in_notebook()
        and have_matplotlib()
    )


class MetricsViewer(keras.callbacks.Callback):
    """
    Redraws a plot of training metrics at the end of every epoch.

    Each metric gets one panel; ``val_<metric>`` is drawn in the same panel
    as ``<metric>``.
    """

    def __init__(self):
        super().__init__()
        self.history: Dict[str, List[float]] = {}

    def on_train_begin(self, logs=None):
        self.history = {}

    def on_epoch_end(self, epoch, logs=None):
        for name, value in (logs or {}).items():
            self.history.setdefault(name, []).append(float(value))
        self.render()

    def panels(self) -> Dict[str, List[str]]:
        """Metric name -> series drawn in its panel."""
        panels: Dict[str, List[str]] = {}
        for name in self.history:
            base = name[4:] if name.startswith("val_") else name
            panels.setdefault(base, []).append(name)
        return panels

    def render(self) -> None:
        import matplotlib.pyplot as plt
        from IPython.display import clear_output, display

        panels = self.panels()
        if not panels:
            return

        fig, axes = plt.subplots(
            len(panels), 1, figsize=(7, 2.5 * len(panels)), sharex=True, squeeze=False
        )
        for ax, (base, series) in zip(axes[:, 0], panels.items()):
            for name in series:
                values = self.history[name]
                ax.plot(range(1, len(values) + 1), values, marker="o", label=name)
            ax.set_ylabel(base)
            ax.legend(loc="best")
        axes[-1, 0].set_xlabel("epoch")

        clear_output(wait=True)
        display(fig)
        plt.close(fig)


def normalize_callbacks(view_metrics: bool, callbacks: Any) -> List[Any]:
    """
    Build the callback list passed to fit().

    Args:
        view_metrics: Prepend a MetricsViewer
        callbacks: Callback, list of callbacks or None

    Returns:
        List of callbacks
    """
    if callbacks is None:
        callbacks = []
    elif isinstance(callbacks, (list, tuple)):
        callbacks = list(callbacks)
    else:
        callbacks = [callbacks]

    if view_metrics:
        logger.debug("Adding metrics viewer callback")
        callbacks.insert(0, MetricsViewer())

    return callbacks
