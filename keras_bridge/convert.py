"""
Argument normalization helpers.

Converts caller values (Python lists, scalars, NumPy arrays, mappings,
plain functions) into the argument types Keras expects. None of these
helpers change the numeric content of an array.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional
import functools
import inspect
import logging
import numbers

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 32


def _is_array_like(obj: Any) -> bool:
    """
    True for arrays, framework tensors and named input mappings.

    NumPy scalars and 0-d arrays are values, not inputs: a list of them is
    one 1-D array.
    """
    if isinstance(obj, Mapping):
        return True
    if isinstance(obj, np.generic) or not hasattr(obj, "shape"):
        return False
    return getattr(obj, "ndim", 1) > 0


def _is_backend_tensor(obj: Any) -> bool:
    """True for torch/tf/jax tensors, which Keras consumes natively."""
    if isinstance(obj, (np.ndarray, np.generic)):
        return False
    if type(obj).__module__.split(".")[0] == "pandas":
        return False
    return hasattr(obj, "shape") and hasattr(obj, "dtype")


def keras_array(x: Any, dtype: Optional[Any] = None) -> Any:
    """
    Normalize input data into the container shape Keras expects.

    - ``None`` passes through.
    - Mappings of input names to data are normalized per value.
    - A list/tuple whose elements are all arrays (multi-input data) becomes
      a list of normalized arrays.
    - Framework tensors (objects with ``shape`` that are not NumPy arrays)
      pass through untouched.
    - Scalars, nested lists and objects exposing ``__array__`` (pandas)
      become C-ordered NumPy arrays.
    - Anything else (datasets, generators, sequences) passes through.

    Args:
        x: Input data
        dtype: Optional dtype to cast to

    Returns:
        Normalized data
    """
    if x is None:
        return None

    if isinstance(x, Mapping):
        return {name: keras_array(value, dtype) for name, value in x.items()}

    if isinstance(x, (list, tuple)) and x and all(_is_array_like(el) for el in x):
        return [keras_array(el, dtype) for el in x]

    if _is_backend_tensor(x):
        return x

    if isinstance(x, (list, tuple, numbers.Number, np.generic, np.ndarray)) or hasattr(
        x, "__array__"
    ):
        return np.asarray(x, dtype=dtype, order="C")

    return x


def as_nullable_integer(x: Any) -> Optional[int]:
    """Coerce to ``int`` unless ``None``."""
    if x is None:
        return None
    return int(x)


def as_nullable_array(x: Any) -> Any:
    """Normalize with :func:`keras_array` unless ``None``."""
    if x is None:
        return None
    return keras_array(x)


def as_list(x: Any) -> Optional[List[Any]]:
    """Wrap a scalar in a list; lists and tuples become lists; ``None`` stays."""
    if x is None:
        return None
    if isinstance(x, (list, tuple)):
        return list(x)
    return [x]


def as_class_weight(class_weight: Any) -> Optional[Dict[int, float]]:
    """
    Convert a class-weight mapping to ``{class_index: weight}``.

    Args:
        class_weight: Mapping of class indices (ints or numeric strings)
            to weights, or ``None``

    Returns:
        Dict of int class index to float weight, or None

    Raises:
        TypeError: If class_weight is not a mapping
    """
    if class_weight is None:
        return None

    if not isinstance(class_weight, Mapping):
        raise TypeError(
            "class_weight must be a mapping of class indices to weights, "
            f"got {type(class_weight).__name__}"
        )

    return {int(index): float(weight) for index, weight in class_weight.items()}


def _named_metric(metric: Callable, name: str) -> Callable:
    """Copy of a metric function reporting under ``name``."""

    @functools.wraps(metric)
    def named(*args, **kwargs):
        return metric(*args, **kwargs)

    named.__name__ = name
    named.__qualname__ = name
    return named


def normalize_metrics(metrics: Any) -> Optional[List[Any]]:
    """
    Normalize a metrics specification into a list.

    A scalar (metric name, function or metric object) becomes a one-element
    list. For a mapping, each key names its metric: plain functions are
    tagged with that name so Keras reports them under it.

    Args:
        metrics: Metric, list of metrics, mapping of name to metric, or None

    Returns:
        List of metrics, or None
    """
    if metrics is None:
        return None

    if isinstance(metrics, Mapping):
        normalized = []
        for name, metric in metrics.items():
            if name and inspect.isroutine(metric):
                metric = _named_metric(metric, str(name))
            normalized.append(metric)
        return normalized

    return as_list(metrics)


def resolve_batch_size(batch_size: Any, steps: Any) -> Optional[int]:
    """Default the batch size to 32 when neither batch size nor steps is set."""
    if batch_size is None and steps is None:
        return DEFAULT_BATCH_SIZE
    return as_nullable_integer(batch_size)


def num_samples(x: Any) -> Optional[int]:
    """Number of samples in input data (first input for multi-input data)."""
    if x is None:
        return None
    if isinstance(x, Mapping):
        x = next(iter(x.values()), None)
    elif isinstance(x, (list, tuple)) and x and all(_is_array_like(el) for el in x):
        x = x[0]
    if x is None:
        return None
    shape = getattr(x, "shape", None)
    if shape is not None and len(shape) > 0:
        return int(shape[0])
    if isinstance(x, (list, tuple)):
        return len(x)
    return None
