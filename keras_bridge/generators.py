"""
Generator support.

Adapts plain callables into the Python generators Keras consumes and calls
the framework's generator-based training, evaluation and prediction with a
single background worker and no multiprocessing. Caller callables are not
safe to re-enter from several producer threads.
"""

from collections.abc import Iterator
from typing import Any, Callable, Dict, Generator, Iterable
import inspect
import logging
import types

from . import compat
from .convert import keras_array

logger = logging.getLogger(__name__)

# Options that only exist on the worker-based data feeders (Keras < 3)
WORKER_OPTIONS = ("workers", "use_multiprocessing", "max_queue_size")


def _normalize_batch(batch: Any) -> Any:
    """Normalize each element of an (inputs, targets[, weights]) batch."""
    if isinstance(batch, (list, tuple)):
        return tuple(keras_array(part) for part in batch)
    return keras_array(batch)


def iterate_callable(func: Callable[[], Any]) -> Generator[Any, None, None]:
    """
    Generator producing one batch per call of ``func``, without end.

    Each batch is passed through :func:`keras_array`, so a function can
    return the same Python/NumPy values accepted by direct ``fit`` calls.
    """
    while True:
        yield _normalize_batch(func())


def iterate_batches(batches: Iterable[Any]) -> Generator[Any, None, None]:
    """Generator normalizing every batch of ``batches``."""
    for batch in batches:
        yield _normalize_batch(batch)


def as_generator(x: Any) -> Any:
    """
    Convert a generator specification into something Keras can iterate.

    Keras 3 only recognizes real generator objects (and its own dataset
    types) as data, so everything else is wrapped in one.

    - Keras ``Sequence``/``PyDataset`` instances and generator objects pass
      through unchanged.
    - Generator functions are started and their batches normalized.
    - Other iterators have their batches normalized.
    - Other callables are called once per batch.

    Args:
        x: Generator specification

    Returns:
        Generator or Keras sequence

    Raises:
        TypeError: If ``x`` cannot be converted
    """
    if compat.is_keras_sequence(x) or isinstance(x, types.GeneratorType):
        return x

    if isinstance(x, Iterator):
        return iterate_batches(x)

    if inspect.isgeneratorfunction(x):
        return iterate_batches(x())

    if callable(x):
        return iterate_callable(x)

    raise TypeError(f"Unable to convert object of type {type(x).__name__} to generator")


def call_generator_function(model: Any, method: str, args: Dict[str, Any]) -> Any:
    """
    Run a generator-based fit/evaluate/predict on a Keras model.

    The generator (and a callable ``validation_data``) is converted with
    :func:`as_generator`, and the data feeder is pinned to one worker thread
    without multiprocessing. Keras < 2.4 is called through its
    ``<method>_generator`` methods; newer versions take the generator as
    ``x``. Keras 3 consumes Python generators on the calling thread and has
    no worker options, so they are dropped there.

    Args:
        model: Wrapped Keras model
        method: "fit", "evaluate" or "predict"
        args: Keyword arguments, with the generator under "generator"

    Returns:
        Whatever the framework method returns
    """
    args = dict(args)
    args["generator"] = as_generator(args["generator"])

    validation_data = args.get("validation_data")
    if validation_data is not None and callable(validation_data):
        args["validation_data"] = as_generator(validation_data)

    args["workers"] = 1
    args["use_multiprocessing"] = False

    if compat.has_generator_methods():
        func = getattr(model, f"{method}_generator")
    else:
        func = getattr(model, method)
        args["x"] = args.pop("generator")
        if not compat.supports_worker_options():
            for option in WORKER_OPTIONS:
                args.pop(option, None)

    logger.debug(f"Calling generator-based {method} with {sorted(args)}")
    return func(**args)
