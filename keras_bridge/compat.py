"""
Keras import and version gates.

Keras reads ``KERAS_BACKEND`` once, at import time, so the configured
backend is exported before the import below unless the user already chose
one. Every version-dependent branch in the adapter goes through the
predicates in this module.
"""

import logging
import os
from typing import Any

from packaging.version import Version

from .config import get_config

os.environ.setdefault("KERAS_BACKEND", get_config().backend)

import keras  # noqa: E402

logger = logging.getLogger(__name__)

MIN_KERAS_VERSION = Version("2.0.7")

_V2_0_9 = Version("2.0.9")
_V2_4 = Version("2.4.0")
_V2_6 = Version("2.6.0")
_V3 = Version("3.0.0")


def keras_version() -> Version:
    """Version of the imported Keras package."""
    return Version(keras.__version__)


def backend_name() -> str:
    """Name of the active Keras backend (e.g. "torch")."""
    return keras.backend.backend()


def check_keras_version() -> Version:
    """
    Ensure the imported Keras is recent enough for the adapter.

    Returns:
        The Keras version

    Raises:
        RuntimeError: If Keras is older than MIN_KERAS_VERSION
    """
    version = keras_version()
    if version < MIN_KERAS_VERSION:
        raise RuntimeError(
            f"Keras {version} is not supported; "
            f"keras-bridge requires Keras >= {MIN_KERAS_VERSION}"
        )
    return version


def supports_target_tensors() -> bool:
    """compile() accepts target_tensors."""
    return keras_version() < _V2_4


def supports_sample_weight_mode() -> bool:
    """compile() accepts sample_weight_mode."""
    return keras_version() < _V3


def has_generator_methods() -> bool:
    """Models train from generators via fit_generator() and friends."""
    return keras_version() < _V2_4


def supports_worker_options() -> bool:
    """Generator calls accept workers/use_multiprocessing/max_queue_size."""
    return keras_version() < _V3


def has_predict_classes() -> bool:
    """Models provide predict_proba() and predict_classes()."""
    return keras_version() < _V2_6


def has_multi_gpu_model() -> bool:
    """keras.utils.multi_gpu_model is available."""
    return _V2_0_9 <= keras_version() < _V2_4


def evaluate_returns_dict() -> bool:
    """evaluate() is asked for named results instead of a bare list."""
    return keras_version() >= _V3


def is_keras_sequence(obj: Any) -> bool:
    """True for keras.utils.Sequence / PyDataset instances."""
    sequence_types = tuple(
        cls
        for cls in (
            getattr(keras.utils, "PyDataset", None),
            getattr(keras.utils, "Sequence", None),
        )
        if isinstance(cls, type)
    )
    return bool(sequence_types) and isinstance(obj, sequence_types)
