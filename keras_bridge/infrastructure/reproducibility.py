"""
Reproducibility utilities.

Provides:
- set_seed(): Seed Python, NumPy and the Keras backend
- get_environment_info(): Collect environment info for logging
"""

import platform
import random
import sys
from datetime import datetime
from typing import Any, Dict

import numpy as np

from ..compat import backend_name, keras, keras_version


def set_seed(seed: int = 42) -> None:
    """
    Set random seeds for reproducibility.

    Sets seeds for:
    - Python's random module
    - NumPy
    - The Keras backend

    Args:
        seed: Random seed value (default: 42)
    """
    random.seed(seed)
    np.random.seed(seed)

    # Keras < 2.7 has no backend-wide seeding
    set_random_seed = getattr(keras.utils, "set_random_seed", None)
    if set_random_seed is not None:
        set_random_seed(seed)


def get_environment_info() -> Dict[str, Any]:
    """
    Collect environment information for reproducibility logging.

    Returns:
        Dict with Python, Keras and NumPy versions, Keras backend,
        platform and timestamp
    """
    return {
        "python_version": sys.version.split()[0],
        "keras_version": str(keras_version()),
        "keras_backend": backend_name(),
        "numpy_version": np.__version__,
        "platform": platform.platform(),
        "timestamp": datetime.now().isoformat(),
    }
