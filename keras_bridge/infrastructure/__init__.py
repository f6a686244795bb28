"""
Infrastructure utilities.

Cross-cutting concerns: logging, reproducibility.
"""

from .logging import setup_logging
from .reproducibility import set_seed, get_environment_info

__all__ = ["setup_logging", "set_seed", "get_environment_info"]
