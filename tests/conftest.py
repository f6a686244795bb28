"""
Pytest configuration for keras-bridge tests.
"""

import os
from unittest.mock import MagicMock

# Keras picks its backend at import time
os.environ.setdefault("KERAS_BACKEND", "torch")

import pytest  # noqa: E402
from packaging.version import Version  # noqa: E402

from keras_bridge.config import set_config  # noqa: E402
from keras_bridge.tracking import set_tracker  # noqa: E402


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests"
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests by default unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def reset_globals():
    """Drop the process-wide config and tracker after each test."""
    yield
    set_config(None)
    set_tracker(None)


@pytest.fixture
def use_keras_version(monkeypatch):
    """Pretend a given Keras version is installed."""

    def _use(version: str) -> None:
        monkeypatch.setattr(
            "keras_bridge.compat.keras_version", lambda: Version(version)
        )

    return _use


@pytest.fixture
def keras_mock() -> MagicMock:
    """Stand-in for a compiled Keras model."""
    model = MagicMock(name="keras_model")
    model.metrics_names = ["loss", "accuracy"]

    history = MagicMock(name="history")
    history.params = {"epochs": 2, "steps": 4, "verbose": 0}
    history.history = {"loss": [0.9, 0.5], "accuracy": [0.6, 0.8]}

    model.fit.return_value = history
    model.fit_generator.return_value = history
    model.evaluate.return_value = [0.4, 0.85]
    model.evaluate_generator.return_value = [0.4, 0.85]
    return model


@pytest.fixture
def tracker() -> MagicMock:
    """Run tracker recording calls."""
    return MagicMock(name="tracker")
