"""
Tests for training history reshaping.

Tests cover:
- Reshaping Keras History objects and plain mappings
- Round-trip of an already reshaped history
- Validation sample count resolution
- Text rendering and serialization
"""

from types import SimpleNamespace

import numpy as np

from keras_bridge.history import (
    TrainingHistory,
    to_training_history,
    validation_sample_count,
)


def make_history(params=None, history=None, validation_data=None):
    """Object shaped like keras.callbacks.History."""
    return SimpleNamespace(
        params=params or {},
        history=history or {},
        validation_data=validation_data,
    )


class TestToTrainingHistory:
    """Test to_training_history."""

    def test_reshapes_keras_history(self) -> None:
        """Metrics become name -> list of floats, params are copied."""
        raw = make_history(
            params={"epochs": 2, "steps": 10},
            history={"loss": [np.float32(0.9), np.float32(0.5)], "accuracy": [0.6, 0.8]},
        )
        history = to_training_history(raw)

        assert isinstance(history, TrainingHistory)
        assert list(history.metrics) == ["loss", "accuracy"]
        assert history.metrics["accuracy"] == [0.6, 0.8]
        assert all(isinstance(v, float) for v in history.metrics["loss"])
        assert history.params["epochs"] == 2

    def test_preserves_epoch_order(self) -> None:
        """Per-epoch values keep their order."""
        raw = make_history(history={"loss": [3.0, 1.0, 2.0]})
        assert to_training_history(raw).metrics["loss"] == [3.0, 1.0, 2.0]

    def test_multi_output_values_are_averaged(self) -> None:
        """Array-valued epochs are reduced to their mean."""
        raw = make_history(history={"loss": [np.array([1.0, 3.0])]})
        assert to_training_history(raw).metrics["loss"] == [2.0]

    def test_round_trip(self) -> None:
        """Reshaping a reshaped history yields the same metrics."""
        first = to_training_history(
            make_history(history={"loss": [0.9, 0.5], "val_loss": [1.0, 0.7]})
        )
        second = to_training_history(first)

        assert second.metrics == first.metrics
        assert list(second.metrics) == list(first.metrics)

    def test_round_trip_from_metrics_mapping(self) -> None:
        """Reshaping the metrics mapping yields the same metrics."""
        first = to_training_history(make_history(history={"loss": [0.25, 0.125]}))
        assert to_training_history(first.metrics).metrics == first.metrics

    def test_validation_samples_from_steps(self) -> None:
        """Older Keras reports validation steps when validating."""
        raw = make_history(params={"do_validation": True, "validation_steps": 5})
        assert to_training_history(raw).params["validation_samples"] == 5

    def test_validation_samples_from_validation_data(self) -> None:
        """Older Keras keeps validation data on the History."""
        raw = make_history(
            params={"do_validation": True},
            validation_data=[np.zeros((12, 3)), np.zeros((12,))],
        )
        assert to_training_history(raw).params["validation_samples"] == 12

    def test_validation_samples_hint(self) -> None:
        """The caller's count is used when the history has none."""
        raw = make_history(params={"epochs": 1})
        history = to_training_history(raw, validation_samples=20)
        assert history.params["validation_samples"] == 20

    def test_validation_samples_none_without_validation(self) -> None:
        """No validation -> None."""
        assert to_training_history(make_history()).params["validation_samples"] is None


class TestTrainingHistory:
    """Test TrainingHistory record."""

    def test_epochs_completed(self) -> None:
        history = TrainingHistory(metrics={"loss": [1.0, 0.5, 0.2]})
        assert history.epochs_completed == 3

    def test_epochs_completed_empty(self) -> None:
        assert TrainingHistory().epochs_completed == 0

    def test_final_metrics(self) -> None:
        history = TrainingHistory(metrics={"loss": [1.0, 0.5], "accuracy": [0.5, 0.9]})
        assert history.final_metrics() == {"loss": 0.5, "accuracy": 0.9}

    def test_to_dict(self) -> None:
        history = TrainingHistory(params={"epochs": 1}, metrics={"loss": [0.1]})
        assert history.to_dict() == {"params": {"epochs": 1}, "metrics": {"loss": [0.1]}}

    def test_str_with_samples(self) -> None:
        """Text report lists sample counts and final values."""
        history = TrainingHistory(
            params={"samples": 48000, "validation_samples": 12000, "batch_size": 128, "epochs": 30},
            metrics={"loss": [0.5, 0.25], "val_loss": [0.6, 0.3]},
        )
        text = str(history)
        assert "Trained on 48,000 samples, validated on 12,000 samples" in text
        assert "batch_size=128, epochs=30" in text
        assert "val_loss: 0.3000" in text

    def test_str_without_samples(self) -> None:
        history = TrainingHistory(params={"epochs": 2}, metrics={"loss": [0.5, 0.25]})
        text = str(history)
        assert "Trained for 2 epochs (epochs=2)" in text
        assert "loss: 0.2500" in text


class TestValidationSampleCount:
    """Test validation_sample_count."""

    def test_from_validation_data(self) -> None:
        x_val = np.zeros((30, 2))
        assert validation_sample_count(None, (x_val, np.zeros(30))) == 30

    def test_from_split(self) -> None:
        """Keras holds out n - int(n * (1 - split)) samples."""
        x = np.zeros((100, 2))
        assert validation_sample_count(x, validation_split=0.2) == 20

    def test_from_split_rounding(self) -> None:
        x = np.zeros((10, 2))
        assert validation_sample_count(x, validation_split=0.25) == 3

    def test_none_without_validation(self) -> None:
        assert validation_sample_count(np.zeros((10, 2))) is None

    def test_generator_validation_data(self) -> None:
        """Unknown for generator validation data."""
        assert validation_sample_count(None, iter([])) is None
