"""
Tests for callback normalization and the metrics viewer.
"""

from unittest.mock import MagicMock, patch

from keras_bridge.callbacks import (
    MetricsViewer,
    normalize_callbacks,
    resolve_view_metrics,
)


class TestNormalizeCallbacks:
    """Test normalize_callbacks."""

    def test_none(self) -> None:
        assert normalize_callbacks(False, None) == []

    def test_single_callback(self) -> None:
        callback = MagicMock()
        assert normalize_callbacks(False, callback) == [callback]

    def test_list_copied(self) -> None:
        """The caller's list is not modified."""
        callbacks = [MagicMock()]
        result = normalize_callbacks(True, callbacks)

        assert len(callbacks) == 1
        assert len(result) == 2

    def test_viewer_first(self) -> None:
        callback = MagicMock()
        result = normalize_callbacks(True, (callback,))

        assert isinstance(result[0], MetricsViewer)
        assert result[1] is callback


class TestResolveViewMetrics:
    """Test "auto" view_metrics resolution."""

    def test_enabled_in_notebook(self) -> None:
        with patch("keras_bridge.callbacks.in_notebook", return_value=True), \
                patch("keras_bridge.callbacks.have_matplotlib", return_value=True):
            assert resolve_view_metrics(1, 5, ["accuracy"]) is True

    def test_disabled_outside_notebook(self) -> None:
        with patch("keras_bridge.callbacks.in_notebook", return_value=False):
            assert resolve_view_metrics(1, 5, ["accuracy"]) is False

    def test_disabled_for_single_epoch(self) -> None:
        with patch("keras_bridge.callbacks.in_notebook", return_value=True):
            assert resolve_view_metrics(1, 1, ["accuracy"]) is False

    def test_disabled_without_metrics(self) -> None:
        with patch("keras_bridge.callbacks.in_notebook", return_value=True):
            assert resolve_view_metrics(1, 5, []) is False

    def test_disabled_when_silent(self) -> None:
        with patch("keras_bridge.callbacks.in_notebook", return_value=True):
            assert resolve_view_metrics(0, 5, ["accuracy"]) is False


class TestMetricsViewer:
    """Test MetricsViewer bookkeeping."""

    def test_records_epochs(self) -> None:
        viewer = MetricsViewer()
        with patch.object(MetricsViewer, "render") as render:
            viewer.on_train_begin()
            viewer.on_epoch_end(0, {"loss": 0.9, "val_loss": 1.1})
            viewer.on_epoch_end(1, {"loss": 0.5, "val_loss": 0.8})

        assert viewer.history == {"loss": [0.9, 0.5], "val_loss": [1.1, 0.8]}
        assert render.call_count == 2

    def test_validation_series_share_panel(self) -> None:
        viewer = MetricsViewer()
        viewer.history = {"loss": [1.0], "accuracy": [0.5], "val_loss": [1.2]}

        assert viewer.panels() == {"loss": ["loss", "val_loss"], "accuracy": ["accuracy"]}
