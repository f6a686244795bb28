"""
Tests for environment probes and file helpers.
"""

from unittest.mock import patch

import pytest

from keras_bridge.utils import (
    confirm_overwrite,
    have_module,
    have_pillow,
    have_pyyaml,
    is_hdf5_path,
    require_h5py,
)


class TestHaveModule:
    """Test module availability probes."""

    def test_available(self) -> None:
        assert have_module("json") is True

    def test_missing(self) -> None:
        assert have_module("definitely_not_a_module_xyz") is False

    def test_import_error_other_than_missing(self) -> None:
        """Any failure during import counts as unavailable."""
        with patch("keras_bridge.utils.importlib.import_module", side_effect=RuntimeError("boom")):
            assert have_module("json") is False

    def test_pyyaml_installed(self) -> None:
        """pyyaml is a runtime dependency."""
        assert have_pyyaml() is True

    def test_pillow_probes_pil(self) -> None:
        with patch("keras_bridge.utils.have_module", return_value=True) as probe:
            assert have_pillow() is True
        probe.assert_called_once_with("PIL")


class TestHdf5:
    """Test HDF5 path helpers."""

    @pytest.mark.parametrize("path", ["model.h5", "w/model.HDF5"])
    def test_hdf5_paths(self, path) -> None:
        assert is_hdf5_path(path)

    @pytest.mark.parametrize("path", ["model.keras", "model.weights", "model"])
    def test_other_paths(self, path) -> None:
        assert not is_hdf5_path(path)

    def test_require_h5py_missing(self) -> None:
        with patch("keras_bridge.utils.have_h5py", return_value=False):
            with pytest.raises(ImportError, match="h5py package is required"):
                require_h5py("model.h5")

    def test_require_h5py_not_needed(self) -> None:
        """Non-HDF5 paths never need h5py."""
        with patch("keras_bridge.utils.have_h5py", return_value=False):
            require_h5py("model.keras")


class TestConfirmOverwrite:
    """Test confirm_overwrite."""

    def test_missing_file(self, tmp_path) -> None:
        assert confirm_overwrite(tmp_path / "new.keras", overwrite=False) is True

    def test_overwrite_flag(self, tmp_path) -> None:
        path = tmp_path / "m.keras"
        path.write_text("x")
        assert confirm_overwrite(path, overwrite=True) is True

    def test_non_interactive_raises(self, tmp_path) -> None:
        path = tmp_path / "m.keras"
        path.write_text("x")

        with pytest.raises(FileExistsError, match="pass overwrite=True to force save"):
            confirm_overwrite(path, overwrite=False, interactive=False)

    def test_interactive_yes(self, tmp_path) -> None:
        path = tmp_path / "m.keras"
        path.write_text("x")
        prompts = []

        def answer(text):
            prompts.append(text)
            return "Y\n"

        assert confirm_overwrite(path, overwrite=False, interactive=True, prompt=answer) is True
        assert "already exists" in prompts[0]

    def test_interactive_no(self, tmp_path) -> None:
        path = tmp_path / "m.keras"
        path.write_text("x")

        assert confirm_overwrite(
            path, overwrite=False, interactive=True, prompt=lambda text: "n"
        ) is False
