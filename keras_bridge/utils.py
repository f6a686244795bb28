"""
Environment probes and file helpers.
"""

from pathlib import Path
from typing import Callable, Optional, Union
import importlib
import logging
import sys

logger = logging.getLogger(__name__)


def have_module(module: str) -> bool:
    """
    Check whether a module can be imported.

    Any failure during import counts as "unavailable".

    Args:
        module: Importable module name

    Returns:
        True if the import succeeded
    """
    try:
        importlib.import_module(module)
    except Exception as e:
        logger.debug(f"Module {module} unavailable: {e}")
        return False
    return True


def have_h5py() -> bool:
    return have_module("h5py")


def have_pyyaml() -> bool:
    return have_module("yaml")


def have_requests() -> bool:
    return have_module("requests")


def have_pillow() -> bool:
    return have_module("PIL")  # aka Pillow


def have_matplotlib() -> bool:
    return have_module("matplotlib")


def is_hdf5_path(filepath: Union[str, Path]) -> bool:
    """True for paths saved in the legacy HDF5 format."""
    return Path(filepath).suffix.lower() in (".h5", ".hdf5")


def require_h5py(filepath: Union[str, Path]) -> None:
    """Raise ImportError when ``filepath`` needs h5py and it is missing."""
    if is_hdf5_path(filepath) and not have_h5py():
        raise ImportError(
            f"The h5py package is required to save and load '{filepath}' "
            "(pip install h5py)"
        )


def is_interactive() -> bool:
    """True when stdin is attached to a terminal."""
    return sys.stdin is not None and sys.stdin.isatty()


def confirm_overwrite(
    filepath: Union[str, Path],
    overwrite: bool,
    interactive: Optional[bool] = None,
    prompt: Callable[[str], str] = input,
) -> bool:
    """
    Decide whether a file may be written.

    Args:
        filepath: Target path
        overwrite: Write even if the file exists
        interactive: Ask the user when the file exists (defaults to
            whether stdin is a terminal)
        prompt: Function used to ask the user

    Returns:
        True if the file may be written, False if the user declined

    Raises:
        FileExistsError: If the file exists, overwrite is False and the
            session is not interactive
    """
    if overwrite:
        return True

    if not Path(filepath).exists():
        return True

    if interactive is None:
        interactive = is_interactive()

    if interactive:
        answer = prompt(f"[WARNING] {filepath} already exists - overwrite? [y/n] ")
        return answer.strip().lower() == "y"

    raise FileExistsError(
        f"File '{filepath}' already exists (pass overwrite=True to force save)."
    )
