"""Model and home directory path utilities.

Models live in ``~/.headtrack/models`` by default. Override with
``HEADTRACK_MODELS_DIR`` or ``HEADTRACK_HOME`` environment variables.
"""

import os
from pathlib import Path
from typing import Optional, Union


def get_home_dir() -> Path:
    """Return the headtrack home directory, creating it if needed.

    Resolution order:
        1. ``HEADTRACK_HOME`` environment variable.
        2. ``~/.headtrack`` (default).
    """
    home = os.environ.get("HEADTRACK_HOME")
    if home:
        home_dir = Path(home)
    else:
        home_dir = Path.home() / ".headtrack"
    home_dir.mkdir(parents=True, exist_ok=True)
    return home_dir


def get_models_dir() -> Path:
    """Return the models directory, creating it if it doesn't exist.

    Resolution order:
        1. ``HEADTRACK_MODELS_DIR`` environment variable (absolute or
           relative to CWD).
        2. ``{home}/models`` where *home* is from :func:`get_home_dir`.
    """
    env_val = os.environ.get("HEADTRACK_MODELS_DIR")
    if env_val:
        models_dir = Path(env_val)
        if not models_dir.is_absolute():
            models_dir = Path.cwd() / models_dir
    else:
        models_dir = get_home_dir() / "models"
    models_dir.mkdir(parents=True, exist_ok=True)
    return models_dir


def resolve_model_path(
    path: Union[str, Path], models_dir: Optional[Path] = None
) -> Path:
    """Resolve a model file name against the models directory.

    Absolute paths are returned unchanged.
    """
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    if models_dir is None:
        models_dir = get_models_dir()
    return models_dir / p


__all__ = ["get_home_dir", "get_models_dir", "resolve_model_path"]
