"""
Per-platform locations for user data and configuration.

Annotation files go under the data directory, settings under the config
directory. Directories are created on first use.
"""
import os
import sys
from pathlib import Path

APP_NAME = "SagaScribe"


def _user_base(kind: str) -> Path:
    """
    Resolve the per-user base directory of the given kind ('data' or 'config').

    On Linux the XDG variables are honoured; Windows keeps config below the
    roaming data directory.
    """
    if os.name == 'nt':
        return Path(os.environ.get('APPDATA', Path.home()))
    if sys.platform == 'darwin':
        sub = "Application Support" if kind == 'data' else "Preferences"
        return Path.home() / "Library" / sub

    if kind == 'data':
        return Path(os.environ.get('XDG_DATA_HOME') or Path.home() / ".local" / "share")
    return Path(os.environ.get('XDG_CONFIG_HOME') or Path.home() / ".config")


def _ensure(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_app_data_dir(app_name: str = APP_NAME) -> Path:
    """Directory for the application's user data, e.g. ~/.local/share/SagaScribe."""
    return _ensure(_user_base('data') / app_name)


def get_config_dir(app_name: str = APP_NAME) -> Path:
    """
    Directory holding the settings file.

    Args:
        app_name: Application folder name

    Returns:
        The config directory; on Windows a "config" folder inside the data dir
    """
    if os.name == 'nt':
        return _ensure(get_app_data_dir(app_name) / "config")
    return _ensure(_user_base('config') / app_name)


def get_annotations_dir(app_name: str = APP_NAME) -> Path:
    """Directory holding per-document annotation files."""
    return _ensure(get_app_data_dir(app_name) / "annotations")
