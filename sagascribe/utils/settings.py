"""
Persisted settings for the annotation core.
"""
import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

from sagascribe.core.annotations.undo_redo import DEFAULT_MAX_HISTORY
from .resource_loader import get_config_dir

logger = logging.getLogger(__name__)

SETTINGS_FILE = "annotations.json"


@dataclass
class AnnotationSettings:
    """User preferences that affect annotation editing."""
    max_history: int = DEFAULT_MAX_HISTORY
    default_author: Optional[str] = None
    auto_save: bool = True

    def to_dict(self):
        return asdict(self)

    @staticmethod
    def from_dict(data) -> 'AnnotationSettings':
        """Build settings from a dict, ignoring unknown or mistyped keys."""
        settings = AnnotationSettings()
        if not isinstance(data, dict):
            return settings

        max_history = data.get('max_history')
        if isinstance(max_history, int) and not isinstance(max_history, bool) and max_history >= 0:
            settings.max_history = max_history
        author = data.get('default_author')
        if author is None or isinstance(author, str):
            settings.default_author = author
        auto_save = data.get('auto_save')
        if isinstance(auto_save, bool):
            settings.auto_save = auto_save
        return settings


def settings_path(config_dir: Optional[Path] = None) -> Path:
    return (config_dir or get_config_dir()) / SETTINGS_FILE


def load_settings(path: Optional[Path] = None) -> AnnotationSettings:
    """
    Load settings from disk.

    Missing or unreadable files yield the defaults.
    """
    path = path or settings_path()
    if not path.exists():
        return AnnotationSettings()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Failed to load settings from %s: %s", path, e)
        return AnnotationSettings()

    known = {f.name for f in fields(AnnotationSettings)}
    unknown = set(data) - known if isinstance(data, dict) else set()
    if unknown:
        logger.debug("Ignoring unknown settings: %s", ", ".join(sorted(unknown)))
    return AnnotationSettings.from_dict(data)


def save_settings(settings: AnnotationSettings, path: Optional[Path] = None) -> bool:
    """Write settings to disk; returns False on failure."""
    path = path or settings_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(settings.to_dict(), f, indent=2)
        return True
    except OSError as e:
        logger.error("Failed to save settings to %s: %s", path, e)
        return False
