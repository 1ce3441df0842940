"""
Utility functions and helpers.
"""
from .resource_loader import (
    get_app_data_dir,
    get_config_dir,
    get_annotations_dir,
)

from .settings import (
    AnnotationSettings,
    load_settings,
    save_settings,
)

__all__ = [
    # Locations
    'get_app_data_dir',
    'get_config_dir',
    'get_annotations_dir',

    # Settings
    'AnnotationSettings',
    'load_settings',
    'save_settings',
]
