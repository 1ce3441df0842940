"""Tests for per-platform user directories."""
import os
import sys

import pytest

from sagascribe.utils.resource_loader import (
    get_annotations_dir,
    get_app_data_dir,
    get_config_dir,
)

posix_only = pytest.mark.skipif(
    os.name == 'nt' or sys.platform == 'darwin',
    reason="XDG directories apply to Linux and other POSIX systems",
)


@posix_only
class TestXdgDirectories:

    def test_data_and_annotations_follow_xdg_data_home(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv('XDG_DATA_HOME', str(tmp_path / "data"))

        assert get_app_data_dir("Saga") == tmp_path / "data" / "Saga"
        annotations = get_annotations_dir("Saga")
        assert annotations == tmp_path / "data" / "Saga" / "annotations"
        assert annotations.is_dir()

    def test_config_follows_xdg_config_home(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path / "cfg"))

        config = get_config_dir("Saga")
        assert config == tmp_path / "cfg" / "Saga"
        assert config.is_dir()

    def test_empty_xdg_falls_back_to_home(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv('XDG_DATA_HOME', "")
        monkeypatch.setenv('HOME', str(tmp_path))

        assert get_app_data_dir("Saga") == tmp_path / ".local" / "share" / "Saga"
