"""Tests for persisted annotation settings."""
import json

from sagascribe.utils.settings import AnnotationSettings, load_settings, save_settings


class TestAnnotationSettings:

    def test_defaults(self) -> None:
        settings = AnnotationSettings()
        assert settings.max_history == 50
        assert settings.default_author is None
        assert settings.auto_save is True

    def test_from_dict_ignores_bad_values(self) -> None:
        settings = AnnotationSettings.from_dict({
            'max_history': -3,
            'default_author': 7,
            'auto_save': "yes",
        })
        assert settings == AnnotationSettings()

    def test_from_dict_non_mapping(self) -> None:
        assert AnnotationSettings.from_dict(["max_history"]) == AnnotationSettings()


class TestLoadSave:

    def test_missing_file_gives_defaults(self, tmp_path) -> None:
        assert load_settings(tmp_path / "absent.json") == AnnotationSettings()

    def test_corrupt_file_gives_defaults(self, tmp_path) -> None:
        path = tmp_path / "annotations.json"
        path.write_text("{oops", encoding='utf-8')
        assert load_settings(path) == AnnotationSettings()

    def test_save_then_load(self, tmp_path) -> None:
        path = tmp_path / "config" / "annotations.json"
        settings = AnnotationSettings(max_history=10, default_author="hk", auto_save=False)
        assert save_settings(settings, path)
        assert load_settings(path) == settings

    def test_unknown_keys_are_ignored(self, tmp_path) -> None:
        path = tmp_path / "annotations.json"
        path.write_text(json.dumps({'max_history': 5, 'theme': "dark"}), encoding='utf-8')
        assert load_settings(path).max_history == 5
