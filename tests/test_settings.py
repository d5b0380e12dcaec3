"""Tests for palette settings persistence and editing."""

import json

import pytest

from tabpalette.config.settings import (
    SORT_OPENING_ORDER,
    PaletteSettings,
    get_settings_path,
    load_settings,
    save_settings,
    update_setting,
)
from tabpalette.exceptions import ConfigurationError


class TestDefaults:
    def test_defaults(self) -> None:
        settings = PaletteSettings()
        assert settings.excluded_folders == ["attachments", "Attachments"]
        assert settings.show_tags is True
        assert settings.show_path is True
        assert settings.sort_order == "recency"
        assert settings.always_open_in_new_tab is False
        assert settings.daily_note_format == "YYYY-MM-DD"
        assert settings.recently_closed == []
        assert settings.validate() == []

    def test_validate_reports_problems(self) -> None:
        settings = PaletteSettings(
            sort_order="alphabetical",
            enable_search=False,
            enable_tabs=False,
            enable_bookmarks=False,
            enable_daily_notes=False,
        )
        errors = settings.validate()
        assert len(errors) == 2
        assert "sort_order" in errors[0]


class TestPersistence:
    """Tests for loading and saving the settings file."""

    def test_settings_path_honours_env(self, config_dir) -> None:
        assert get_settings_path() == config_dir / "settings.json"

    def test_missing_file_gives_defaults(self) -> None:
        assert load_settings() == PaletteSettings()

    def test_round_trip(self) -> None:
        settings = PaletteSettings(show_tags=False, daily_note_folder="Journal")
        settings.recently_closed = [{"path": "a.md", "title": "a", "extension": "md"}]
        save_settings(settings)
        assert load_settings() == settings

    def test_partial_file_is_merged_with_defaults(self, config_dir) -> None:
        config_dir.mkdir(parents=True, exist_ok=True)
        (config_dir / "settings.json").write_text(json.dumps({"show_path": False, "legacy": 1}))

        settings = load_settings()
        assert settings.show_path is False
        assert settings.show_tags is True

    def test_hand_edited_values_are_repaired(self, config_dir) -> None:
        config_dir.mkdir(parents=True, exist_ok=True)
        (config_dir / "settings.json").write_text(
            json.dumps(
                {
                    "excluded_folders": "Attachments, templates",
                    "daily_note_format": "",
                    "sort_order": "bogus",
                    "show_tags": "no",
                    "daily_note_folder": 7,
                    "show_path": False,
                }
            )
        )

        settings = load_settings()
        assert settings.excluded_folders == ["Attachments", "templates"]
        assert settings.daily_note_format == "YYYY-MM-DD"
        assert settings.sort_order == "recency"
        assert settings.show_tags is True
        assert settings.daily_note_folder == ""
        assert settings.show_path is False
        assert settings.validate() == []

    def test_non_string_folders_are_dropped(self, config_dir) -> None:
        config_dir.mkdir(parents=True, exist_ok=True)
        (config_dir / "settings.json").write_text(json.dumps({"excluded_folders": ["Archive", 3, None]}))
        assert load_settings().excluded_folders == ["Archive"]

    def test_all_sections_disabled_on_disk(self, config_dir) -> None:
        config_dir.mkdir(parents=True, exist_ok=True)
        flags = {f"enable_{name}": False for name in ("search", "tabs", "bookmarks", "daily_notes")}
        (config_dir / "settings.json").write_text(json.dumps(flags))

        settings = load_settings()
        assert settings.enable_search is True
        assert settings.validate() == []

    @pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
    def test_corrupt_file_gives_defaults(self, config_dir, content) -> None:
        config_dir.mkdir(parents=True, exist_ok=True)
        (config_dir / "settings.json").write_text(content)
        assert load_settings() == PaletteSettings()


class TestUpdateSetting:
    """Tests for applying command-line strings to settings."""

    @pytest.mark.parametrize("raw,expected", [("yes", True), ("OFF", False), ("1", True), ("false", False)])
    def test_booleans(self, raw, expected) -> None:
        settings = update_setting(PaletteSettings(), "show_tags", raw)
        assert settings.show_tags is expected

    def test_bad_boolean(self) -> None:
        with pytest.raises(ConfigurationError):
            update_setting(PaletteSettings(), "show_tags", "maybe")

    def test_list_values(self) -> None:
        settings = update_setting(PaletteSettings(), "excluded_folders", " templates, ,Archive ")
        assert settings.excluded_folders == ["templates", "Archive"]

    def test_sort_order(self) -> None:
        settings = update_setting(PaletteSettings(), "sort_order", SORT_OPENING_ORDER)
        assert settings.sort_order == SORT_OPENING_ORDER
        with pytest.raises(ConfigurationError):
            update_setting(settings, "sort_order", "alphabetical")

    def test_folder_slashes_are_trimmed(self) -> None:
        settings = update_setting(PaletteSettings(), "daily_note_folder", "/Journal/")
        assert settings.daily_note_folder == "Journal"

    @pytest.mark.parametrize("key", ["unknown", "recently_closed"])
    def test_rejected_keys(self, key) -> None:
        with pytest.raises(ConfigurationError):
            update_setting(PaletteSettings(), key, "x")

    def test_last_enabled_section_cannot_be_disabled(self) -> None:
        settings = PaletteSettings(enable_search=False, enable_tabs=False, enable_bookmarks=False)
        with pytest.raises(ConfigurationError):
            update_setting(settings, "enable_daily_notes", "false")
        assert settings.enable_daily_notes is True
