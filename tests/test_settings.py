import json

import pytest

from Settings import DEFAULT_SETTINGS, coerce_indent_width, load_settings, save_settings


def test_missing_file_gives_defaults(tmp_path) -> None:
    settings = load_settings(tmp_path / "missing.json")
    assert settings == DEFAULT_SETTINGS
    assert settings is not DEFAULT_SETTINGS


def test_saved_settings_are_loaded_back(tmp_path) -> None:
    path = tmp_path / "settings.json"
    settings = dict(DEFAULT_SETTINGS, indent_width=4, theme="light")
    assert save_settings(settings, path)
    assert load_settings(path) == settings


def test_partial_file_is_merged_with_defaults(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"font_size": 20}), encoding="utf-8")
    settings = load_settings(path)
    assert settings["font_size"] == 20
    assert settings["indent_width"] == DEFAULT_SETTINGS["indent_width"]


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_broken_file_falls_back_to_defaults(tmp_path, content: str) -> None:
    path = tmp_path / "settings.json"
    path.write_text(content, encoding="utf-8")
    assert load_settings(path) == DEFAULT_SETTINGS


def test_out_of_range_indent_width_is_reset(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"indent_width": 99}), encoding="utf-8")
    assert load_settings(path)["indent_width"] == 2


@pytest.mark.parametrize("value, expected", [(3, 3), ("4", 4), ("abc", 2), (None, 2), (0, 2)])
def test_coerce_indent_width(value, expected: int) -> None:
    assert coerce_indent_width(value) == expected


def test_save_reports_failure(tmp_path) -> None:
    # Каталог нельзя открыть как файл
    assert not save_settings(DEFAULT_SETTINGS, tmp_path)
