import pytest
import yaml

from credvault.config import AppSettings, load_settings, write_settings
from credvault.vault.naming import DEFAULT_PREFIX


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / "nope.yaml")
    assert settings == AppSettings()
    assert settings.prefix == DEFAULT_PREFIX
    assert settings.persist == "enterprise"


def test_round_trip(tmp_path):
    path = tmp_path / "sub" / "settings.yaml"
    original = AppSettings(prefix="Work_", hotkey="Ctrl+Shift+F9", show_on_start=True)

    write_settings(original, path)

    assert load_settings(path) == original


def test_unknown_keys_ignored(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.safe_dump({"prefix": "X_", "colour": "blue"}))
    assert load_settings(path).prefix == "X_"


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("")
    assert load_settings(path) == AppSettings()


def test_non_mapping_rejected(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        load_settings(path)


def test_bad_persist_scope_rejected():
    with pytest.raises(ValueError):
        AppSettings(persist="forever")


def test_empty_prefix_rejected():
    with pytest.raises(ValueError):
        AppSettings(prefix="")


def test_process_settings_saved_to_default_path(tmp_path, monkeypatch):
    from credvault import config

    path = tmp_path / "settings.yaml"
    monkeypatch.setattr(config, "DEFAULT_SETTINGS_PATH", path)
    config.reset_settings(AppSettings(prefix="Home_"))
    try:
        config.save_settings()
        config.reset_settings()
        assert config.get_settings().prefix == "Home_"
    finally:
        config.reset_settings()


def test_theme_overrides_round_trip(tmp_path):
    path = tmp_path / "settings.yaml"
    original = AppSettings(theme={"accent_color": "#ff8800", "font_size": 14})

    write_settings(original, path)

    assert load_settings(path).theme == {"accent_color": "#ff8800", "font_size": 14}


@pytest.mark.parametrize("overrides", [
    {"prefix": 123},
    {"persist": None},
    {"hotkey": None},
    {"hotkey": "  "},
    {"show_on_start": "yes"},
    {"window_width": "wide"},
    {"window_height": 0},
    {"window_width": True},
    {"theme": ["accent_color"]},
    {"theme": {"accent_color": None}},
])
def test_wrong_value_types_rejected(overrides):
    with pytest.raises(ValueError):
        AppSettings.from_dict(overrides)


def test_wrong_type_in_yaml_rejected(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("hotkey:\nwindow_width: 800\n")
    with pytest.raises(ValueError):
        load_settings(path)
