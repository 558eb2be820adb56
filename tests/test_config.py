"""Tests for configuration handling."""

import tempfile
from pathlib import Path
from unittest.mock import mock_open, patch

import pytest

from sortimports.core.config import (
    Settings,
    find_settings_file,
    get_config_dir,
    get_default_settings,
    load_settings,
    normalize_group_order,
    normalize_style_extensions,
    save_settings,
)
from sortimports.core.types import DEFAULT_GROUP_ORDER, SEPARATOR, GroupKey, SortMode


@pytest.fixture
def mock_config_file():
    """Create a mock config file."""
    with tempfile.NamedTemporaryFile(suffix=".yaml") as tmp:
        yield Path(tmp.name)


@pytest.fixture
def project_dir():
    """Create a temporary project directory with an isolated user config dir."""
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        with patch.dict("os.environ", {"XDG_CONFIG_HOME": str(root / "xdg")}):
            yield root


def test_settings_defaults():
    """Test Settings default values."""
    settings = Settings()
    assert settings.max_line_length == 100
    assert settings.indent == "  "
    assert settings.sort_mode == "length"
    assert settings.alias_prefixes == ["@/", "~/", "src/"]
    assert settings.merge_duplicates
    assert not settings.keep_omitted_in_place
    assert settings.groups_order[:3] == ["directives", "spacing", "react"]


def test_invalid_values_fall_back_to_defaults():
    """Test that bad values are normalized instead of raising."""
    settings = Settings(
        max_line_length=0,
        sort_mode="random",
        indent="xx",
        groups_order="react",
        style_extensions=None,
        merge_duplicates="maybe",
    )
    assert settings.max_line_length == 100
    assert settings.sort_mode == "length"
    assert settings.indent == "  "
    assert settings.groups_order[0] == "directives"
    assert settings.style_extensions == [".css", ".scss", ".sass", ".less"]
    assert settings.merge_duplicates


def test_values_are_normalized():
    """Test accepted spellings of valid values."""
    settings = Settings(
        max_line_length="80",
        sort_mode=" Alphabetical ",
        indent=4,
        style_extensions=["SCSS", ".css", "scss"],
        merge_duplicates="no",
    )
    assert settings.max_line_length == 80
    assert settings.sort_mode == "alphabetical"
    assert settings.indent == "    "
    assert settings.style_extensions == [".scss", ".css"]
    assert settings.merge_duplicates is False


def test_to_sort_config():
    """Test building the core configuration."""
    settings = Settings(sort_mode="alphabetical", groups_order=["relative", "spacing", "libraries"])
    config = settings.to_sort_config(["@app/"])

    assert config.sort_mode is SortMode.ALPHABETICAL
    assert config.alias_prefixes == ("@app/",)
    assert config.groups_order[:3] == (GroupKey.RELATIVE, SEPARATOR, GroupKey.LIBRARIES)


def test_normalize_group_order_appends_missing_groups():
    """Test unknown names, duplicates and missing groups."""
    order = normalize_group_order(["bogus", "react", "react"])
    assert order[0] is GroupKey.REACT
    assert len(order) == len(DEFAULT_GROUP_ORDER)
    assert set(order) == set(DEFAULT_GROUP_ORDER)


def test_normalize_group_order_separators():
    """Test that separators are never leading, doubled or trailing."""
    order = normalize_group_order(["spacing", "react", "spacing", "spacing"], keep_omitted_in_place=True)
    assert order == (GroupKey.REACT,)

    order = normalize_group_order(["react", "spacing", "spacing", "styles"], keep_omitted_in_place=True)
    assert order == (GroupKey.REACT, SEPARATOR, GroupKey.STYLES)


def test_normalize_style_extensions():
    """Test extension normalization and the empty fallback."""
    assert normalize_style_extensions(["CSS", " .less "]) == (".css", ".less")
    assert normalize_style_extensions(["", " "]) == (".css", ".scss", ".sass", ".less")


def test_load_settings(project_dir):
    """Test loading settings from a YAML file."""
    settings_file = project_dir / ".sortimports.yaml"
    settings_file.write_text("sort_mode: alphabetical\nmax_line_length: 80\nunknown_key: 1\n")

    settings = load_settings(settings_file)
    assert settings.sort_mode == "alphabetical"
    assert settings.max_line_length == 80


def test_load_settings_non_mapping(project_dir):
    """Test that a YAML file without a mapping yields defaults."""
    settings_file = project_dir / ".sortimports.yaml"
    settings_file.write_text("- just\n- a list\n")

    assert load_settings(settings_file) == get_default_settings()


def test_save_settings(mock_config_file):
    """Test saving settings to file."""
    settings = Settings(sort_mode="alphabetical", max_line_length=80)
    with patch("builtins.open", mock_open()) as mock_file:
        save_settings(settings, mock_config_file)
        # Verify file was opened for writing
        mock_file.assert_called_once_with(mock_config_file, "w")
        written_data = "".join(call.args[0] for call in mock_file().write.call_args_list)
        assert "sort_mode: alphabetical" in written_data
        assert "max_line_length: 80" in written_data


def test_save_and_load_roundtrip(project_dir):
    """Test that saved settings load back unchanged."""
    settings_file = project_dir / ".sortimports.yaml"
    settings = Settings(indent="    ", groups_order=["react", "spacing", "libraries"])
    save_settings(settings, settings_file)

    assert load_settings(settings_file) == settings


def test_find_settings_file(project_dir):
    """Test walking up from a source file."""
    settings_file = project_dir / ".sortimports.yml"
    settings_file.write_text("sort_mode: alphabetical\n")
    source = project_dir / "src" / "components" / "Button.tsx"
    source.parent.mkdir(parents=True)
    source.write_text("")

    assert find_settings_file(source) == settings_file.resolve()


def test_find_settings_file_user_fallback(project_dir):
    """Test falling back to the user configuration."""
    user_file = project_dir / "xdg" / "sortimports" / "config.yaml"
    user_file.parent.mkdir(parents=True)
    user_file.write_text("max_line_length: 120\n")
    source_dir = project_dir / "app"
    source_dir.mkdir()

    found = find_settings_file(source_dir)
    assert found is not None
    assert load_settings(found).max_line_length == 120


def test_get_config_dir():
    """Test the XDG configuration directory."""
    with patch.dict("os.environ", {"XDG_CONFIG_HOME": "/custom/config"}):
        assert get_config_dir() == Path("/custom/config/sortimports")


def test_env_override():
    """Test environment variable overrides."""
    with patch.dict("os.environ", {"SORTIMPORTS_SORT_MODE": "alphabetical", "SORTIMPORTS_MAX_LINE_LENGTH": "72"}):
        settings = get_default_settings()
        assert settings.sort_mode == "alphabetical"
        assert settings.max_line_length == 72
