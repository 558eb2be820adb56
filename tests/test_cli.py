"""Tests for the command line interface."""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from sortimports.cli import app

UNSORTED = "import b from 'b';\nimport a from 'a';\n"
SORTED = "import a from 'a';\nimport b from 'b';\n"

runner = CliRunner()


@pytest.fixture
def workspace():
    """Create a temporary workspace with an isolated user config dir."""
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        with patch.dict("os.environ", {"XDG_CONFIG_HOME": str(root / "xdg")}):
            yield root


def test_sort_rewrites_files(workspace):
    """Test sorting a directory in place."""
    source = workspace / "App.tsx"
    source.write_text(UNSORTED)

    result = runner.invoke(app, ["sort", str(workspace)])

    assert result.exit_code == 0
    assert "1 changed" in result.output
    assert source.read_text() == SORTED


def test_sort_check_does_not_write(workspace):
    """Test that --check reports and fails without writing."""
    source = workspace / "App.tsx"
    source.write_text(UNSORTED)

    result = runner.invoke(app, ["sort", "--check", str(source)])

    assert result.exit_code == 1
    assert "Would reorganize" in result.output
    assert source.read_text() == UNSORTED


def test_sort_check_passes_on_sorted_files(workspace):
    """Test --check on a file that needs nothing."""
    source = workspace / "App.tsx"
    source.write_text(SORTED)

    result = runner.invoke(app, ["sort", "--check", str(source)])

    assert result.exit_code == 0
    assert "0 changed" in result.output


def test_sort_uses_settings_file(workspace):
    """Test that the nearest settings file is applied."""
    (workspace / ".sortimports.yaml").write_text("max_line_length: 20\n")
    source = workspace / "App.tsx"
    source.write_text("import { b, a } from 'lib';\n")

    result = runner.invoke(app, ["sort", str(source)])

    assert result.exit_code == 0
    assert source.read_text() == "import {\n  a,\n  b,\n} from 'lib';\n"


def test_sort_option_overrides_settings(workspace):
    """Test that command line options win over the settings file."""
    (workspace / ".sortimports.yaml").write_text("sort_mode: length\n")
    source = workspace / "App.tsx"
    source.write_text("import { map, filter } from 'lodash';\n")

    result = runner.invoke(app, ["sort", "--sort-mode", "alphabetical", str(source)])

    assert result.exit_code == 0
    assert source.read_text() == "import { filter, map } from 'lodash';\n"


def test_sort_reports_failures(workspace):
    """Test that unreadable files are reported and fail the run."""
    (workspace / "bad.ts").write_bytes(b"\xff\xfe\xfa")
    (workspace / "good.ts").write_text(UNSORTED)

    result = runner.invoke(app, ["sort", str(workspace)])

    assert result.exit_code == 1
    assert "1 failed" in result.output
    assert (workspace / "good.ts").read_text() == SORTED


def test_sort_without_sources(workspace):
    """Test a directory with nothing to process."""
    result = runner.invoke(app, ["sort", str(workspace)])

    assert result.exit_code == 0
    assert "No JavaScript or TypeScript files found" in result.output


def test_preview_shows_diff(workspace):
    """Test preview output without writing."""
    source = workspace / "App.tsx"
    source.write_text(UNSORTED)

    result = runner.invoke(app, ["preview", str(source)])

    assert result.exit_code == 0
    assert "import a from 'a';" in result.output
    assert source.read_text() == UNSORTED


def test_preview_missing_file(workspace):
    """Test preview of a file that does not exist."""
    result = runner.invoke(app, ["preview", str(workspace / "missing.ts")])
    assert result.exit_code == 1


def test_format_reads_stdin(workspace):
    """Test formatting from standard input."""
    with patch("pathlib.Path.cwd", return_value=workspace):
        result = runner.invoke(app, ["format", "-"], input=UNSORTED)

    assert result.exit_code == 0
    assert result.output == SORTED


def test_format_file(workspace):
    """Test formatting a file to standard output."""
    source = workspace / "App.tsx"
    source.write_text(UNSORTED)

    result = runner.invoke(app, ["format", str(source)])

    assert result.exit_code == 0
    assert result.output == SORTED
    assert source.read_text() == UNSORTED


def test_config_init_and_show(workspace):
    """Test writing default settings and reading them back."""
    result = runner.invoke(app, ["config", "init", "--path", str(workspace)])
    assert result.exit_code == 0
    assert (workspace / ".sortimports.yaml").is_file()

    result = runner.invoke(app, ["config", "init", "--path", str(workspace)])
    assert result.exit_code == 1

    result = runner.invoke(app, ["config", "init", "--path", str(workspace), "--force"])
    assert result.exit_code == 0

    result = runner.invoke(app, ["config", "show", str(workspace)])
    assert result.exit_code == 0
    assert "sort_mode" in result.output
