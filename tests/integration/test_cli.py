"""Tests for the command-line interface.

Tests cover:
- Version output
- Converting path data arguments and input files
- JSON output
- Exit codes for failed paths and invalid options
- Singular and plural path counts in the summary
"""

import json

from typer.testing import CliRunner

from sketchify.cli import app

runner = CliRunner()

SQUARE = "M0,0 L10,0 L10,10 L0,10 Z"


class TestVersion:
    """Tests for --version."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestConvert:
    """Tests for the convert command."""

    def test_path_argument(self):
        """Path data given as an argument is converted."""
        result = runner.invoke(app, ["convert", SQUARE])
        assert result.exit_code == 0
        assert "Sketchify" in result.output
        assert "Complete" in result.output

    def test_single_path_summary(self):
        """The summary counts a single path in the singular."""
        result = runner.invoke(app, ["convert", SQUARE])
        assert result.exit_code == 0
        assert "1 path " in result.output
        assert "1 paths" not in result.output

    def test_quiet(self):
        """Quiet mode prints nothing on success."""
        result = runner.invoke(app, ["convert", "--quiet", SQUARE])
        assert result.exit_code == 0
        assert "Complete" not in result.output

    def test_json_output(self, tmp_path):
        """Regions are written to the JSON file."""
        output = tmp_path / "regions.json"
        result = runner.invoke(
            app,
            ["convert", "-q", "--fill-rule", "evenodd", "--json", str(output), SQUARE, "M0,0 L10,10 L10,0 L0,10 Z"],
        )
        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert [entry["name"] for entry in data["paths"]] == ["arg-1", "arg-2"]
        assert data["paths"][0]["fill_rule"] == "evenodd"
        assert len(data["paths"][1]["regions"]) == 2

    def test_input_file(self, tmp_path):
        """Paths are read from an input file."""
        input_file = tmp_path / "paths.txt"
        input_file.write_text(f"square\t{SQUARE}\n", encoding="utf-8")
        output = tmp_path / "regions.json"
        result = runner.invoke(app, ["convert", "-q", "-i", str(input_file), "-o", str(output)])
        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["paths"][0]["name"] == "square"

    def test_failed_path_exit_code(self, tmp_path):
        """A failing path gives exit code 1 but still writes output."""
        output = tmp_path / "regions.json"
        result = runner.invoke(app, ["convert", "-q", "-o", str(output), SQUARE, "M0,0 A5,5 0 0 1 10,10"])
        assert result.exit_code == 1
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["paths"][1]["error_type"] == "UnsupportedGeometryError"

    def test_missing_input_file(self, tmp_path):
        result = runner.invoke(app, ["convert", "-i", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "Input file not found" in result.output

    def test_no_paths(self):
        result = runner.invoke(app, ["convert"])
        assert result.exit_code == 1
        assert "No paths given" in result.output

    def test_invalid_fill_rule(self):
        result = runner.invoke(app, ["convert", "--fill-rule", "winding", SQUARE])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_invalid_log_level(self):
        result = runner.invoke(app, ["convert", "--log-level", "LOUD", SQUARE])
        assert result.exit_code == 1
        assert "Invalid log level" in result.output

    def test_verbose_and_quiet(self):
        result = runner.invoke(app, ["convert", "-v", "-q", SQUARE])
        assert result.exit_code == 1
        assert "Cannot use --verbose and --quiet together" in result.output
