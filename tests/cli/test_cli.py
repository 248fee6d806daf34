"""
phonobind CLI Tests

Black-box subprocess tests only. No imports from phonobind.cli.
"""

import json
import sys
from pathlib import Path

from tests.conftest import run_cli

# Import schema validation from tools (allowed for test verification)
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "tools"))
from validate_schema import load_schema, validate_document


class TestHelpText:
    """Verify help text."""

    def test_main_help(self):
        result = run_cli("--help")
        assert result.returncode == 0
        assert "phonobind command-line interface." in result.stdout
        assert "{inspect,version,info}" in result.stdout

    def test_no_command_prints_help(self):
        result = run_cli()
        assert result.returncode == 0
        assert "usage: phonobind" in result.stdout

    def test_inspect_help(self):
        result = run_cli("inspect", "--help")
        assert result.returncode == 0
        assert "--output PATH" in result.stdout

    def test_unknown_command(self):
        result = run_cli("transcribe")
        assert result.returncode == 2


class TestInspectCommand:
    """Test phonobind inspect."""

    def test_report_on_stdout(self):
        result = run_cli("inspect")
        assert result.returncode == 0

        report = json.loads(result.stdout)
        assert report["module"] == "phonobind"
        assert len(report["classes"]) == 11
        assert len(report["enums"]) == 4
        assert all(c["state"] == "initialized" for c in report["classes"])

    def test_report_matches_schema(self):
        result = run_cli("inspect")
        errors = validate_document(json.loads(result.stdout), load_schema("inspect"))
        assert errors == []

    def test_report_to_file(self, tmp_path):
        output = tmp_path / "report.json"
        result = run_cli("inspect", "--output", str(output))
        assert result.returncode == 0
        assert result.stdout == ""

        report = json.loads(output.read_text())
        sound = next(c for c in report["classes"] if c["name"] == "Sound")
        assert sound["parent"] == "Vector"

    def test_report_deterministic(self):
        assert run_cli("inspect").stdout == run_cli("inspect").stdout


class TestVersionCommand:

    def test_prints_versions(self):
        result = run_cli("version")
        assert result.returncode == 0
        lines = result.stdout.splitlines()
        assert lines[0].startswith("phonobind ")
        assert lines[1] == "LAPACK 3.1.1"


class TestInfoCommand:

    def test_info_on_wav(self, test_wav_path):
        result = run_cli("info", str(test_wav_path))
        assert result.returncode == 0
        assert "Object type: Sound" in result.stdout
        assert "Object name: test_input" in result.stdout
        assert "Sampling frequency: 16000 Hz" in result.stdout
        assert "Duration: 0.5 s" in result.stdout

    def test_missing_file(self, tmp_path):
        result = run_cli("info", str(tmp_path / "absent.wav"))
        assert result.returncode == 1
        assert "Input file not found" in result.stderr

    def test_unreadable_file(self, tmp_path):
        bogus = tmp_path / "bogus.wav"
        bogus.write_text("not audio")
        result = run_cli("info", str(bogus))
        assert result.returncode == 1
        assert "Cannot read" in result.stderr

    def test_invalid_env_config(self, test_wav_path, monkeypatch):
        monkeypatch.setenv("PHONOBIND_LOG_LEVEL", "chatty")
        result = run_cli("info", str(test_wav_path))
        assert result.returncode == 1
        assert "Invalid log level" in result.stderr
