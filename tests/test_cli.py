"""
Tests for the grantcraft command line.
"""

import io
import json

import pytest

from grantcraft import __version__
from grantcraft.cli import (
    EXIT_BELOW_THRESHOLD,
    EXIT_INPUT_ERROR,
    EXIT_PASSED,
    check_length,
    main,
)
from grantcraft.errors import DraftTooShortError

from tests.conftest import STRONG_DRAFT, UNRELATED_DRAFT


@pytest.fixture
def strong_path(tmp_path):
    path = tmp_path / "strong.md"
    path.write_text(STRONG_DRAFT, encoding="utf-8")
    return path


@pytest.fixture
def unrelated_path(tmp_path):
    path = tmp_path / "unrelated.md"
    path.write_text(UNRELATED_DRAFT, encoding="utf-8")
    return path


class TestReviewCommand:

    def test_passing_draft(self, strong_path, capsys):
        assert main(["review", str(strong_path)]) == EXIT_PASSED
        out = capsys.readouterr().out
        assert out.startswith("# Reviewer Report")
        assert "PASS" in out

    def test_below_threshold(self, unrelated_path, capsys):
        assert main(["review", str(unrelated_path)]) == EXIT_BELOW_THRESHOLD
        assert "BELOW THRESHOLD" in capsys.readouterr().out

    def test_json_output(self, strong_path, capsys):
        assert main(["review", str(strong_path), "--json"]) == EXIT_PASSED
        data = json.loads(capsys.readouterr().out)
        assert data["overallPassed"] is True
        assert len(data["criteria"]) == 3

    def test_output_file(self, strong_path, tmp_path, capsys):
        target = tmp_path / "report.md"
        assert main(["review", str(strong_path), "-o", str(target)]) == EXIT_PASSED
        assert target.read_text(encoding="utf-8").startswith("# Reviewer Report")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Report written to" in captured.err

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(STRONG_DRAFT))
        assert main(["review", "-"]) == EXIT_PASSED

    def test_missing_file(self, tmp_path, capsys):
        assert main(["review", str(tmp_path / "nope.md")]) == EXIT_INPUT_ERROR
        assert "cannot read" in capsys.readouterr().err

    def test_output_into_missing_directory(self, strong_path, tmp_path, capsys):
        target = tmp_path / "missing" / "report.md"
        assert main(["review", str(strong_path), "-o", str(target)]) == EXIT_INPUT_ERROR
        err = capsys.readouterr().err
        assert "cannot write" in err
        assert "Traceback" not in err
        assert not target.exists()

    def test_output_path_is_directory(self, strong_path, tmp_path, capsys):
        assert main(["review", str(strong_path), "--json", "-o", str(tmp_path)]) == EXIT_INPUT_ERROR
        assert "cannot write" in capsys.readouterr().err

    def test_short_draft(self, tmp_path, capsys):
        path = tmp_path / "short.md"
        path.write_text("# Title\n\nToo short.", encoding="utf-8")
        assert main(["review", str(path)]) == EXIT_INPUT_ERROR
        assert "too short" in capsys.readouterr().err

    def test_unknown_scheme_rejected_by_parser(self, strong_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["review", str(strong_path), "--scheme", "nsf_career"])
        assert exc_info.value.code == 2


class TestSignalsCommand:

    def test_lists_all_signals(self, capsys):
        assert main(["signals"]) == 0
        out = capsys.readouterr().out
        assert "Horizon Europe" in out
        assert "objectives_listed" in out
        assert "management_structure" in out
        required = [line for line in out.splitlines() if " required " in line]
        assert len(required) == 14


class TestHelpers:

    def test_check_length(self):
        check_length("x" * 50, minimum=50)
        with pytest.raises(DraftTooShortError) as exc_info:
            check_length("   " + "x" * 49 + "   ", minimum=50)
        assert exc_info.value.length == 49
        assert exc_info.value.minimum == 50

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            main(["--version"])
        assert __version__ in capsys.readouterr().out
