"""
Tests for the filterql command-line interface.
"""

import io
import json

import pytest

from filterql.cli import main


class TestValidateCommand:
    """filterql validate"""

    def test_valid_query(self, capsys):
        assert main(["validate", 'Age == 30 && Name @= "jo"']) == 0
        assert capsys.readouterr().out.strip() == "VALID"

    def test_invalid_query(self, capsys):
        assert main(["validate", "(Age == 30"]) == 1
        out = capsys.readouterr().out
        assert "INVALID" in out
        assert "- Unmatched opening parenthesis" in out

    def test_json_format(self, capsys):
        assert main(["validate", "Age == 30 &&", "--format", "json"]) == 1
        data = json.loads(capsys.readouterr().out)
        assert data == {"valid": False, "errors": ["Query ends with a logical operator"]}

    def test_reads_stdin(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("Filters= A == 1\n"))
        assert main(["validate", "-"]) == 0
        assert "VALID" in capsys.readouterr().out


class TestTokenizeCommand:
    """filterql tokenize"""

    def test_json(self, capsys):
        assert main(["tokenize", '(S ^^ ["a","b"])', "-f", "json"]) == 0
        assert json.loads(capsys.readouterr().out) == ["(", "S", "^^", '["a","b"]', ")"]

    def test_text(self, capsys):
        assert main(["tokenize", "A == 1"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == ["   1  A", "   2  ==", "   3  1"]


class TestEncodeCommand:
    """filterql encode"""

    def test_encode(self, capsys):
        assert main(["encode", "Age == 30 &&"]) == 0
        assert capsys.readouterr().out.strip() == "Age%20%3D%3D%2030"

    def test_encode_with_prefix(self, capsys):
        assert main(["encode", "Age == 30", "--prefix"]) == 0
        assert capsys.readouterr().out.strip() == "Filters%3D%20Age%20%3D%3D%2030"


class TestArguments:
    """Argument handling."""

    def test_command_required(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "filterql 0.1.0" in capsys.readouterr().out

    def test_verbose_logs_to_stderr(self, capsys):
        assert main(["-v", "validate", "A == 1"]) == 0
        assert capsys.readouterr().out.strip() == "VALID"
