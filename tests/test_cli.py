"""
Tests for the aicommits command line entry point.

Run with:
    pytest tests/test_cli.py -v
"""

import io
import json
import sys

import pytest

from aicommits.cli import main as cli_main
from aicommits.config import Config
from aicommits.llm.base import TransportResponse


@pytest.fixture
def diff_file(tmp_path):
    path = tmp_path / "staged.diff"
    path.write_text("diff --git a/app.py b/app.py\n+print('hello')\n")
    return path


@pytest.fixture
def wire(monkeypatch, scripted):
    """Route the CLI's client through a scripted transport; return a setter."""
    holder = {}

    def _set(*outcomes):
        holder["transport"] = scripted(*outcomes)
        monkeypatch.setattr("aicommits.llm.openai.UrllibTransport", lambda: holder["transport"])
        return holder["transport"]
    return _set


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    config = Config()
    monkeypatch.setattr(cli_main, "load_config", lambda: config)
    monkeypatch.setattr(cli_main, "get_config_path", lambda: None)
    return config


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------

class TestGenerate:

    def test_prints_single_message(self, monkeypatch, capsys, wire, ok, diff_file):
        monkeypatch.setenv("OPENAI_KEY", "sk-test")
        wire(ok("Add greeting output."))

        code = cli_main.main(["--diff-file", str(diff_file)])

        assert code == 0
        assert capsys.readouterr().out == "Add greeting output\n"

    def test_piped_output_is_one_message_per_line(self, monkeypatch, capsys, wire, ok, diff_file):
        monkeypatch.setenv("OPENAI_KEY", "sk-test")
        transport = wire(ok("Add greeting", "Add greeting", "Print hello"))

        code = cli_main.main(["--diff-file", str(diff_file), "-g", "3"])

        assert code == 0
        assert capsys.readouterr().out.splitlines() == ["Add greeting", "Print hello"]
        assert transport.requests[0].body["n"] == 3

    def test_flags_override_config(self, monkeypatch, wire, ok, diff_file, default_config):
        monkeypatch.setenv("OPENAI_KEY", "sk-test")
        default_config.model = "gpt-4o-mini"
        transport = wire(ok("Fix bug"))

        cli_main.main([
            "--diff-file", str(diff_file),
            "-m", "gpt-4o",
            "-t", "conventional",
            "--timeout", "2500",
            "--retries", "0",
            "--proxy", "http://proxy.local:3128",
            "--insecure-tls",
        ])

        request = transport.requests[0]
        assert request.body["model"] == "gpt-4o"
        assert "<type>(<optional scope>)" in request.body["messages"][0]["content"]
        assert request.timeout_ms == 2500
        assert request.max_retries == 0
        assert request.proxy_url == "http://proxy.local:3128"
        assert request.insecure_tls is True

    def test_invalid_flag_value_warns_and_uses_default(self, monkeypatch, capsys, wire, ok, diff_file):
        monkeypatch.setenv("OPENAI_KEY", "sk-test")
        transport = wire(ok("Fix bug"))

        cli_main.main(["--diff-file", str(diff_file), "-g", "9"])

        assert "Invalid generate" in capsys.readouterr().err
        assert transport.requests[0].body["n"] == 1

    def test_piped_stdin_with_invalid_utf8(self, monkeypatch, capsys, wire, ok):
        monkeypatch.setenv("OPENAI_KEY", "sk-test")
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"diff --git a/x b/x\n+caf\xe9\n")))
        transport = wire(ok("Add cafe"))

        code = cli_main.main([])

        assert code == 0
        assert "+caf\ufffd" in transport.requests[0].body["messages"][1]["content"]
        assert capsys.readouterr().out == "Add cafe\n"

    def test_verbose_names_loaded_config_file(self, monkeypatch, capsys, wire, ok, diff_file, tmp_path):
        monkeypatch.setenv("OPENAI_KEY", "sk-test")
        monkeypatch.setattr(cli_main, "get_config_path", lambda: tmp_path / ".aicommitsrc")
        wire(ok("Fix bug"))

        cli_main.main(["--diff-file", str(diff_file), "--verbose"])

        assert f"Config: {tmp_path / '.aicommitsrc'}" in capsys.readouterr().err

    def test_verbose_reports_defaults_without_config_file(self, monkeypatch, capsys, wire, ok, diff_file):
        monkeypatch.setenv("OPENAI_KEY", "sk-test")
        wire(ok("Fix bug"))

        cli_main.main(["--diff-file", str(diff_file), "--verbose"])

        assert "Config: defaults" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestFailures:

    def test_missing_api_key(self, capsys, diff_file):
        code = cli_main.main(["--diff-file", str(diff_file)])

        assert code == 1
        assert "No API key found" in capsys.readouterr().err

    def test_missing_diff_file(self, monkeypatch, capsys, tmp_path):
        monkeypatch.setenv("OPENAI_KEY", "sk-test")

        code = cli_main.main(["--diff-file", str(tmp_path / "nope.diff")])

        err = capsys.readouterr().err
        assert code == 1
        assert "Could not read diff file" in err

    def test_empty_diff(self, monkeypatch, capsys, tmp_path):
        monkeypatch.setenv("OPENAI_KEY", "sk-test")
        empty = tmp_path / "empty.diff"
        empty.write_text("   \n")

        assert cli_main.main(["--diff-file", str(empty)]) == 1
        assert "No diff provided" in capsys.readouterr().err

    def test_auth_error_is_explained(self, monkeypatch, capsys, wire, diff_file):
        monkeypatch.setenv("OPENAI_KEY", "sk-bad")
        body = json.dumps({"error": {"message": "Incorrect API key provided"}})
        wire(TransportResponse(401, body))

        code = cli_main.main(["--diff-file", str(diff_file)])

        err = capsys.readouterr().err
        assert code == 1
        assert "Invalid API key." in err
        assert "Incorrect API key provided" in err
        assert "Traceback" not in err

    def test_no_usable_messages(self, monkeypatch, capsys, wire, ok, diff_file):
        monkeypatch.setenv("OPENAI_KEY", "sk-test")
        wire(ok(None))

        assert cli_main.main(["--diff-file", str(diff_file)]) == 1
        assert "No commit messages were generated" in capsys.readouterr().err

    def test_verbose_prints_attempt_summary(self, monkeypatch, capsys, wire, diff_file):
        monkeypatch.setenv("OPENAI_KEY", "sk-test")
        wire(TransportResponse(429, "{}"))

        code = cli_main.main(["--diff-file", str(diff_file), "--verbose"])

        err = capsys.readouterr().err
        assert code == 1
        assert "attempt 1: rate_limit" in err
        assert "rate limit exceeded" in err
