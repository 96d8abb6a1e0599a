"""Tests for the denv command line interface.

In-process tests call denv.cli.main(); end-to-end tests run
`python -m denv` in a subprocess to observe real exit statuses and signals.
"""

import json
import os
import signal
import subprocess
import sys
import textwrap
import time
from pathlib import Path
from typing import List, Optional

import pytest

from denv.cli import build_parser, main
from denv.config import EnvSource, reset_settings

SRC_DIR = Path(__file__).resolve().parent.parent / "src"


def write(path: Path, text: str) -> Path:
    path.write_text(text)
    return path


def cli_env(extra: Optional[dict] = None) -> dict:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    if extra:
        env.update(extra)
    return env


def run_cli(args: List[str], cwd: Optional[Path] = None, env: Optional[dict] = None) -> subprocess.CompletedProcess:
    """Run `python -m denv` with the given arguments."""
    return subprocess.run(
        [sys.executable, "-m", "denv", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
        env=cli_env(env),
        timeout=60,
    )


class TestParser:
    def test_sources_keep_command_line_order(self):
        args = build_parser().parse_args(["-fo", "b.env", "-f", "a.env", "--file-optional", "c.env", "list"])

        assert args.sources == [
            EnvSource.optional_file("b.env"),
            EnvSource.required("a.env"),
            EnvSource.optional_file("c.env"),
        ]

    def test_exec_keeps_arguments_verbatim(self):
        args = build_parser().parse_args(["-i", "exec", "--", "ls", "-la", "--color", "-f", "x"])
        assert args.isolate is True
        assert args.argv[-5:] == ["ls", "-la", "--color", "-f", "x"]

    def test_output_default(self):
        assert build_parser().parse_args(["keys"]).output == "text"


class TestMainInProcess:
    def setup_method(self):
        reset_settings()

    def teardown_method(self):
        reset_settings()

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "denv 1.0.0" in capsys.readouterr().out

    def test_get(self, tmp_path, capsys):
        env_file = write(tmp_path / ".env", "FOO=bar\nBAZ=qux")

        assert main(["-f", str(env_file), "-i", "get", "FOO"]) == 0
        assert capsys.readouterr().out == "bar\n"

    def test_get_missing_key(self, tmp_path, capsys):
        env_file = write(tmp_path / ".env", "FOO=bar")

        assert main(["-f", str(env_file), "-i", "get", "MISSING_KEY"]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error: key 'MISSING_KEY' not found" in captured.err

    def test_get_requires_key(self, capsys):
        assert main(["-i", "get"]) == 1
        assert "key argument is required" in capsys.readouterr().err

    def test_keys_text(self, tmp_path, capsys):
        env_file = write(tmp_path / ".env", "FOO=bar\nBAZ=qux")

        assert main(["-f", str(env_file), "-i", "keys"]) == 0
        assert capsys.readouterr().out == "BAZ\nFOO\n"

    def test_keys_json(self, tmp_path, capsys):
        env_file = write(tmp_path / ".env", "FOO=bar\nBAZ=qux")

        assert main(["--file", str(env_file), "--isolate", "keys", "--output", "json"]) == 0
        assert json.loads(capsys.readouterr().out) == ["BAZ", "FOO"]

    def test_list_text(self, tmp_path, capsys):
        env_file = write(tmp_path / ".env", "FOO=bar\nBAZ=qux")

        assert main(["-f", str(env_file), "-i", "list"]) == 0
        assert capsys.readouterr().out == "BAZ=qux\nFOO=bar\n"

    def test_list_json_round_trip(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("SYSTEM_VAR", "system")
        env_file = write(tmp_path / ".env", 'FOO=bar\nMULTI="a\nb"\nEMPTY=')

        assert main(["-f", str(env_file), "list", "-o", "json"]) == 0

        expected = dict(os.environ)
        expected.update({"FOO": "bar", "MULTI": "a\nb", "EMPTY": ""})
        assert json.loads(capsys.readouterr().out) == expected

    def test_invalid_output_format(self, capsys):
        assert main(["-i", "keys", "-o", "yaml"]) == 1
        assert "invalid choice" in capsys.readouterr().err

    def test_unknown_flag_exits_one(self, capsys):
        assert main(["--bogus", "list"]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_merge_order(self, tmp_path, capsys):
        a = write(tmp_path / "a.env", "VAL=1")
        b = write(tmp_path / "b.env", "VAL=2")

        assert main(["-f", str(a), "-f", str(b), "-i", "get", "VAL"]) == 0
        assert capsys.readouterr().out == "2\n"

        assert main(["-f", str(b), "-f", str(a), "-i", "get", "VAL"]) == 0
        assert capsys.readouterr().out == "1\n"

    def test_isolate(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("SYSTEM_VAR", "system")
        env_file = write(tmp_path / ".env", "MY_VAR=hello")

        assert main(["-f", str(env_file), "-i", "list", "-o", "json"]) == 0
        assert json.loads(capsys.readouterr().out) == {"MY_VAR": "hello"}

    def test_default_env_file(self, tmp_path, capsys, monkeypatch):
        write(tmp_path / ".env", "DEFAULT=true")
        monkeypatch.chdir(tmp_path)

        assert main(["get", "DEFAULT"]) == 0
        assert capsys.readouterr().out == "true\n"

    def test_default_env_file_when_isolated(self, tmp_path, capsys, monkeypatch):
        write(tmp_path / ".env", "DEFAULT=true")
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("DENV_DISCOVERY", raising=False)

        assert main(["-i", "list"]) == 0
        assert capsys.readouterr().out == "DEFAULT=true\n"

    def test_discovery_policy_from_environment(self, tmp_path, capsys, monkeypatch):
        write(tmp_path / ".env", "DEFAULT=true")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DENV_DISCOVERY", "unless-isolated")

        assert main(["-i", "list"]) == 0
        assert capsys.readouterr().out == ""

    def test_explicit_file_skips_default(self, tmp_path, capsys, monkeypatch):
        write(tmp_path / ".env", "DEFAULT=true")
        other = write(tmp_path / "other.env", "OTHER=1")
        monkeypatch.chdir(tmp_path)

        assert main(["-i", "-f", str(other), "keys"]) == 0
        assert capsys.readouterr().out == "OTHER\n"

    def test_optional_missing_file(self, tmp_path, capsys):
        missing = tmp_path / "missing.env"

        assert main(["-fo", str(missing), "-i", "list", "-o", "json"]) == 0
        assert json.loads(capsys.readouterr().out) == {}

    def test_required_missing_file(self, tmp_path, capsys):
        missing = tmp_path / "missing.env"

        assert main(["-f", str(missing), "-i", "list"]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert f"Error: failed to read {missing}" in captured.err

    def test_malformed_file(self, tmp_path, capsys):
        bad = write(tmp_path / "bad.env", "GOOD=1\nnot valid at all\n")

        assert main(["-f", str(bad), "-i", "list"]) == 1
        assert "line 2" in capsys.readouterr().err

    def test_invalid_setting(self, capsys, monkeypatch):
        monkeypatch.setenv("DENV_LOG_LEVEL", "chatty")

        assert main(["-i", "list"]) == 1
        assert "invalid log level" in capsys.readouterr().err

    def test_exec_propagates_exit_code(self):
        assert main(["-i", "exec", "--", sys.executable, "-c", "import sys; sys.exit(7)"]) == 7

    def test_exec_without_command(self, capsys):
        assert main(["-i", "exec"]) == 1
        assert "no command specified" in capsys.readouterr().err

        assert main(["-i", "exec", "--"]) == 1
        assert "no command specified" in capsys.readouterr().err

    def test_exec_command_not_found(self, capsys, monkeypatch, tmp_path):
        monkeypatch.setenv("PATH", str(tmp_path))

        assert main(["-i", "exec", "--", "definitely-not-installed"]) == 1
        assert "executable file not found" in capsys.readouterr().err

    def test_exec_strips_only_the_first_separator(self, monkeypatch):
        calls = []

        class RecordingRunner:
            def __init__(self, logger=None):
                pass

            def run(self, env, argv):
                calls.append(list(argv))
                return 0

        monkeypatch.setattr("denv.cli.CommandRunner", RecordingRunner)

        assert main(["-i", "exec", "--", "prog", "--", "x"]) == 0
        assert main(["-i", "exec", "--", "prog", "-x", "--flag"]) == 0
        assert calls == [["prog", "--", "x"], ["prog", "-x", "--flag"]]

    def test_interrupt_before_child_starts(self, capsys, monkeypatch):
        def interrupted(*args, **kwargs):
            raise KeyboardInterrupt

        monkeypatch.setattr("denv.cli.Settings.from_env", interrupted)

        assert main(["-i", "list"]) == 130

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error: interrupted" in captured.err

    def test_exec_child_environment(self, tmp_path):
        env_file = write(tmp_path / "app.env", "FOO=from-file")
        out = tmp_path / "out.json"
        script = "import json, os, sys; json.dump(dict(os.environ), open(sys.argv[1], 'w'))"

        code = main(["-i", "-f", str(env_file), "exec", "--", sys.executable, "-c", script, str(out)])

        assert code == 0
        child_env = json.loads(out.read_text())
        assert child_env["FOO"] == "from-file"
        assert "PYTEST_CURRENT_TEST" not in child_env


class TestEndToEnd:
    """Run the CLI as a separate process."""

    def test_exit_code_propagation(self, tmp_path):
        result = run_cli(["-i", "exec", "--", sys.executable, "-c", "import sys; sys.exit(7)"], cwd=tmp_path)
        assert result.returncode == 7

    def test_key_not_found(self, tmp_path):
        env_file = write(tmp_path / ".env", "FOO=bar")

        result = run_cli(["-f", str(env_file), "get", "MISSING_KEY"], cwd=tmp_path)

        assert result.returncode == 1
        assert result.stdout == ""
        assert "MISSING_KEY" in result.stderr

    def test_list_json(self, tmp_path):
        env_file = write(tmp_path / ".env", "FOO=bar\nBAZ=qux")

        result = run_cli(["-f", str(env_file), "-i", "list", "-o", "json"], cwd=tmp_path)

        assert result.returncode == 0
        assert json.loads(result.stdout) == {"FOO": "bar", "BAZ": "qux"}

    def test_stdout_passthrough(self, tmp_path):
        env_file = write(tmp_path / ".env", "GREETING=hello")
        script = "import os; print(os.environ['GREETING'])"

        result = run_cli(["-i", "-f", str(env_file), "exec", "--", sys.executable, "-c", script], cwd=tmp_path)

        assert result.returncode == 0
        assert result.stdout == "hello\n"

    def test_debug_logs_go_to_stderr(self, tmp_path):
        env_file = write(tmp_path / ".env", "FOO=bar")

        result = run_cli(
            ["-i", "-f", str(env_file), "get", "FOO"],
            cwd=tmp_path,
            env={"DENV_LOG_LEVEL": "DEBUG"},
        )

        assert result.returncode == 0
        assert result.stdout == "bar\n"
        assert "Loaded env file" in result.stderr

    def test_sigterm_is_forwarded(self, tmp_path):
        ready = tmp_path / "ready"
        script = textwrap.dedent(
            f"""
            import pathlib, signal, sys, time

            signal.signal(signal.SIGTERM, lambda signum, frame: sys.exit(42))
            pathlib.Path({str(ready)!r}).write_text("ready")
            for _ in range(300):
                time.sleep(0.1)
            sys.exit(1)
            """
        )
        process = subprocess.Popen(
            [sys.executable, "-m", "denv", "-i", "exec", "--", sys.executable, "-c", script],
            cwd=tmp_path,
            env=cli_env(),
        )
        try:
            for _ in range(300):
                if ready.exists():
                    break
                time.sleep(0.05)
            assert ready.exists()

            process.send_signal(signal.SIGTERM)
            assert process.wait(timeout=30) == 42
        finally:
            if process.poll() is None:
                process.kill()
                process.wait()
