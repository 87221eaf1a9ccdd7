from __future__ import annotations

import sys
import time

import pytest

from blindfuzz.fuzzer.errors import HarnessError
from blindfuzz.fuzzer.harness import RunResult, execute, normalize_output
from blindfuzz.util.shell import resolve_invocation

pytestmark = pytest.mark.skipif(sys.platform.startswith("win"), reason="targets are /bin/sh scripts")


def run(command, payload, tmp_path, **kwargs):
    return execute(resolve_invocation(command), payload, cwd=str(tmp_path), **kwargs)


def test_clean_exit(make_target, tmp_path):
    cmd = make_target("cat >/dev/null\nexit 0\n")
    assert run(cmd, "<a>", tmp_path) == RunResult(0, "")


def test_crash_status_and_output(double_bracket_target, tmp_path):
    result = run(double_bracket_target, "<<a>", tmp_path)
    assert result.exit_status == 1
    assert result.output == "bad\n"
    assert result.crashed
    assert not result.timed_out


def test_payload_is_delivered_and_stdin_closed(make_target, tmp_path):
    # cat only returns once stdin reaches end-of-input
    cmd = make_target("cat\nexit 3\n")
    result = run(cmd, "line one\nline two", tmp_path, timeout=10)
    assert result.exit_status == 3
    assert result.output == "line one\nline two\n"


def test_stderr_is_merged(make_target, tmp_path):
    cmd = make_target("cat >/dev/null\necho out\necho err >&2\nexit 4\n")
    result = run(cmd, "", tmp_path)
    assert result.exit_status == 4
    assert sorted(result.output.splitlines()) == ["err", "out"]


def test_line_endings_are_normalized(make_target, tmp_path):
    cmd = make_target("cat >/dev/null\nprintf 'a\\r\\nb\\rc'\nexit 1\n")
    assert run(cmd, "", tmp_path).output == "a\nb\nc\n"


def test_control_characters_reach_the_target(make_target, tmp_path):
    cmd = make_target("wc -c | tr -d ' '\nexit 1\n")
    assert run(cmd, "\x00\x01\x7f", tmp_path).output == "3\n"


def test_large_output_before_reading_input(make_target, tmp_path):
    # more output than a pipe buffer holds, written before stdin is read
    cmd = make_target("""
        i=0
        while [ $i -lt 2000 ]; do
          echo "0123456789012345678901234567890123456789012345678901234567890123456789"
          i=$((i + 1))
        done
        cat >/dev/null
        exit 2
    """)
    result = run(cmd, "x" * 500000, tmp_path, timeout=30)
    assert result.exit_status == 2
    assert len(result.output.splitlines()) == 2000


def test_target_ignoring_stdin(make_target, tmp_path):
    cmd = make_target("echo early\nexit 5\n")
    result = run(cmd, "y" * 500000, tmp_path, timeout=30)
    assert result == RunResult(5, "early\n")


def test_timeout_kills_the_target(make_target, tmp_path):
    cmd = make_target("echo started\nsleep 30\n")
    began = time.monotonic()
    result = run(cmd, "", tmp_path, timeout=0.5)
    assert time.monotonic() - began < 20
    assert result.timed_out
    assert not result.crashed
    assert result.exit_status != 0
    assert result.output == "started\n"


def test_timeout_reports_the_killed_status(make_target, tmp_path):
    cmd = make_target("exec sleep 30\n")
    result = run(cmd, "", tmp_path, timeout=0.5)
    assert result.timed_out
    assert result.exit_status != 0


def test_background_child_does_not_turn_crash_into_hang(make_target, tmp_path):
    # the target exits at once, its background child keeps stdout open
    cmd = make_target("echo bad\nsleep 8 &\nexit 1\n")
    began = time.monotonic()
    result = run(cmd, "", tmp_path, timeout=0.5)
    assert time.monotonic() - began < 5
    assert result == RunResult(1, "bad\n", timed_out=False)
    assert result.crashed


def test_command_not_found_is_a_crash(tmp_path):
    # the shell itself reports the missing program
    result = run("./does-not-exist", "", tmp_path)
    assert result.exit_status == 127
    assert result.output


def test_spawn_failure_raises_harness_error(tmp_path):
    with pytest.raises(HarnessError):
        execute([str(tmp_path / "no-such-interpreter"), "-c", "true"], "", cwd=str(tmp_path))


def test_missing_working_directory_raises_harness_error(tmp_path):
    with pytest.raises(HarnessError):
        execute(resolve_invocation("true"), "", cwd=str(tmp_path / "gone"))


def test_normalize_output():
    assert normalize_output(b"") == ""
    assert normalize_output(b"x") == "x\n"
    assert normalize_output(b"x\r\n\r\ny") == "x\n\ny\n"
    assert normalize_output(b"\xffok\n") == "\ufffdok\n"
