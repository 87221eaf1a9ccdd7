"""
Execution harness: run one candidate against the target process.

**Lifecycle of one run:**
1. Spawn the target through the host shell, stdin and stdout piped,
   stderr merged into stdout
2. Write the whole payload to stdin and close it, so a target reading
   until end-of-input can finish
3. Drain stdout while waiting for the exit status
4. Release the process: pipes closed and child reaped on every path

Output is drained concurrently with the write (``Popen.communicate``), so
a target that prints more than a pipe buffer before reading its input
cannot deadlock the harness.

**Timeouts:**
When a timeout is given and the target overruns it, its whole process
group is killed (the shell wrapper means the real target is usually a
grandchild) and the run is reported with ``timed_out`` set and the
killed child's status. Background children left holding the output pipe
after the target exited are killed too, without turning the run into a hang.
"""

import logging
import os
import signal
import subprocess
from dataclasses import dataclass

import psutil

from blindfuzz.fuzzer.errors import HarnessError

ENCODING = "utf-8"

# Seconds allowed for killed processes to go away and release the pipe
KILL_GRACE = 5

POSIX = os.name == "posix"


@dataclass(frozen=True)
class RunResult:
    """Outcome of one target run."""
    exit_status: int
    output: str = ""
    timed_out: bool = False

    @property
    def crashed(self):
        """Non-zero exit within the time limit."""
        return not self.timed_out and self.exit_status != 0


def normalize_output(raw):
    """
    Decode captured output and terminate every line with "\\n".

    "\\r\\n" and bare "\\r" count as line breaks; a final line without a
    terminator gets one. Empty output stays empty.
    """
    text = raw.decode(ENCODING, errors="replace")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if text and not text.endswith("\n"):
        text += "\n"
    return text


def kill_descendants(pid):
    """Kill every process still attached below ``pid``, ignoring ones already gone."""
    try:
        procs = psutil.Process(pid).children(recursive=True)
    except psutil.NoSuchProcess:
        return
    for child in procs:
        try:
            child.kill()
        except psutil.NoSuchProcess:
            pass
    psutil.wait_procs(procs, timeout=KILL_GRACE)


def kill_target(proc):
    """
    Kill the target and everything it started, then reap it.

    On POSIX the target leads its own session, so killing its process
    group also reaches background children that were reparented once the
    target itself exited. The direct child is reaped through ``proc`` only,
    which keeps its exit status.
    """
    if POSIX:
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            pass
    # children that moved to another process group, and everything on Windows
    kill_descendants(proc.pid)
    if proc.poll() is None:
        proc.kill()
    proc.wait()


def _drain(proc):
    """Collect what is left in the output pipe once the target is dead."""
    try:
        out, _ = proc.communicate(timeout=KILL_GRACE)
    except subprocess.TimeoutExpired:
        # a descendant left the process group and still holds the pipe
        logging.warning("output of pid %d still open %ss after kill, dropping it",
                        proc.pid, KILL_GRACE)
        return b""
    return out or b""


def execute(invocation, payload, cwd=".", timeout=None):
    """
    Run the target once with ``payload`` on its standard input.

    A run only counts as timed out when the target itself was still
    running at the deadline. A target that exited while a background child
    kept its output open is reported with its own exit status, after the
    leftovers are killed.

    Args:
        invocation: Full argv, e.g. ['sh', '-c', './target']
        payload: Candidate input text
        cwd: Working directory of the target
        timeout: Seconds to wait for termination, None to wait forever

    Returns:
        RunResult for this run

    Raises:
        HarnessError: the target could not be spawned or its pipes failed
    """
    data = payload.encode(ENCODING, errors="surrogateescape")
    try:
        with subprocess.Popen(invocation,
                              cwd=cwd,
                              stdin=subprocess.PIPE,
                              stdout=subprocess.PIPE,
                              stderr=subprocess.STDOUT,
                              start_new_session=POSIX) as proc:
            try:
                out, _ = proc.communicate(input=data, timeout=timeout)
            except subprocess.TimeoutExpired:
                timed_out = proc.poll() is None
                if timed_out:
                    logging.debug("pid %d exceeded %ss, killing", proc.pid, timeout)
                else:
                    logging.debug("pid %d exited with %d but its output is still open, killing leftovers",
                                  proc.pid, proc.returncode)
                kill_target(proc)
                return RunResult(proc.returncode, normalize_output(_drain(proc)), timed_out=timed_out)
            except BaseException:
                kill_target(proc)
                raise
            return RunResult(proc.returncode, normalize_output(out))
    except OSError as e:
        raise HarnessError("running {}: {}".format(invocation, e)) from e
