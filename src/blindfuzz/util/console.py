"""
Console output with timed phase scopes.

The orchestrator brackets its phases (validate, load seed, plan,
campaign, report) with ``Console.scope``. In verbose mode each phase
prints a begin marker and an end marker with its elapsed time; report
lines written through ``output`` always appear.
"""

import contextlib
import sys
import time

from blindfuzz.util import formatting


class Console(object):
    """
    Report writer with nested, timed phase scopes.

    Attributes:
        out: Output stream (default: sys.stdout)
        verbose: Whether phase markers are printed
    """

    def __init__(self, out=None, verbose=False):
        if out is None:
            out = sys.stdout
        self.out = out
        self.verbose = verbose
        # (name, start time) of every open phase, outermost first
        self._phases = []

    @property
    def depth(self):
        """Number of phases currently open."""
        return len(self._phases)

    def path(self):
        """Formatted path of the open phases, e.g. "[ campaign | report ]"."""
        return "[ %s ]" % " | ".join(name for name, _ in self._phases)

    def begin(self, name):
        self._phases.append((name, time.perf_counter()))
        self.verbose_output("begin %s" % self.path(), 0)

    def end(self):
        _, started = self._phases[-1]
        elapsed = time.perf_counter() - started
        self.verbose_output("end   %s %s" % (self.path(), formatting.elapsedTime(elapsed)), 0)
        self._phases.pop()

    @contextlib.contextmanager
    def scope(self, name):
        """
        Time a phase for the duration of a ``with`` block.

        Example:
            with console.scope("campaign"):
                ...
        """
        self.begin(name)
        try:
            yield self
        finally:
            self.end()

    def output(self, s, tabs=0):
        """
        Write a line to the console.

        Args:
            s: Text to write (a trailing newline is added)
            tabs: Number of tab characters to indent
        """
        self.out.write("\t" * tabs + s + "\n")

    def verbose_output(self, s, tabs=1):
        """Output only when verbose mode is enabled."""
        if self.verbose:
            self.output(s, tabs)
