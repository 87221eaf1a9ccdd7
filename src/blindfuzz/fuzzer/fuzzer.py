"""
Campaign orchestrator.

This module provides the Fuzzer class that runs one fuzzing campaign
against an external program. The target is treated as a black box: it
reads a payload from stdin and terminates, and a non-zero exit status is
a crash.

**Campaign phases:**
1. Validate: the target must exist under the working directory (fatal otherwise)
2. Load seed: read the seed file, falling back to an empty seed
3. Plan: draw ``runs`` mutations from the catalog
4. Campaign: run the seed, then every candidate, one process at a time
5. Report: print each distinct crash output with its reproducing input

A failure to run a single candidate is logged and the campaign moves on;
only a missing target stops it.
"""

import logging
import os
import random
import time

import psutil

from blindfuzz.fuzzer import harness
from blindfuzz.fuzzer.corpus import Corpus, load_seed
from blindfuzz.fuzzer.dictionary import Dictionary
from blindfuzz.fuzzer.errors import HarnessError, TargetNotFound
from blindfuzz.fuzzer.findings import FindingSet
from blindfuzz.fuzzer.mutators import DEFAULT_MAX_STRING_LENGTH, build_catalog
from blindfuzz.util import formatting, shell
from blindfuzz.util.console import Console

# Time window for periodic statistics logging (in seconds)
SAMPLING_WINDOW = 5

DEFAULT_SEED_PATH = "sample.html"
DEFAULT_RUNS = 1000
DEFAULT_TIMEOUT = 30

# Characters of a payload shown in log lines
LOG_PAYLOAD_LIMIT = 80


class Fuzzer(object):
    """
    Black-box mutation fuzzer for programs reading standard input.

    Attributes:
        command: Target command string, run through the host shell
        working_directory: Directory the target is looked up and run in
        seed_path: Path to the seed file
        runs: Number of mutated candidates (the seed run comes on top)
        timeout: Per-run timeout in seconds, None to wait forever
        rng: random.Random driving scheduling and every mutation
        catalog: Tuple of Mutator entries
        console: Console for phase markers and the report
        findings: FindingSet of the last campaign
    """
    def __init__(self,
                 command,
                 seed_path=DEFAULT_SEED_PATH,
                 runs=DEFAULT_RUNS,
                 timeout=DEFAULT_TIMEOUT,
                 max_string_length=DEFAULT_MAX_STRING_LENGTH,
                 markup=False,
                 random_character=False,
                 dict_path=None,
                 random_seed=None,
                 working_directory=".",
                 console=None):
        """
        Initialize a fuzzer.

        Args:
            command: Target command (must exist relative to working_directory)
            seed_path: Seed file (default: sample.html)
            runs: Number of mutated candidates (default: 1000)
            timeout: Per-run timeout in seconds; None or 0 disables it (default: 30)
            max_string_length: Bound for insert-random-string (default: 20)
            markup: Add the insert-markup mutator
            random_character: Add the insert-random-character mutator
            dict_path: Token dictionary file (optional)
            random_seed: Seed for the random source, for reproducible campaigns
            working_directory: Directory the target lives and runs in
            console: Console for output (default: stdout)
        """
        if runs < 0:
            raise ValueError("runs must not be negative, got %d" % runs)
        if timeout is not None and timeout < 0:
            raise ValueError("timeout must not be negative, got %s" % timeout)
        self.command = command
        self.working_directory = working_directory
        self.seed_path = seed_path
        self.runs = runs
        self.timeout = timeout or None
        self.rng = random.Random(random_seed)
        self.catalog = build_catalog(max_string_length=max_string_length,
                                     markup=markup,
                                     random_character=random_character,
                                     dictionary=Dictionary(dict_path))
        self.console = console if console is not None else Console()
        self.invocation = shell.resolve_invocation(command)
        self.findings = FindingSet()
        self._total_executions = 0
        self._executions_in_sample = 0
        self._last_sample_time = time.time()
        self._start_time = None

    def validate(self):
        """
        Check that the target exists before anything is spawned.

        Raises:
            TargetNotFound: if the command is not found under working_directory
        """
        if not shell.command_exists(self.command, self.working_directory):
            raise TargetNotFound(self.command, self.working_directory)

    def load_seed(self):
        return load_seed(os.path.join(self.working_directory, self.seed_path))

    def log_stats(self, log_type):
        """
        Log campaign statistics.

        Args:
            log_type: "NEW" for a new finding, "PULSE" for periodic, "DONE" at the end
        """
        rss = psutil.Process(os.getpid()).memory_info().rss

        end_time = time.time()
        window = end_time - self._last_sample_time
        execs_per_second = int(self._executions_in_sample / window) if window > 0 else 0
        self._last_sample_time = end_time
        self._executions_in_sample = 0
        logging.info('#{} {}     crashes: {} hangs: {} exec/s: {} rss: {}'.format(
            self._total_executions, log_type, len(self.findings), len(self.findings.hangs),
            execs_per_second, formatting.memorySize(rss).strip()))

    def run_one(self, candidate):
        """
        Execute and classify a single candidate.

        Returns:
            RunResult, or None if the candidate could not be run
        """
        try:
            result = harness.execute(self.invocation, candidate,
                                     cwd=self.working_directory, timeout=self.timeout)
        except HarnessError as e:
            logging.warning("Exception: %s (input: %s)", e,
                            formatting.escapePayload(candidate, LOG_PAYLOAD_LIMIT))
            return None
        finally:
            self._total_executions += 1
            self._executions_in_sample += 1

        if self.findings.record(result, candidate):
            if result.timed_out:
                logging.info("timeout reached after %ss for input: %s", self.timeout,
                             formatting.escapePayload(candidate, LOG_PAYLOAD_LIMIT))
            else:
                logging.info("exit status %d for input: %s", result.exit_status,
                             formatting.escapePayload(candidate, LOG_PAYLOAD_LIMIT))
            self.log_stats("NEW")
        elif (time.time() - self._last_sample_time) > SAMPLING_WINDOW:
            self.log_stats("PULSE")
        return result

    def run_campaign(self, candidates):
        """
        Run every candidate in order, one process at a time.

        Args:
            candidates: Iterable of input strings

        Returns:
            The FindingSet, which is also kept on ``self.findings``
        """
        self.findings = FindingSet()
        self._total_executions = 0
        self._executions_in_sample = 0
        self._start_time = self._last_sample_time = time.time()
        for candidate in candidates:
            self.run_one(candidate)
        self.log_stats("DONE")
        logging.debug("campaign took %s",
                      formatting.elapsedTime(time.time() - self._start_time).strip())
        return self.findings

    def report(self, findings=None):
        """Print every distinct crash output and hang with its reproducing input."""
        if findings is None:
            findings = self.findings
        out = self.console
        out.output("Found {} distinct crash(es) in {} run(s).".format(len(findings), findings.runs))
        for n, (output, candidate) in enumerate(findings.items(), 1):
            out.output("==== crash {} ====".format(n))
            out.output("output:")
            for line in output.splitlines() or [""]:
                out.output(line, 1)
            out.output("input:")
            out.output(formatting.escapePayload(candidate), 1)
        for n, (output, candidate) in enumerate(findings.hangs.items(), 1):
            out.output("==== hang {} ====".format(n))
            out.output("input:")
            out.output(formatting.escapePayload(candidate), 1)

    def start(self):
        """
        Run a whole campaign: validate, load seed, plan, run, report.

        Returns:
            FindingSet of the campaign

        Raises:
            TargetNotFound: if the target does not exist
        """
        with self.console.scope("validate"):
            self.validate()

        self.console.output("Command: {}".format(self.invocation))

        with self.console.scope("load seed"):
            seed = self.load_seed()

        with self.console.scope("plan"):
            corpus = Corpus(seed, self.catalog, self.rng)
            candidates = corpus.candidates(self.runs)
        logging.info("#0 READ seed: %d chars, candidates: %d, mutators: %s",
                     len(seed), len(candidates), ", ".join(m.name for m in self.catalog))

        with self.console.scope("campaign"):
            findings = self.run_campaign(candidates)

        with self.console.scope("report"):
            self.report(findings)
        return findings
