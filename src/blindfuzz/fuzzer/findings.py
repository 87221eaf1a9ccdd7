"""
Result classification and crash deduplication.

Any non-zero exit within the time limit is a crash, whatever the reason
(signal, explicit failure code, ...). Crashes are deduplicated by their
captured output text alone: the first input that produced a given output
is kept, later ones with the same output are dropped. Runs that hit the
timeout are kept apart, deduplicated the same way.
"""

from collections import OrderedDict


class FindingSet(object):
    """
    Distinct crash outputs, each with one reproducing input.

    Attributes:
        crashes: OrderedDict output text -> first crashing input
        hangs: OrderedDict output text -> first input that timed out
        runs: Number of results classified so far
    """

    def __init__(self):
        self.crashes = OrderedDict()
        self.hangs = OrderedDict()
        self.runs = 0

    def record(self, result, candidate):
        """
        Classify one run.

        Args:
            result: RunResult of the run
            candidate: Input that produced it

        Returns:
            True if a new crash or hang signature was stored
        """
        self.runs += 1
        if result.timed_out:
            bucket = self.hangs
        elif result.exit_status != 0:
            bucket = self.crashes
        else:
            return False
        if result.output in bucket:
            return False
        bucket[result.output] = candidate
        return True

    def items(self):
        return self.crashes.items()

    def __len__(self):
        return len(self.crashes)

    def __contains__(self, output):
        return output in self.crashes

    def __getitem__(self, output):
        return self.crashes[output]

    def __iter__(self):
        return iter(self.crashes)

    def as_dict(self):
        return dict(self.crashes)
