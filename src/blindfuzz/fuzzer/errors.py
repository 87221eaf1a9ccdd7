"""
Exception classes for the fuzzer.

Only TargetNotFound aborts a campaign. HarnessError is raised for a
single candidate and handled by the campaign loop, which moves on to the
next candidate.
"""


class FuzzerError(Exception):
    """Base class for all fuzzer errors."""
    pass


class TargetNotFound(FuzzerError):
    """The target command does not exist under the working directory."""

    def __init__(self, command, working_directory="."):
        self.command = command
        self.working_directory = working_directory
        super().__init__(
            "Could not find command '{}' in '{}'.".format(command, working_directory))


class EmptyCatalogError(FuzzerError, ValueError):
    """Mutations were scheduled against an empty mutator catalog."""
    pass


class HarnessError(FuzzerError):
    """Spawning the target or talking to its pipes failed for one candidate."""
    pass
