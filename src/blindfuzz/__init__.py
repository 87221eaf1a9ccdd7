"""blindfuzz - black-box mutation fuzzer for stdin-driven programs.
"""

__version__ = "0.1.0"

from .fuzzer.fuzzer import Fuzzer
from .fuzzer.findings import FindingSet
from .fuzzer.harness import RunResult, execute

__all__ = [
    "Fuzzer",
    "FindingSet",
    "RunResult",
    "execute",
    "__version__",
]
