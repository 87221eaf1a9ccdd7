"""
Black-box Mutation Fuzzing for stdin-driven programs.

This package feeds mutated text to an external program on its standard
input and reports the inputs that make it exit with a non-zero status,
one input per distinct output.

**Key Components:**

1. **Mutators** (`mutators.py`):
   - Catalog of pure ``(data, rng) -> str`` transformations
   - Bracket insertion, character deletion, random ASCII runs, markup, dictionary tokens

2. **Corpus** (`corpus.py`):
   - Seed loading (missing seed degrades to "")
   - Mutation scheduling and single-mutation candidate generation

3. **Harness** (`harness.py`):
   - One shell-wrapped process per candidate, stderr merged into stdout
   - Per-run timeout with process-tree kill

4. **Findings** (`findings.py`):
   - Crash classification, deduplicated by output text

5. **Fuzzer** (`fuzzer.py`) and **Main** (`main.py`):
   - Campaign orchestration, logging, report and command-line interface

**Usage:**
```python
from blindfuzz.fuzzer import Fuzzer

findings = Fuzzer("./target", runs=500, random_seed=1).start()
for output, payload in findings.items():
    print(output, repr(payload))
```
"""

from blindfuzz.fuzzer.fuzzer import Fuzzer
from blindfuzz.fuzzer.findings import FindingSet

__all__ = ['Fuzzer', 'FindingSet']
