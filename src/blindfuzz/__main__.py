"""Allow ``python -m blindfuzz``."""

import sys

from blindfuzz.fuzzer.main import main

if __name__ == "__main__":
    sys.exit(main())
