"""
Command-line interface for blindfuzz.

Usage:
```bash
blindfuzz ./target
blindfuzz "./parser --strict" --seed-file sample.html --runs 5000 --timeout 10
```

Exit status: 0 when no crash was found, 76 when at least one was,
1 when the target does not exist, 2 on usage errors.
"""

import argparse
import logging
import sys

from blindfuzz import __version__
from blindfuzz.fuzzer.errors import TargetNotFound
from blindfuzz.fuzzer.fuzzer import (DEFAULT_RUNS, DEFAULT_SEED_PATH, DEFAULT_TIMEOUT,
                                     Fuzzer)
from blindfuzz.fuzzer.mutators import DEFAULT_MAX_STRING_LENGTH
from blindfuzz.util.console import Console

# Exit code when the campaign found crashes
CRASH_EXIT_CODE = 76


def build_parser():
    parser = argparse.ArgumentParser(
        prog="blindfuzz",
        description="Black-box mutation fuzzer for programs reading standard input")
    parser.add_argument('command', type=str,
                        help="command to fuzz, relative to the current directory; run through the host shell")
    parser.add_argument('--version', action='version', version='blindfuzz %s' % __version__)
    parser.add_argument('--seed-file', type=str, default=DEFAULT_SEED_PATH,
                        help='seed input file (default: %(default)s); a missing file means an empty seed')
    parser.add_argument('--runs', type=int, default=DEFAULT_RUNS,
                        help='number of mutated inputs to run after the seed (default: %(default)s)')
    parser.add_argument('--timeout', type=float, default=DEFAULT_TIMEOUT,
                        help='seconds before a run is killed and reported as a hang, 0 to wait forever (default: %(default)s)')
    parser.add_argument('--max-string-length', type=int, default=DEFAULT_MAX_STRING_LENGTH,
                        help='longest run inserted by insert-random-string (default: %(default)s)')
    parser.add_argument('--markup', action='store_true',
                        help='also insert HTML fragments such as <div> and </script>')
    parser.add_argument('--random-character', action='store_true',
                        help='also insert single random ASCII characters')
    parser.add_argument('--dict', type=str, help='dictionary file with tokens to insert')
    parser.add_argument('--random-seed', type=int,
                        help='seed for the random source, to replay a campaign')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging and phase timing')
    return parser


# Root-logger handler installed by configure_logging
_log_handler = None


def configure_logging(verbose=False):
    """Log to stdout through the root logger, installing the handler once."""
    global _log_handler
    root = logging.getLogger()
    if _log_handler is None:
        _log_handler = logging.StreamHandler(sys.stdout)
        root.addHandler(_log_handler)
    else:
        _log_handler.setStream(sys.stdout)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def main(argv=None):
    """
    Parse arguments, run one campaign and report it.

    Returns:
        int: process exit status
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    if args.runs < 0:
        print("Error: --runs must not be negative", file=sys.stderr)
        return 1
    if args.timeout < 0:
        print("Error: --timeout must not be negative", file=sys.stderr)
        return 1
    if args.max_string_length < 1:
        print("Error: --max-string-length must be at least 1", file=sys.stderr)
        return 1

    fuzzer = Fuzzer(args.command,
                    seed_path=args.seed_file,
                    runs=args.runs,
                    timeout=args.timeout,
                    max_string_length=args.max_string_length,
                    markup=args.markup,
                    random_character=args.random_character,
                    dict_path=args.dict,
                    random_seed=args.random_seed,
                    console=Console(verbose=args.verbose))
    try:
        findings = fuzzer.start()
    except TargetNotFound as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1
    return CRASH_EXIT_CODE if len(findings) else 0


if __name__ == '__main__':
    sys.exit(main())
