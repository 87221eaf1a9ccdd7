from __future__ import annotations

import stat
import textwrap
from pathlib import Path
from typing import Callable, Iterable

import pytest


class ScriptedRandom:
    """
    Stand-in for random.Random that replays fixed draws.

    randint/randrange return the next scripted integer as is; choice
    returns the element at the next scripted index.
    """

    def __init__(self, draws: Iterable[int]):
        self._draws = list(draws)

    def _next(self) -> int:
        assert self._draws, "ran out of scripted draws"
        return self._draws.pop(0)

    def randint(self, a: int, b: int) -> int:
        value = self._next()
        assert a <= value <= b, (a, value, b)
        return value

    def randrange(self, n: int) -> int:
        value = self._next()
        assert 0 <= value < n, (value, n)
        return value

    def choice(self, seq):
        return seq[self._next()]

    @property
    def exhausted(self) -> bool:
        return not self._draws


@pytest.fixture()
def scripted():
    return ScriptedRandom


@pytest.fixture()
def make_target(tmp_path: Path) -> Callable[..., str]:
    """Write an executable /bin/sh script into tmp_path and return its command."""

    def _make(body: str, name: str = "target.sh") -> str:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + textwrap.dedent(body).lstrip("\n"), encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return "./" + name

    return _make


# Exits 1 printing "bad" when stdin contains "<<", 0 otherwise.
DOUBLE_BRACKET_TARGET = """
input=$(cat)
case "$input" in
  *"<<"*) echo bad; exit 1 ;;
esac
exit 0
"""


@pytest.fixture()
def double_bracket_target(make_target):
    return make_target(DOUBLE_BRACKET_TARGET)
