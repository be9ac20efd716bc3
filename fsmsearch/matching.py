"""Finds every match of a state machine within a text, line by line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Protocol

from .fsm import Status


class Machine(Protocol):
    """Anything that can be fed characters and reset."""

    def next(self, char: str) -> Status: ...

    def reset(self) -> None: ...


@dataclass(frozen=True)
class MatchResult:
    """A match on a 1-based line; start and end are inclusive column offsets."""

    line: int
    start: int
    end: int


def iter_matches(machine: Machine, text: str) -> Iterator[MatchResult]:
    """Yield matches of ``machine`` in ``text``; matches never span lines."""
    line = 1
    start = 0
    end = 0
    line_start = 0
    has_rerun_fail = False
    has_started_match = False
    last_success = 0

    while end < len(text):
        char = text[end]
        if char == "\n":
            if has_started_match:
                yield MatchResult(line, start - line_start, last_success - line_start)
                has_started_match = False
            machine.reset()
            line += 1
            end += 1
            line_start = end
            start = end
            continue

        status = machine.next(char)
        if status is Status.SUCCESS:
            has_started_match = True
            last_success = end
            end += 1
        elif status is Status.FAIL:
            if has_started_match:
                yield MatchResult(line, start - line_start, last_success - line_start)
                has_started_match = False
            machine.reset()
            # Rerun the failing character once: it may begin another match.
            if not has_rerun_fail:
                has_rerun_fail = True
            else:
                end += 1
                has_rerun_fail = False
            start = end
        else:
            end += 1

    if has_started_match:
        yield MatchResult(line, start - line_start, last_success - line_start)

    if not text and machine.next("\x00") is Status.SUCCESS:
        yield MatchResult(0, 0, 0)


def find_all(machine: Machine, text: str) -> list[tuple[int, int]]:
    """Return ``(start, end)`` pairs of every match."""
    return [(result.start, result.end) for result in iter_matches(machine, text)]


def find_all_with_lines(machine: Machine, text: str) -> list[MatchResult]:
    """Return every match together with its line number."""
    return list(iter_matches(machine, text))