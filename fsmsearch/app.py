"""Interactive search front end, and the command that dispatches to the tools."""

from __future__ import annotations

import os
import queue
import sys
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Optional, Protocol, Sequence

from . import nfa_cli
from .filesearch import FileResult, Match, SearchResult, Searcher
from .screen import DOWN, LEFT, RIGHT, UP, Screen
from .trigram import Query, build_index

__all__ = [
    "DisplayState",
    "PAGE_SIZE",
    "RED_ANSI",
    "RESET_ANSI",
    "build_line",
    "compute_state",
    "format_file_lines",
    "format_lines",
    "list_directory",
    "list_file",
    "main",
    "merge_matches",
    "overlap",
    "reduce_matches",
]

RED_ANSI = "\u001b[31m"
RESET_ANSI = "\u001b[0m"
PAGE_SIZE = 10
_MIN_QUERY = 3


@dataclass
class DisplayState:
    """What the search view shows."""

    ready: bool = False
    lines: list[str] = field(default_factory=list)
    total_results: int = 0
    done: bool = False
    target: str = ""
    candidates: int = 0


class _View(Protocol):
    def set_template(self, template: Callable[[DisplayState], str]) -> None: ...

    def set_state(self, state: DisplayState) -> None: ...


def overlap(a: Match, b: Match) -> bool:
    """True if two inclusive ranges share at least one position."""
    return not (b.start > a.end or a.start > b.end)


def merge_matches(a: Match, b: Match) -> Match:
    """The smallest range covering both ``a`` and ``b``."""
    return Match(start=min(a.start, b.start), end=max(a.end, b.end))


def reduce_matches(matches: Iterable[Match]) -> list[Match]:
    """Merge overlapping matches and order them by where they end."""
    reduced: list[Match] = []
    for match in matches:
        index = next((i for i, kept in enumerate(reduced) if overlap(match, kept)), None)
        if index is None:
            reduced.append(match)
        else:
            reduced[index] = merge_matches(match, reduced[index])
    return sorted(reduced, key=lambda m: m.end)


def build_line(content: str, matches: Iterable[Match]) -> str:
    """Highlight ``matches`` in ``content`` and fit it on one screen line."""
    segments: list[str] = []
    last = 0
    for match in reduce_matches(matches):
        segments += [
            content[last : match.start],
            RED_ANSI,
            content[match.start : match.end + 1],
            RESET_ANSI,
        ]
        last = match.end + 1
    segments.append(content[last:])
    line = "".join(segments).replace("\n", " \\n ").strip()
    return line + RESET_ANSI


def format_lines(line_results: Sequence[Sequence[SearchResult]], offset: int) -> list[str]:
    """One numbered, highlighted line per group of results on the same line."""
    return [
        f'{i + 1 + offset}: line-{group[0].line_number}: '
        f'"{build_line(group[0].line_content, [r.match for r in group])}"'
        for i, group in enumerate(line_results)
    ]


def format_file_lines(line_results: Sequence[Sequence[FileResult]], offset: int) -> list[str]:
    """Like ``format_lines``, also naming the file of each line."""
    return [
        f"{i + 1 + offset}: [file:{group[0].file}] line-{group[0].line_number}: "
        f'"{build_line(group[0].line_content, [r.match for r in group])}"'
        for i, group in enumerate(line_results)
    ]


def compute_state(
    query_results: Sequence[Sequence[SearchResult]],
    state: DisplayState,
    offset: int,
    with_files: bool = False,
) -> DisplayState:
    """The state showing one page of results starting at ``offset``."""
    formatter = format_file_lines if with_files else format_lines
    if len(query_results) > PAGE_SIZE:
        lines = formatter(query_results[offset : offset + PAGE_SIZE], offset)
    else:
        lines = formatter(query_results, 0)
    return replace(state, lines=lines, total_results=len(query_results))


def _render_results(state: DisplayState) -> str:
    lines = "".join(f"\n{line}" for line in state.lines)
    total = f"{state.total_results} total results" if state.total_results > PAGE_SIZE else ""
    searching = "" if state.done else "... Searching"
    return f"{lines}\n{total}\n{searching}"


def _render_file_view(state: DisplayState) -> str:
    header = f"Input: {state.target}\n"
    if not state.ready:
        return header + "Enter 3 letters or more to search.\n"
    return header + _render_results(state)


def _render_directory_view(state: DisplayState) -> str:
    header = f"Input: {state.target}\n"
    if not state.ready:
        return header + "Enter 3 letters or more to search."
    return header + f"\nCandidate Files: {state.candidates}\n" + _render_results(state)


# Starts a search for a query: returns the candidate count, if any, and the results.
_Begin = Callable[[str], "tuple[Optional[int], Iterable[SearchResult]]"]


def _listing_loop(
    view: _View,
    inputs: Iterable[str],
    template: Callable[[DisplayState], str],
    with_files: bool,
    begin: _Begin,
) -> DisplayState:
    events: queue.Queue[tuple[str, int, Any]] = queue.Queue()

    def forward() -> None:
        for key in inputs:
            events.put(("input", 0, key))
        events.put(("stop", 0, None))

    def work(generation: int, cancelled: threading.Event, results: Iterable[SearchResult]) -> None:
        for result in results:
            if cancelled.is_set() or result.finished:
                break
            events.put(("result", generation, result))
        if not cancelled.is_set():
            events.put(("done", generation, None))

    threading.Thread(target=forward, daemon=True).start()

    state = DisplayState()
    view.set_template(template)
    view.set_state(state)

    query_results: list[list[SearchResult]] = []
    generation = 0
    cancelled = threading.Event()
    offset = 0
    previous: Optional[tuple[int, str]] = None

    while True:
        kind, tag, payload = events.get()
        if kind == "stop":
            cancelled.set()
            return state

        if kind == "input":
            if payload in (LEFT, RIGHT):
                continue
            if payload == DOWN:
                offset = min(len(query_results) - PAGE_SIZE, offset + 1)
            elif payload == UP:
                offset = max(0, offset - 1)
            else:
                cancelled.set()
                cancelled = threading.Event()
                generation += 1
                state = DisplayState(target=payload)
                offset = 0
                previous = None
                query_results = []
                if len(payload) >= _MIN_QUERY:
                    candidates, results = begin(payload)
                    state.ready = True
                    if candidates is not None:
                        state.candidates = candidates
                    threading.Thread(
                        target=work, args=(generation, cancelled, results), daemon=True
                    ).start()
                view.set_state(state)
                continue
            state = compute_state(query_results, state, offset, with_files)
            view.set_state(state)
            continue

        if tag != generation:
            continue
        if kind == "done":
            state = replace(state, done=True)
        else:
            key = (payload.line_number, getattr(payload, "file", ""))
            if query_results and key == previous:
                query_results[-1].append(payload)
            else:
                query_results.append([payload])
            previous = key
            state = compute_state(query_results, state, offset, with_files)
        view.set_state(state)


def list_file(path: str, screen: _View, inputs: Iterable[str]) -> DisplayState:
    """Search a single file interactively until ``inputs`` runs out.

    Returns the last state shown.
    """
    searcher = Searcher(path)
    searcher.load_in_memory()
    searcher.load_lines_in_memory()
    return _listing_loop(
        screen,
        inputs,
        _render_file_view,
        False,
        lambda query: (None, searcher.search_regex(query)),
    )


def list_directory(path: str, screen: _View, inputs: Iterable[str]) -> DisplayState:
    """Search the files of a directory interactively, using a trigram index.

    Returns the last state shown.
    """
    searcher = Searcher(path)
    index = build_index(path, False)

    def begin(query: str) -> tuple[Optional[int], Iterable[SearchResult]]:
        candidates = index.lookup(Query(query))
        return len(candidates), searcher.iter_directory_regex(query, candidates)

    return _listing_loop(screen, inputs, _render_directory_view, True, begin)


def _interactive(path: str) -> None:
    keys: queue.Queue[Optional[str]] = queue.Queue()
    screen = Screen(sys.stdout, keys.put)
    listing = list_directory if os.path.isdir(path) else list_file
    screen.run(sys.stdin, lambda: keys.put(None))
    try:
        listing(path, screen, iter(keys.get, None))
    finally:
        screen.stop()


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Run ``v10 ...`` (the machine drawing tool) or ``search PATH``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] == "v10":
        nfa_cli.main(args[1:])
        return
    if len(args) == 2 and args[0] == "search":
        _interactive(args[1])
        return
    raise ValueError(f"command '{' '.join(args)}' not found")