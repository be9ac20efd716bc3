"""Regex search over a single file or over the files of a directory."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .compiler import compile_regex
from .fsm import Runner
from .matching import find_all_with_lines, iter_matches

CHAR_PADDING = 50


@dataclass(frozen=True)
class Match:
    """Inclusive character offsets of a match within its line."""

    start: int = 0
    end: int = 0


@dataclass
class SearchResult:
    """One match in a file, or the final marker when ``finished`` is set."""

    line_number: int = 0
    line_content: str = ""
    count: int = 0
    query: str = ""
    finished: bool = False
    match: Match = field(default_factory=Match)


@dataclass
class FileResult(SearchResult):
    """A search result that also names the file it was found in."""

    file: str = ""


def _read_text(path: str) -> str:
    with open(path, "rb") as handle:
        return handle.read().decode("utf-8", errors="replace")


def _line(lines: list[str], number: int) -> str:
    if number < 1:
        raise IndexError(f"no line {number} in the searched text")
    return lines[number - 1]


class Searcher:
    """Searches a file, or the directory, at ``file_path``."""

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        self.content = ""
        self.lines: list[str] = []

    def load_in_memory(self) -> None:
        """Read the whole file into ``content``."""
        self.content = _read_text(self.file_path)

    def load_lines_in_memory(self) -> None:
        """Append the file's lines to ``lines``."""
        self.lines.extend(_read_text(self.file_path).split("\n"))

    def search_regex(self, regex: str) -> Iterator[SearchResult]:
        """Yield matches in the loaded content, then a finished marker."""
        runner = Runner(compile_regex(regex))
        for count, result in enumerate(iter_matches(runner, self.content)):
            yield SearchResult(
                line_number=result.line,
                line_content=_line(self.lines, result.line),
                count=count,
                query=regex,
                match=Match(result.start, result.end),
            )
        yield SearchResult(finished=True)

    def iter_directory_regex(
        self, regex: str, files: Iterable[str]
    ) -> Iterator[FileResult]:
        """Yield matches in each of ``files``, found within this directory."""
        for file in files:
            yield from self.search_file(regex, os.path.basename(file))

    def search_directory_regex(self, regex: str) -> list[FileResult]:
        """Search every regular file directly inside the directory."""
        with os.scandir(self.file_path) as entries:
            names = sorted(entry.name for entry in entries if not entry.is_dir())
        results: list[FileResult] = []
        for name in names:
            results.extend(self.search_file(regex, name))
        return results

    def search_file(self, regex: str, file_name: str) -> list[FileResult]:
        """Search the file ``file_name`` inside the directory."""
        text = _read_text(os.path.join(self.file_path, file_name))
        runner = Runner(compile_regex(regex))
        lines = text.split("\n")
        return [
            FileResult(
                line_number=result.line,
                line_content=_line(lines, result.line),
                count=count,
                query=regex,
                match=Match(result.start, result.end),
                file=file_name,
            )
            for count, result in enumerate(find_all_with_lines(runner, text))
        ]