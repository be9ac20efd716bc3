"""Trigram index over the files of a directory, used to pick search candidates."""

from __future__ import annotations

import itertools
import json
import os
from dataclasses import dataclass, field
from typing import Protocol

_PIPE = "|"


def intersect_pair(left: list[int], right: list[int]) -> list[int]:
    """Intersect two sorted lists without duplicates, keeping the result sorted."""
    result: list[int] = []
    if not left or not right:
        return result
    a = b = 0
    while a < len(left) and b < len(right):
        if left[a] == right[b]:
            result.append(left[a])
        if left[a] > right[b]:
            b += 1
        else:
            a += 1
    return result


def union_pair(left: list[int], right: list[int]) -> list[int]:
    """Union two sorted lists without duplicates, keeping the result sorted."""
    if not left:
        return list(right)
    if not right:
        return list(left)
    result: list[int] = []
    a = b = 0
    while a < len(left) and b < len(right):
        if left[a] == right[b]:
            result.append(left[a])
            a += 1
            b += 1
        elif left[a] > right[b]:
            result.append(right[b])
            b += 1
        else:
            result.append(left[a])
            a += 1
    result.extend(left[a:])
    result.extend(right[b:])
    return result


class _Queryable(Protocol):
    def lookup(self, indexer: Indexer) -> list[int]: ...


class _Everything:
    """Matches every indexed file; used when a piece is too short to filter on."""

    def lookup(self, indexer: Indexer) -> list[int]:
        return list(range(len(indexer.file_map)))


@dataclass(frozen=True)
class _Trigram:
    value: str

    def lookup(self, indexer: Indexer) -> list[int]:
        return list(indexer.trigram_to_files.get(self.value, []))


@dataclass(frozen=True)
class _Concatenation:
    """Both parts must be present: the candidates are intersected."""

    first: _Queryable
    second: _Queryable

    def lookup(self, indexer: Indexer) -> list[int]:
        if isinstance(self.first, _Everything):
            return self.second.lookup(indexer)
        if isinstance(self.second, _Everything):
            return self.first.lookup(indexer)
        return intersect_pair(self.first.lookup(indexer), self.second.lookup(indexer))


@dataclass(frozen=True)
class _Alternation:
    """Either part may be present: the candidates are united."""

    first: _Queryable
    second: _Queryable

    def lookup(self, indexer: Indexer) -> list[int]:
        if isinstance(self.first, _Everything):
            return self.first.lookup(indexer)
        if isinstance(self.second, _Everything):
            return self.second.lookup(indexer)
        return union_pair(self.first.lookup(indexer), self.second.lookup(indexer))


def _compile(expression: str) -> _Queryable:
    if len(expression) < 3:
        return _Everything()
    if len(expression) == 3:
        return _Trigram(expression)
    if _PIPE in expression:
        left, right = expression.split(_PIPE, 1)
        return _Alternation(_compile(left), _compile(right))
    return _Concatenation(_compile(expression[:3]), _compile(expression[1:]))


class Query:
    """A trigram query compiled from a search expression.

    Concatenated text intersects the files holding each trigram; ``|``
    unites the candidates of its two sides.
    """

    def __init__(self, expression: str) -> None:
        self.expression = expression
        self._root = _compile(expression)

    def lookup(self, indexer: Indexer) -> list[int]:
        """Indices of the candidate files in ``indexer``."""
        return self._root.lookup(indexer)


@dataclass
class Indexer:
    """Maps each trigram to the sorted indices of the files containing it."""

    file_map: list[str] = field(default_factory=list)
    trigram_to_files: dict[str, list[int]] = field(default_factory=dict)

    def lookup(self, query: Query) -> list[str]:
        """Paths of the files that may match ``query``."""
        return [self.file_map[index] for index in query.lookup(self)]

    def _read_directory(self, dir_path: str) -> None:
        with os.scandir(dir_path) as entries:
            names = sorted(entry.name for entry in entries if not entry.is_dir())
        self.file_map.extend(os.path.join(dir_path, name) for name in names)

    def _index_text(self, text: str, file_index: int) -> None:
        chars = iter(text)
        while True:
            trigram = "".join(itertools.islice(chars, 3))
            if len(trigram) < 3:
                return
            for char in chars:
                if char == "\n":
                    break
                trigram = trigram[1:] + char
                self._add(trigram, file_index)
            else:
                return

    def _add(self, trigram: str, file_index: int) -> None:
        files = self.trigram_to_files.setdefault(trigram, [])
        if not files or files[-1] != file_index:
            files.append(file_index)


def build_index(dir_path: str, output_to_json: bool = False) -> Indexer:
    """Index every regular file directly inside ``dir_path``."""
    indexer = Indexer()
    indexer._read_directory(dir_path)
    for file_index, path in enumerate(indexer.file_map):
        with open(path, encoding="utf-8", errors="replace", newline="") as handle:
            indexer._index_text(handle.read(), file_index)
    if output_to_json:
        write_index_json(indexer)
    return indexer


def write_index_json(indexer: Indexer, path: str = "index.json") -> None:
    """Write each trigram with the number of files holding it as JSON."""
    entries = [
        {"trigram": trigram, "results": len(files)}
        for trigram, files in indexer.trigram_to_files.items()
    ]
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(entries or None, handle, ensure_ascii=False, separators=(",", ":"))