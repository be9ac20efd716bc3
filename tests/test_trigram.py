import itertools
import json
import os

import pytest

from fsmsearch.trigram import (
    Indexer,
    Query,
    build_index,
    intersect_pair,
    union_pair,
    write_index_json,
)


def test_intersect_pair_example():
    assert intersect_pair([0, 2, 5, 7], [3, 4, 5, 6, 7, 8]) == [5, 7]


def test_union_pair_example():
    assert union_pair([0, 2, 5, 7], [3, 4, 5, 6, 7, 8]) == [0, 2, 3, 4, 5, 6, 7, 8]


@pytest.mark.parametrize("other", [[], [1, 2, 3]])
def test_empty_operands(other):
    assert intersect_pair([], other) == []
    assert intersect_pair(other, []) == []
    assert union_pair([], other) == other
    assert union_pair(other, []) == other


_SAMPLES = [[], [0], [1, 3], [0, 1, 2], [2, 4, 6, 8], [5, 9], [0, 3, 6, 9]]


@pytest.mark.parametrize("left,right", list(itertools.product(_SAMPLES, repeat=2)))
def test_pair_operations_agree_with_sets(left, right):
    assert intersect_pair(left, right) == sorted(set(left) & set(right))
    assert union_pair(left, right) == sorted(set(left) | set(right))


@pytest.fixture
def corpus(tmp_path):
    directory = tmp_path / "pages"
    directory.mkdir()
    (directory / "a.txt").write_text("__cat dog\n")
    (directory / "b.txt").write_text("__dog\n")
    (directory / "c.txt").write_text("__bird\n")
    (directory / "sub").mkdir()
    (directory / "sub" / "d.txt").write_text("__dog\n")
    return str(directory)


def _paths(directory, *names):
    return [os.path.join(directory, name) for name in names]


def test_build_index_lists_regular_files_sorted(corpus):
    indexer = build_index(corpus)
    assert indexer.file_map == _paths(corpus, "a.txt", "b.txt", "c.txt")


@pytest.mark.parametrize(
    "expression,names",
    [
        ("dog", ["a.txt", "b.txt"]),
        ("cat", ["a.txt"]),
        ("bird", ["c.txt"]),
        ("cat|bird", ["a.txt", "c.txt"]),
        ("zzz", []),
        ("ab", ["a.txt", "b.txt", "c.txt"]),
        ("cat|ab", ["a.txt", "b.txt", "c.txt"]),
    ],
)
def test_lookup(corpus, expression, names):
    indexer = build_index(corpus)
    assert indexer.lookup(Query(expression)) == _paths(corpus, *names)


def test_query_returns_indices(corpus):
    indexer = build_index(corpus)
    assert Query("dog").lookup(indexer) == [0, 1]


def test_file_indices_are_sorted_and_unique(corpus):
    indexer = build_index(corpus)
    for files in indexer.trigram_to_files.values():
        assert files == sorted(set(files))


def test_write_index_json_round_trip(corpus, tmp_path):
    indexer = build_index(corpus)
    target = tmp_path / "out.json"
    write_index_json(indexer, str(target))
    loaded = json.loads(target.read_text(encoding="utf-8"))
    assert {entry["trigram"]: entry["results"] for entry in loaded} == {
        trigram: len(files) for trigram, files in indexer.trigram_to_files.items()
    }


def test_write_index_json_empty_index(tmp_path):
    target = tmp_path / "empty.json"
    write_index_json(Indexer(), str(target))
    assert json.loads(target.read_text(encoding="utf-8")) is None


def test_build_index_writes_json_to_working_directory(corpus, tmp_path, monkeypatch):
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    indexer = build_index(corpus, True)
    loaded = json.loads((work / "index.json").read_text(encoding="utf-8"))
    assert len(loaded) == len(indexer.trigram_to_files)


def test_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        build_index(str(tmp_path / "missing"))