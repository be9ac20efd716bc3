import os

import pytest

from fsmsearch.filesearch import FileResult, Match, SearchResult, Searcher

TEXT = "the cat sat\nno match here\ncat and cat\n"


@pytest.fixture
def text_file(tmp_path):
    path = tmp_path / "book.txt"
    path.write_text(TEXT)
    return str(path)


@pytest.fixture
def pages(tmp_path):
    directory = tmp_path / "pages"
    directory.mkdir()
    (directory / "b.txt").write_text("a cat\nnothing\n")
    (directory / "a.txt").write_text("dog\ncat cat\n")
    (directory / "c.txt").write_text("no animals\n")
    (directory / "sub").mkdir()
    (directory / "sub" / "d.txt").write_text("cat\n")
    return str(directory)


def _loaded(path):
    searcher = Searcher(path)
    searcher.load_in_memory()
    searcher.load_lines_in_memory()
    return searcher


def test_load_in_memory(text_file):
    searcher = Searcher(text_file)
    searcher.load_in_memory()
    assert searcher.content == TEXT


def test_load_lines_in_memory(text_file):
    searcher = Searcher(text_file)
    searcher.load_lines_in_memory()
    assert searcher.lines == TEXT.split("\n")
    assert searcher.lines[-1] == ""


def test_search_regex_ends_with_finished_marker(text_file):
    results = list(_loaded(text_file).search_regex("cat"))
    assert results[-1] == SearchResult(finished=True)
    assert not any(r.finished for r in results[:-1])


def test_search_regex_results(text_file):
    results = list(_loaded(text_file).search_regex("cat"))[:-1]
    assert len(results) == TEXT.count("cat")
    assert [r.count for r in results] == list(range(len(results)))
    lines = TEXT.split("\n")
    for r in results:
        assert r.query == "cat"
        assert r.line_content == lines[r.line_number - 1]
        assert r.line_content[r.match.start : r.match.end + 1] == "cat"


def test_search_regex_with_alternation(text_file):
    results = list(_loaded(text_file).search_regex("(c|s)at"))[:-1]
    found = {r.line_content[r.match.start : r.match.end + 1] for r in results}
    assert found == {"cat", "sat"}


def test_search_regex_no_match(text_file):
    results = list(_loaded(text_file).search_regex("zebra"))
    assert results == [SearchResult(finished=True)]


def test_search_file(pages):
    results = Searcher(pages).search_file("cat", "a.txt")
    assert len(results) == 2
    for r in results:
        assert r.file == "a.txt"
        assert r.line_content[r.match.start : r.match.end + 1] == "cat"
    assert [r.count for r in results] == [0, 1]


def test_search_directory_regex_skips_directories(pages):
    results = Searcher(pages).search_directory_regex("cat")
    assert [r.file for r in results] == ["a.txt", "a.txt", "b.txt"]
    for r in results:
        assert r.line_content[r.match.start : r.match.end + 1] == "cat"


def test_iter_directory_regex_matches_full_search(pages):
    searcher = Searcher(pages)
    files = [os.path.join(pages, name) for name in ("a.txt", "b.txt", "c.txt")]
    assert list(searcher.iter_directory_regex("cat", files)) == (
        searcher.search_directory_regex("cat")
    )


def test_iter_directory_regex_only_given_files(pages):
    searcher = Searcher(pages)
    results = list(searcher.iter_directory_regex("cat", [os.path.join(pages, "b.txt")]))
    assert results == searcher.search_file("cat", "b.txt")
    assert all(isinstance(r, FileResult) and r.file == "b.txt" for r in results)


def test_match_defaults():
    assert SearchResult().match == Match(0, 0)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Searcher(str(tmp_path / "missing.txt")).load_in_memory()
    with pytest.raises(FileNotFoundError):
        Searcher(str(tmp_path)).search_file("cat", "missing.txt")