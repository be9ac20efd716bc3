import html
import tempfile
from unittest.mock import patch

import pytest

from fsmsearch.nfa_cli import (
    REDUCE_EPSILON,
    Step,
    TemplateData,
    build_fsm_html,
    build_runner_html,
    build_runner_template_data,
    main,
    output_runner_to_file,
    output_to_file,
    parse_arguments_and_flags,
    reducers_from_flags,
    render_fsm,
    three_split_string,
)
from fsmsearch.nfa_engine import EpsilonReducer, Regex


def test_three_split_string_middle():
    assert three_split_string("abc", 1) == ["a", "b", "c"]


def test_three_split_string_at_end():
    assert three_split_string("abc", 3) == ["abc", "", ""]


def test_three_split_string_out_of_range():
    with pytest.raises(IndexError):
        three_split_string("abc", 4)


def test_parse_arguments_and_flags():
    args, flags = parse_arguments_and_flags(["draw", "ab", "--reduce-epsilons"])
    assert args == ["draw", "ab"]
    assert flags == {REDUCE_EPSILON}


def test_parse_unknown_flag():
    with pytest.raises(ValueError, match="not recognized"):
        parse_arguments_and_flags(["draw", "--nope"])


def test_reducers_from_flags():
    reducers = reducers_from_flags({REDUCE_EPSILON})
    assert len(reducers) == 1
    assert isinstance(reducers[0], EpsilonReducer)
    assert reducers_from_flags(set()) == []


def test_build_runner_template_data_matches_debug_steps():
    data = build_runner_template_data("ab", "ab", [])
    debug = Regex("ab").debug_match("ab")
    assert data.regex == "ab"
    assert [step.graph for step in data.steps] == [s.runner_drawing for s in debug]
    assert data.steps[0].input_split == ["", "a", "b"]
    assert all("".join(step.input_split) == "ab" for step in data.steps)


def test_build_fsm_html_escapes_graph():
    graph = Regex("ab").debug_fsm()
    page = build_fsm_html(graph)
    assert '"a"' not in page
    assert page.count(html.escape("graph LR")) == 2
    assert graph in html.unescape(page)


def test_build_runner_html_visibility():
    data = build_runner_template_data("a+b", "aab", [])
    page = build_runner_html(data)
    assert page.count('class="graph"') == len(data.steps)
    assert page.count('style="visibility:visible"') == 1
    assert page.count('style="visibility:hidden;"') == len(data.steps) - 1
    assert "Regex: (a+b)" not in page
    assert "Regex: (a+b)" in html.unescape(page)


def test_build_runner_html_shows_split_input():
    data = TemplateData(steps=[Step(graph="graph LR", input_split=["x", "<", "z"])], regex="q")
    page = build_runner_html(data)
    assert "<span style='color:red'>x</span>" in page
    assert "&lt;" in page


def test_output_to_file_adds_extension(tmp_path):
    page = build_fsm_html(Regex("ab").debug_fsm())
    target = tmp_path / "sub" / "page"
    output_to_file(page, str(target))
    assert (tmp_path / "sub" / "page.html").read_text(encoding="utf-8") == page


def test_output_to_file_rejects_other_extension(tmp_path):
    with pytest.raises(ValueError, match="only .html extension permitted"):
        output_to_file("x", str(tmp_path / "page.txt"))


def test_output_runner_to_file(tmp_path):
    target = tmp_path / "run.html"
    output_runner_to_file("ab", "ab", str(target), {REDUCE_EPSILON})
    content = target.read_text(encoding="utf-8")
    expected = build_runner_html(build_runner_template_data("ab", "ab", [EpsilonReducer()]))
    assert content == expected


def test_main_out_writes_file(tmp_path):
    target = tmp_path / "out"
    main(["out", "ab", "xab", str(target)])
    content = (tmp_path / "out.html").read_text(encoding="utf-8")
    expected = build_runner_html(build_runner_template_data("ab", "xab", []))
    assert content == expected
    assert "Regex: (ab)" in content


def test_main_unknown_command():
    with pytest.raises(ValueError, match="command not recognized"):
        main(["bogus"])


def test_render_fsm_opens_browser(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    with patch("webbrowser.open", return_value=True) as opened:
        render_fsm("ab", set())
    assert opened.call_count == 1
    pages = list(tmp_path.glob("*.html"))
    assert len(pages) == 1
    assert pages[0].read_text(encoding="utf-8") == build_fsm_html(Regex("ab").debug_fsm())


def test_render_fsm_raises_when_browser_fails(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    with patch("webbrowser.open", return_value=False):
        with pytest.raises(OSError):
            render_fsm("ab", set())