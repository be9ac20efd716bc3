"""Command line that renders the regex engine's machines as HTML pages."""

from __future__ import annotations

import os
import sys
import tempfile
import webbrowser
from dataclasses import dataclass, field
from pathlib import Path
from string import Template
from typing import Iterable, Optional, Sequence

from .nfa_engine import EpsilonReducer, Reducer, Regex

__all__ = [
    "REDUCE_EPSILON",
    "Step",
    "TemplateData",
    "build_fsm_html",
    "build_runner_html",
    "build_runner_template_data",
    "main",
    "output_runner_to_file",
    "output_to_file",
    "parse_arguments_and_flags",
    "reducers_from_flags",
    "render_fsm",
    "render_runner",
    "three_split_string",
]

REDUCE_EPSILON = "reduce-epsilon"
_FLAGS = {"--reduce-epsilons": REDUCE_EPSILON}


@dataclass
class Step:
    """One runner snapshot with the input split around the current character."""

    graph: str
    input_split: list[str]


@dataclass
class TemplateData:
    """Everything the runner page shows."""

    steps: list[Step] = field(default_factory=list)
    regex: str = ""
    input: str = ""


_HTML_ESCAPES = str.maketrans(
    {
        "\0": "\ufffd",
        '"': "&#34;",
        "'": "&#39;",
        "&": "&amp;",
        "+": "&#43;",
        "<": "&lt;",
        ">": "&gt;",
    }
)


def _escape(text: str) -> str:
    return text.translate(_HTML_ESCAPES)


_MERMAID_SCRIPT = (
    '<script src="https://cdn.jsdelivr.net/npm/mermaid@9.1.7/dist/mermaid.min.js"></script>'
)

_FSM_TEMPLATE = Template(
    "\n" + _MERMAID_SCRIPT + "\n"
    "<script>mermaid.initialize({startOnLoad:true});\n"
    "</script>\n"
    '<div class="mermaid">\n'
    "    ${graph}\n"
    "</div>\n"
    "<div>\n"
    '<span style="white-space: pre-wrap">${graph}</span>\n'
    "</div>\n"
)

_RUNNER_HEAD = Template(
    "\n" + _MERMAID_SCRIPT + "\n"
    "<script>mermaid.initialize({startOnLoad:true});</script>\n"
    '<body onload="prev()" style="text-align:center">\n'
    "\n"
    "<h1>Regex: (${regex})</h1>\n"
    "\n"
    '<div class="nav-buttons">\n'
    '\t<button id="prev" onClick="prev()">\n'
    "\t\tprev\n"
    "\t</button>\n"
    '\t<button id="next" onClick="next()">\n'
    "\t\tnext\n"
    "\t</button>\n"
    "\t<p>Or use the arrow keys to Step through the FSM</p>\n"
    "</div>\n"
    "\n"
)

_RUNNER_STEP = Template(
    "\n"
    '<div class="graph" ${visibility}>\n'
    "\t<p style='font-size:64px'>\n"
    "\t\t<span style='color:red'>${left}</span>"
    "<span style='text-decoration-color:red;text-decoration-line:underline;'>${middle}</span>"
    "<span>${right}</span>\n"
    "\t</p>\n"
    '\t<div class="mermaid">\n'
    "\t\t${graph}\n"
    "\t</div>\n"
    "</div>\n"
)

_VISIBLE = ' style="visibility:visible" '
_HIDDEN = ' style="visibility:hidden;" '

_RUNNER_TAIL = """

<script type="text/javascript">
let i = 1

function show(c) {
\tfor (let j = 0; j < c.length; j++) {
\t\tif (i != j) {
\t\t  c[j].style.display = 'none'
\t\t  c[j].style.visibility = 'hidden'
\t\t} else {
\t\t  c[j].style.display = 'block'
\t\t  c[j].style.visibility = 'visible'
\t\t}
\t}
}

function next() {
  const c = document.getElementsByClassName('graph')
  if (i >= c.length - 1) return
\ti++
\tshow(c)
}

function prev() {
\tif (i <= 0) return
\ti--
\tshow(document.getElementsByClassName('graph'))
}

function checkKey(e) {
  \tif (e.which === 37 || e.which === 40) {
\t\tprev()
\t} else if (e.which === 39 || e.which === 38) {
\t\tnext()
\t}
}

</script>
<script>document.onkeydown = checkKey;</script>
<div>
</div>
"""


def parse_arguments_and_flags(args: Iterable[str]) -> tuple[list[str], set[str]]:
    """Separate positional arguments from recognised ``--`` flags."""
    arguments: list[str] = []
    flags: set[str] = set()
    for arg in args:
        if arg in _FLAGS:
            flags.add(_FLAGS[arg])
        elif arg.startswith("--"):
            raise ValueError(f"flag '{arg}' not recognized")
        else:
            arguments.append(arg)
    return arguments, flags


def reducers_from_flags(flags: Iterable[str]) -> list[Reducer]:
    """The machine reducers that the flags ask for."""
    reducers: list[Reducer] = []
    for flag in sorted(flags):
        if flag == REDUCE_EPSILON:
            reducers.append(EpsilonReducer())
    return reducers


def render_fsm(pattern: str, flags: Iterable[str]) -> None:
    """Open a page drawing the machine of ``pattern`` in the browser."""
    graph = Regex(pattern, *reducers_from_flags(flags)).debug_fsm()
    _output_to_browser(build_fsm_html(graph))


def render_runner(pattern: str, text: str, flags: Iterable[str]) -> None:
    """Open a page stepping through the run of ``pattern`` over ``text``."""
    data = build_runner_template_data(pattern, text, reducers_from_flags(flags))
    _output_to_browser(build_runner_html(data))


def output_runner_to_file(
    pattern: str, text: str, path: str, flags: Iterable[str]
) -> None:
    """Write the page stepping through the run to ``path``."""
    data = build_runner_template_data(pattern, text, reducers_from_flags(flags))
    output_to_file(build_runner_html(data), path)


def build_fsm_html(graph: str) -> str:
    return _FSM_TEMPLATE.substitute(graph=_escape(graph))


def build_runner_html(data: TemplateData) -> str:
    parts = [_RUNNER_HEAD.substitute(regex=_escape(data.regex))]
    for i, step in enumerate(data.steps):
        left, middle, right = step.input_split
        parts.append(
            _RUNNER_STEP.substitute(
                visibility=_HIDDEN if i else _VISIBLE,
                left=_escape(left),
                middle=_escape(middle),
                right=_escape(right),
                graph=_escape(step.graph),
            )
        )
    parts.append(_RUNNER_TAIL)
    return "".join(parts)


def build_runner_template_data(
    pattern: str, text: str, reducers: Sequence[Reducer]
) -> TemplateData:
    """Run ``pattern`` over ``text`` and record a step for each snapshot."""
    debug_steps = Regex(pattern, *reducers).debug_match(text)
    steps = [
        Step(
            graph=step.runner_drawing,
            input_split=three_split_string(text, step.current_character_index),
        )
        for step in debug_steps
    ]
    return TemplateData(steps=steps, regex=pattern)


def output_to_file(html: str, path: str) -> None:
    """Write ``html`` to ``path``, adding ``.html`` when there is no extension."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    extension = os.path.splitext(path)[1]
    if not extension:
        path += ".html"
    elif extension != ".html":
        raise ValueError("only .html extension permitted")
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(html)


def three_split_string(text: str, index: int) -> list[str]:
    """Split ``text`` into what comes before, at and after ``index``."""
    if not 0 <= index <= len(text):
        raise IndexError(f"index {index} out of range for text of length {len(text)}")
    return [text[:index], text[index : index + 1], text[index + 1 :]]


def _output_to_browser(html: str) -> None:
    with tempfile.NamedTemporaryFile(
        "w", suffix=".html", delete=False, encoding="utf-8"
    ) as handle:
        handle.write(html)
    if not webbrowser.open(Path(handle.name).resolve().as_uri()):
        raise OSError("could not open a browser")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Run the ``draw`` or ``out`` command."""
    args, flags = parse_arguments_and_flags(sys.argv[1:] if argv is None else argv)
    command = args[0] if args else ""
    if command == "draw":
        if len(args) == 2:
            render_fsm(args[1], flags)
        elif len(args) == 3:
            render_runner(args[1], args[2], flags)
    elif command == "out":
        if len(args) == 4:
            output_runner_to_file(args[1], args[2], args[3], flags)
    else:
        raise ValueError("command not recognized")