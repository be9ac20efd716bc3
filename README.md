# fsmsearch

A regular-expression toolkit in which every engine is a hand-built finite
state machine, plus tools for searching text files with it. It has no
dependencies outside the standard library.

Supported pattern syntax: literal characters, `.` (any character),
`|` (alternation), `( )` (grouping), and the modifiers `*`, `+` and `?`.
There are no character classes, anchors, escapes or counted repetitions.

## What is inside

- `fsmsearch.regex_ast`: `lex` and `Parser`, which turn a pattern into a
  tree of `Group`, `Branch`, `CharacterLiteral`,
  `WildcardCharacterLiteral` and `ModifierExpression` nodes.
- `fsmsearch.compiler`: `compile_regex` and `compile_ast`, which build an
  epsilon-NFA (`fsmsearch.fsm.State`) from a pattern or a tree.
- `fsmsearch.fsm`: `State`, `Runner` (follows every branch at once and
  reports a `Status`) and `StateBuilder` for building machines by hand from
  numbered states.
- `fsmsearch.matching`: `iter_matches`, `find_all` and
  `find_all_with_lines`, which report every match of a machine in a text.
  Matches never span lines; `find_all` gives `(start, end)` pairs and
  `find_all_with_lines` gives `MatchResult(line, start, end)` values, with
  1-based lines and inclusive column offsets.
- `fsmsearch.linear_fsm` and `fsmsearch.linear_regex`: the simplest
  machines, a runner that follows a single path and a compiler for plain
  character sequences.
- `fsmsearch.nfa_state`, `fsmsearch.nfa_parser`, `fsmsearch.nfa_engine`:
  a second NFA engine. `Regex` tells whether a pattern occurs anywhere in a
  text; an optional `EpsilonReducer` removes epsilon transitions; `draw`,
  `Regex.debug_fsm` and `Regex.debug_match` produce Mermaid drawings of the
  machine and of each runner step.
- `fsmsearch.trigram`: a trigram index over the files directly inside a
  directory (`build_index`, `Query`, `Indexer.lookup`) that narrows down
  which files can match; `write_index_json` writes each trigram with its
  file count to a JSON file.
- `fsmsearch.filesearch`: `Searcher`, for searching one file
  (`search_regex`) or the files of a directory (`search_file`,
  `search_directory_regex`, `iter_directory_regex`).
- `fsmsearch.screen` and `fsmsearch.app`: an interactive terminal view that
  searches while you type.

## Using the engines

```python
from fsmsearch.nfa_engine import Regex, EpsilonReducer

regex = Regex("(cat|dog)s?", EpsilonReducer())
regex.match_string("hotdogs")   # True
print(regex.debug_fsm())        # Mermaid "graph LR" source
```

```python
from fsmsearch.compiler import compile_regex
from fsmsearch.fsm import Runner
from fsmsearch.matching import find_all_with_lines

runner = Runner(compile_regex("(dis)?like"))
find_all_with_lines(runner, "adultlike\nadultness")
# [MatchResult(line=1, start=5, end=8)]
```

```python
from fsmsearch.trigram import Query, build_index
from fsmsearch.filesearch import Searcher

index = build_index("pages")
candidates = index.lookup(Query("burden"))
results = list(Searcher("pages").iter_directory_regex("burden", candidates))
```

## Commands

Interactive search in a file or in the files of a directory. Type at least
three characters to start a search; Enter clears the input, the up and down
arrow keys scroll the results, and `Q` quits:

```
fsmsearch search path/to/file.txt
fsmsearch search path/to/directory
```

Draw the NFA engine's machines as HTML pages:

```
fsmsearch-nfa draw "a(b|c)*"
fsmsearch-nfa draw "a(b|c)*" "abcb" --reduce-epsilons
fsmsearch-nfa out "a(b|c)*" "abcb" steps.html
```

`draw` with a pattern shows the machine; with a pattern and an input it
shows the runner step by step. Both write the page to a temporary file and
open it in the default web browser. `out` writes the step-by-step page to
the given path instead, adding `.html` when the path has no extension and
refusing any other extension. `--reduce-epsilons` applies the
`EpsilonReducer` first. The same commands are available as
`fsmsearch v10 draw ...` and `fsmsearch v10 out ...`.

## What it does not do

- `fsmsearch` has only the `search` and `v10` subcommands; the other
  engines are used from Python only.
- Directory search and indexing look only at the files directly inside the
  directory, not at subdirectories, and the index is rebuilt each time.
- The interactive view needs a terminal; it puts the terminal in raw mode
  where the platform supports it.
- Nothing in the package opens a browser except the `draw` command.

## Running the tests

```
pip install -e ".[test]"
pytest
```