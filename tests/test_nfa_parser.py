import pytest

from fsmsearch.nfa_parser import (
    Branch,
    CharacterLiteral,
    Group,
    OneOrMoreModifier,
    Parser,
    Symbol,
    Token,
    WildcardLiteral,
    ZeroOrMoreModifier,
    ZeroOrOneModifier,
    lex,
)
from fsmsearch.nfa_state import Predicate

C = CharacterLiteral


@pytest.mark.parametrize(
    "text, expected",
    [
        ("aBc", Group([C("a"), C("B"), C("c")])),
        ("ab.", Group([C("a"), C("b"), WildcardLiteral()])),
        (
            "ab|cd|ef",
            Branch(
                [
                    Group([C("a"), C("b")]),
                    Group([C("c"), C("d")]),
                    Group([C("e"), C("f")]),
                ]
            ),
        ),
        ("a(b|c)", Group([C("a"), Branch([Group([C("b")]), Group([C("c")])])])),
        ("a?", Group([ZeroOrOneModifier(C("a"))])),
        ("(ab)?", Group([ZeroOrOneModifier(Group([C("a"), C("b")]))])),
        ("a+", Group([OneOrMoreModifier(C("a"))])),
        ("(ab)+", Group([OneOrMoreModifier(Group([C("a"), C("b")]))])),
        ("a*", Group([ZeroOrMoreModifier(C("a"))])),
        ("(ab)*", Group([ZeroOrMoreModifier(Group([C("a"), C("b")]))])),
    ],
)
def test_parser(text, expected):
    assert Parser(lex(text)).parse() == expected


def test_lex_tokens():
    assert lex("a|") == [Token(Symbol.CHARACTER, "a"), Token(Symbol.PIPE)]


def test_unbalanced_closing_paren_is_rejected():
    with pytest.raises(ValueError):
        Parser(lex("a)")).parse()


def test_branch_append_without_composite_child_is_rejected():
    with pytest.raises(ValueError):
        Branch([C("a")]).append(C("b"))


def test_branch_append_goes_to_last_alternative():
    branch = Branch([Group([C("a")]), Group()])
    branch.append(C("b"))
    assert branch == Branch([Group([C("a")]), Group([C("b")])])


def test_character_literal_compile():
    head, tail = C("a").compile()
    assert head.transitions[0].predicate == Predicate(allowed_chars="a")
    assert head.transitions[0].debug_symbol == "a"
    assert head.matching_transitions("a") == [tail]


def test_wildcard_compile_excludes_newline():
    head, tail = WildcardLiteral().compile()
    assert head.transitions[0].debug_symbol == "."
    assert head.matching_transitions("x") == [tail]
    assert head.matching_transitions("\n") == []


def test_group_compile_merges_characters():
    head, tail = Parser(lex("ab")).parse().compile()
    (after_a,) = head.matching_transitions("a")
    assert after_a.matching_transitions("b") == [tail]
    assert head.epsilons == []
    assert tail.transitions == []


@pytest.mark.parametrize(
    "modifier, end_reachable_without_input",
    [
        (ZeroOrOneModifier, True),
        (ZeroOrMoreModifier, True),
        (OneOrMoreModifier, False),
    ],
)
def test_modifier_compile_skipping(modifier, end_reachable_without_input):
    head, tail = modifier(C("a")).compile()
    assert (tail in head.epsilon_closure()) is end_reachable_without_input


def test_one_or_more_loops_back():
    head, tail = OneOrMoreModifier(C("a")).compile()
    closure = head.epsilon_closure()
    (after_a,) = [d for state in closure for d in state.matching_transitions("a")]
    assert tail in after_a.epsilon_closure()
    assert head in after_a.epsilon_closure()


def test_branch_compile_reaches_end_from_each_alternative():
    head, tail = Parser(lex("a|b")).parse().compile()
    for char in "ab":
        destinations = [
            d for state in head.epsilon_closure() for d in state.matching_transitions(char)
        ]
        assert any(tail in d.epsilon_closure() for d in destinations)


def test_render_character_literal():
    assert C("a").render(0) == "CharacterLiteral('a')"


def test_group_str():
    assert str(Group([C("a")])) == "\n--Group\n------CharacterLiteral('a')"