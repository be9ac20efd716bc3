"""Compiles syntax trees into state machines."""

from __future__ import annotations

from .fsm import State
from .regex_ast import (
    Branch,
    CharacterLiteral,
    Group,
    Modifier,
    ModifierExpression,
    Node,
    Parser,
    WildcardCharacterLiteral,
)


def compile_regex(pattern: str) -> State:
    """Parse ``pattern`` and return the start state of its machine."""
    return compile_ast(Parser().parse(pattern))


def compile_ast(node: Node) -> State:
    """Return the start state of the machine for a syntax tree."""
    head, _ = _compile(node)
    return head


def _compile(node: Node) -> tuple[State, State]:
    if isinstance(node, CharacterLiteral):
        return _compile_character(node)
    if isinstance(node, WildcardCharacterLiteral):
        return _compile_wildcard()
    if isinstance(node, Group):
        return _compile_group(node)
    if isinstance(node, Branch):
        return _compile_branch(node)
    if isinstance(node, ModifierExpression):
        return _compile_modifier(node)
    raise TypeError(
        f"expression of type [{type(node).__name__}] cannot be compiled"
    )


def _compile_character(node: CharacterLiteral) -> tuple[State, State]:
    start, end = State(), State()
    expected = node.character
    start.add_transition(end, lambda char: char == expected, f"Matches: '{expected}'")
    return start, end


def _compile_wildcard() -> tuple[State, State]:
    start, end = State(), State()
    start.add_transition(end, lambda char: True, "Matches anything")
    return start, end


def _compile_group(node: Group) -> tuple[State, State]:
    start = State()
    tail = start
    for expression in node.expressions:
        next_head, next_tail = _compile(expression)
        tail.add_epsilon_transition(next_head)
        tail = next_tail
    return start, tail


def _compile_branch(node: Branch) -> tuple[State, State]:
    start, end = State(), State()
    for expression in node.expressions:
        head, tail = _compile(expression)
        start.add_epsilon_transition(head)
        tail.add_epsilon_transition(end)
    return start, end


def _compile_modifier(node: ModifierExpression) -> tuple[State, State]:
    start, end = State(), State()
    head, tail = _compile(node.expression)

    if node.modifier is Modifier.ZERO_OR_MANY:
        start.add_epsilon_transition(tail)
        tail.add_epsilon_transition(start)
    elif node.modifier is Modifier.ONE_OR_MANY:
        tail.add_epsilon_transition(start)
    elif node.modifier is Modifier.ZERO_OR_ONE:
        start.add_epsilon_transition(tail)

    start.add_epsilon_transition(head)
    tail.add_epsilon_transition(end)
    return start, end