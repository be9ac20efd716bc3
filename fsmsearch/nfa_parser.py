"""Syntax tree, parser and compiler into epsilon-NFAs for the regex engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .nfa_state import Predicate, State

__all__ = [
    "Branch",
    "CharacterLiteral",
    "Group",
    "OneOrMoreModifier",
    "Parser",
    "Symbol",
    "Token",
    "WildcardLiteral",
    "ZeroOrMoreModifier",
    "ZeroOrOneModifier",
    "lex",
]


class Symbol(Enum):
    """Kinds of lexical token."""

    ANY_CHARACTER = "."
    PIPE = "|"
    LPAREN = "("
    RPAREN = ")"
    CHARACTER = "character"
    ZERO_OR_MORE = "*"
    ONE_OR_MORE = "+"
    ZERO_OR_ONE = "?"


_SPECIAL = {
    "(": Symbol.LPAREN,
    ")": Symbol.RPAREN,
    ".": Symbol.ANY_CHARACTER,
    "|": Symbol.PIPE,
    "*": Symbol.ZERO_OR_MORE,
    "+": Symbol.ONE_OR_MORE,
    "?": Symbol.ZERO_OR_ONE,
}


@dataclass(frozen=True)
class Token:
    """A lexed token; ``letter`` is set only for plain characters."""

    symbol: Symbol
    letter: str = ""


def lex(text: str) -> list[Token]:
    """Split a pattern into tokens, one per character."""
    return [
        Token(_SPECIAL[char]) if char in _SPECIAL else Token(Symbol.CHARACTER, char)
        for char in text
    ]


def _pad(indentation: int) -> str:
    return "--" * indentation


def _composite_to_string(title: str, children: list[Node], indentation: int) -> str:
    padding = _pad(indentation)
    rendered = padding + title
    for node in children:
        rendered += f"\n{padding}{node.render(indentation + 1)}"
    return rendered


@dataclass(frozen=True)
class CharacterLiteral:
    """A single literal character."""

    character: str

    def compile(self) -> tuple[State, State]:
        start, end = State(), State()
        start.add_transition(end, Predicate(allowed_chars=self.character), self.character)
        return start, end

    def render(self, indentation: int) -> str:
        return f"{_pad(indentation)}CharacterLiteral('{self.character}')"


@dataclass(frozen=True)
class WildcardLiteral:
    """The ``.`` wildcard, matching any character but a newline."""

    def compile(self) -> tuple[State, State]:
        start, end = State(), State()
        start.add_transition(end, Predicate(disallowed_chars="\n"), ".")
        return start, end

    def render(self, indentation: int) -> str:
        return f"{_pad(indentation)}WildcardCharacterLiteral"


@dataclass(frozen=True)
class ZeroOrOneModifier:
    """``?``: the child matched once or skipped."""

    child: Node

    def compile(self) -> tuple[State, State]:
        start, end = State(), State()
        head, tail = self.child.compile()
        start.add_epsilon(head)
        start.add_epsilon(tail)
        tail.add_epsilon(end)
        return start, end

    def render(self, indentation: int) -> str:
        return _composite_to_string("ZeroOrOne", [self.child], indentation + 1)


@dataclass(frozen=True)
class OneOrMoreModifier:
    """``+``: the child matched one or more times."""

    child: Node

    def compile(self) -> tuple[State, State]:
        start, end = State(), State()
        head, tail = self.child.compile()
        start.add_epsilon(head)
        tail.add_epsilon(start)
        tail.add_epsilon(end)
        return start, end

    def render(self, indentation: int) -> str:
        return _composite_to_string("OneOrMore", [self.child], indentation + 1)


@dataclass(frozen=True)
class ZeroOrMoreModifier:
    """``*``: the child matched any number of times."""

    child: Node

    def compile(self) -> tuple[State, State]:
        start, end = State(), State()
        head, tail = self.child.compile()
        start.add_epsilon(head)
        tail.add_epsilon(start)
        start.add_epsilon(tail)
        tail.add_epsilon(end)
        return start, end

    def render(self, indentation: int) -> str:
        return _composite_to_string("ZeroOrMore", [self.child], indentation + 1)


@dataclass
class Group:
    """A sequence of expressions matched one after another."""

    child_nodes: list[Node] = field(default_factory=list)

    def append(self, node: Node) -> None:
        self.child_nodes.append(node)

    def compile(self) -> tuple[State, State]:
        start = State()
        tail = start
        for expression in self.child_nodes:
            head, next_tail = expression.compile()
            if isinstance(expression, CharacterLiteral):
                tail.merge(head)
            else:
                tail.add_epsilon(head)
            tail = next_tail
        return start, tail

    def render(self, indentation: int) -> str:
        return _composite_to_string("Group", self.child_nodes, indentation)

    def __str__(self) -> str:
        return "\n" + self.render(1)


@dataclass
class Branch:
    """Alternatives of which any one may match."""

    child_nodes: list[Node] = field(default_factory=list)

    def append(self, node: Node) -> None:
        """Append to the last composite alternative after the first."""
        for child in reversed(self.child_nodes[1:]):
            if isinstance(child, (Group, Branch)):
                child.append(node)
                return
        raise ValueError("branch should have at least one composite child")

    def split(self) -> None:
        """Start a new, empty alternative."""
        self.child_nodes.append(Group())

    def compile(self) -> tuple[State, State]:
        start, end = State(), State()
        for expression in self.child_nodes:
            head, tail = expression.compile()
            start.add_epsilon(head)
            tail.add_epsilon(end)
        return start, end

    def render(self, indentation: int) -> str:
        return _composite_to_string("Branch", self.child_nodes, indentation)

    def __str__(self) -> str:
        return "\n" + self.render(1)


Node = Union[
    Group,
    Branch,
    CharacterLiteral,
    WildcardLiteral,
    ZeroOrOneModifier,
    OneOrMoreModifier,
    ZeroOrMoreModifier,
]

_MODIFIERS = {
    Symbol.ZERO_OR_ONE: ZeroOrOneModifier,
    Symbol.ONE_OR_MORE: OneOrMoreModifier,
    Symbol.ZERO_OR_MORE: ZeroOrMoreModifier,
}


class Parser:
    """Builds a syntax tree from lexed tokens."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens

    def parse(self) -> Union[Group, Branch]:
        stack: list[Union[Group, Branch]] = [Group()]

        for i, token in enumerate(self.tokens):
            if token.symbol is Symbol.CHARACTER:
                stack[-1].append(self._wrap(i, CharacterLiteral(token.letter)))
            elif token.symbol is Symbol.ANY_CHARACTER:
                stack[-1].append(self._wrap(i, WildcardLiteral()))
            elif token.symbol is Symbol.PIPE:
                node = stack[-1]
                if isinstance(node, Branch):
                    node.split()
                else:
                    stack[-1] = Branch([node, Group()])
            elif token.symbol is Symbol.LPAREN:
                stack.append(Group())
            elif token.symbol is Symbol.RPAREN:
                if len(stack) < 2:
                    raise ValueError(f"unbalanced ')' at position {i}")
                inner = stack.pop()
                stack[-1].append(self._wrap(i, inner))

        return stack.pop()

    def _wrap(self, i: int, child: Node) -> Node:
        if i + 1 < len(self.tokens):
            modifier = _MODIFIERS.get(self.tokens[i + 1].symbol)
            if modifier is not None:
                return modifier(child)
        return child