"""Lexer, syntax tree and parser for the small regular-expression language."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Union

_INDENTATION = "----"


class Modifier(IntEnum):
    """Repetition modifier attached to an expression."""

    ZERO_OR_ONE = 0
    ZERO_OR_MANY = 1
    ONE_OR_MANY = 2


class SymbolType(Enum):
    """Kinds of lexical symbol."""

    ANY_CHARACTER = "."
    PIPE = "|"
    LPAREN = "("
    RPAREN = ")"
    CHARACTER = "character"
    ZERO_OR_MORE = "*"
    ONE_OR_MORE = "+"
    ZERO_OR_ONE = "?"


_SPECIAL = {
    "(": SymbolType.LPAREN,
    ")": SymbolType.RPAREN,
    ".": SymbolType.ANY_CHARACTER,
    "|": SymbolType.PIPE,
    "*": SymbolType.ZERO_OR_MORE,
    "+": SymbolType.ONE_OR_MORE,
    "?": SymbolType.ZERO_OR_ONE,
}

_MODIFIERS = {
    SymbolType.ZERO_OR_ONE: Modifier.ZERO_OR_ONE,
    SymbolType.ZERO_OR_MORE: Modifier.ZERO_OR_MANY,
    SymbolType.ONE_OR_MORE: Modifier.ONE_OR_MANY,
}


@dataclass(frozen=True)
class Symbol:
    """A lexed symbol; ``letter`` is set only for plain characters."""

    symbol_type: SymbolType
    letter: str = ""


def lex(text: str) -> list[Symbol]:
    """Split a pattern into symbols, one per character."""
    return [
        Symbol(_SPECIAL[char]) if char in _SPECIAL else Symbol(SymbolType.CHARACTER, char)
        for char in text
    ]


def _pad(indent: int) -> str:
    return _INDENTATION * indent


def _render_children(children: list[str]) -> str:
    return "[" + " ".join(children) + "]"


@dataclass
class Group:
    """A sequence of expressions matched one after another."""

    expressions: list[Node] = field(default_factory=list)

    def append(self, node: Node) -> None:
        self.expressions.append(node)

    def render(self, indent: int) -> str:
        children = [child.render(indent + 1) for child in self.expressions]
        pad = _pad(indent)
        return f"\n{pad}Group {{{_render_children(children)}\n{pad}}}"

    def __str__(self) -> str:
        return self.render(0)


@dataclass
class Branch:
    """Alternatives of which any one may match."""

    expressions: list[Node] = field(default_factory=list)

    def append(self, node: Node) -> None:
        self.expressions.append(node)

    def render(self, indent: int) -> str:
        children = [child.render(indent + 1) for child in self.expressions]
        pad = _pad(indent)
        return f"\n{pad}Branch {{{_render_children(children)}\n{pad}}}"

    def __str__(self) -> str:
        return f"Root Branch {self.render(0)}"


@dataclass(frozen=True)
class CharacterLiteral:
    """A single literal character."""

    character: str

    def render(self, indent: int) -> str:
        pad = _pad(indent)
        return f"\n{pad}Literal {{{self.character}}}\n{pad}"


@dataclass(frozen=True)
class WildcardCharacterLiteral:
    """The ``.`` wildcard, matching any character."""

    def render(self, indent: int) -> str:
        pad = _pad(indent)
        return f"\n{pad}Wildcard Literal\n{pad}"


@dataclass
class ModifierExpression:
    """An expression with a repetition modifier."""

    modifier: Modifier
    expression: Node

    def render(self, indent: int) -> str:
        pad = _pad(indent)
        inner = self.expression.render(indent + 1)
        return f"\n{pad}Modifier {{{int(self.modifier)}}} Expression {{{inner}}}"


Node = Union[Group, Branch, CharacterLiteral, WildcardCharacterLiteral, ModifierExpression]


@dataclass
class _Frame:
    head: Node
    tail: Union[Group, Branch]


class Parser:
    """Builds a syntax tree from a pattern."""

    def parse(self, text: str) -> Node:
        tokens = lex(text)
        stack = [self._new_frame()]

        for i, token in enumerate(tokens):
            kind = token.symbol_type
            if kind is SymbolType.ANY_CHARACTER:
                stack[-1].tail.append(_wrap(tokens, i, WildcardCharacterLiteral()))
            elif kind is SymbolType.CHARACTER:
                stack[-1].tail.append(_wrap(tokens, i, CharacterLiteral(token.letter)))
            elif kind is SymbolType.PIPE:
                frame = stack[-1]
                new_group = Group()
                frame.head = Branch([frame.head, new_group])
                frame.tail = new_group
            elif kind is SymbolType.LPAREN:
                stack.append(self._new_frame())
            elif kind is SymbolType.RPAREN:
                if len(stack) < 2:
                    raise ValueError(f"unbalanced ')' at position {i} in {text!r}")
                inner = stack.pop()
                stack[-1].tail.append(_wrap(tokens, i, inner.head))

        return stack.pop().head

    @staticmethod
    def _new_frame() -> _Frame:
        group = Group()
        return _Frame(head=group, tail=group)


def _wrap(tokens: list[Symbol], i: int, expression: Node) -> Node:
    if i + 1 < len(tokens):
        modifier = _MODIFIERS.get(tokens[i + 1].symbol_type)
        if modifier is not None:
            return ModifierExpression(modifier=modifier, expression=expression)
    return expression