"""A regex compiler for plain character sequences, run one path at a time."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from .linear_fsm import Status

Predicate = Callable[[str], bool]

__all__ = [
    "CharacterLiteral",
    "Group",
    "Parser",
    "Predicate",
    "Runner",
    "State",
    "Status",
    "Symbol",
    "Token",
    "Transition",
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


@dataclass
class Transition:
    """An edge to ``to`` taken when ``predicate`` accepts the input."""

    to: State
    predicate: Predicate
    source: Optional[State] = None


@dataclass(eq=False)
class State:
    """A state that can be built up and merged during compilation."""

    id: int = 0
    transitions: list[Transition] = field(default_factory=list)

    def first_matching_transition(self, char: str) -> Optional[State]:
        """Destination of the first transition accepting ``char``, if any."""
        return next((t.to for t in self.transitions if t.predicate(char)), None)

    def is_success_state(self) -> bool:
        return not self.transitions

    def add_transition(self, destination: State, predicate: Predicate) -> None:
        self.transitions.append(Transition(destination, predicate, source=self))

    def merge(self, other: State) -> None:
        """Take over the transitions of ``other`` and empty it."""
        for t in other.transitions:
            self.add_transition(t.to, t.predicate)
        other.delete()

    def delete(self) -> None:
        self.transitions = []


@dataclass(frozen=True)
class CharacterLiteral:
    """A single literal character."""

    character: str

    def compile(self) -> tuple[State, State]:
        start, end = State(), State()
        expected = self.character
        start.add_transition(end, lambda char: char == expected)
        return start, end


@dataclass
class Group:
    """A sequence of characters matched one after another."""

    child_nodes: list[CharacterLiteral] = field(default_factory=list)

    def append(self, node: CharacterLiteral) -> None:
        self.child_nodes.append(node)

    def compile(self) -> tuple[State, State]:
        start = State()
        tail = start
        for child in self.child_nodes:
            head, next_tail = child.compile()
            tail.merge(head)
            tail = next_tail
        return start, tail


class Parser:
    """Builds a group of the plain characters among the tokens."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens

    def parse(self) -> Group:
        return Group(
            [CharacterLiteral(t.letter) for t in self.tokens if t.symbol is Symbol.CHARACTER]
        )


class Runner:
    """Walks a machine one character at a time along a single path."""

    def __init__(self, head: State) -> None:
        self.head = head
        self.current: Optional[State] = head

    def next(self, char: str) -> None:
        """Follow the first transition accepting ``char``; a failed runner stays failed."""
        if self.current is None:
            return
        self.current = self.current.first_matching_transition(char)

    def status(self) -> Status:
        if self.current is None:
            return Status.FAIL
        if self.current.is_success_state():
            return Status.SUCCESS
        return Status.NORMAL

    def reset(self) -> None:
        self.current = self.head