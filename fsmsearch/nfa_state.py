"""States, transitions and ordered sets for the epsilon-NFA engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Hashable, Iterable, Iterator, Optional, TypeVar

__all__ = ["OrderedSet", "Predicate", "State", "Status", "Transition"]

T = TypeVar("T", bound=Hashable)


class Status(Enum):
    """Overall state of a runner."""

    SUCCESS = "success"
    FAIL = "fail"
    NORMAL = "normal"


@dataclass(frozen=True)
class Predicate:
    """Accepts characters from ``allowed_chars``, or any not in ``disallowed_chars``."""

    allowed_chars: str = ""
    disallowed_chars: str = ""

    def test(self, char: str) -> bool:
        if self.allowed_chars and self.disallowed_chars:
            raise ValueError("allowed and disallowed characters must be mutually exclusive")
        if self.allowed_chars:
            return char in self.allowed_chars
        if self.disallowed_chars:
            return char not in self.disallowed_chars
        return False


@dataclass(frozen=True)
class Transition:
    """An edge from ``source`` to ``to``, labelled ``debug_symbol`` for drawing."""

    debug_symbol: str
    to: State
    source: Optional[State]
    predicate: Predicate = field(default_factory=Predicate)


@dataclass(eq=False)
class State:
    """A state with character transitions, epsilon edges and a success flag."""

    transitions: list[Transition] = field(default_factory=list)
    epsilons: list[State] = field(default_factory=list)
    success: bool = False

    def matching_transitions(self, char: str) -> list[State]:
        """Destinations of every transition accepting ``char``."""
        return [t.to for t in self.transitions if t.predicate.test(char)]

    def is_success_state(self) -> bool:
        return self.success

    def add_transition(
        self, destination: State, predicate: Predicate, debug_symbol: str
    ) -> None:
        self.transitions.append(Transition(debug_symbol, destination, self, predicate))

    def add_epsilon(self, destination: State) -> None:
        self.epsilons.append(destination)

    def merge(self, other: State) -> None:
        """Take over the transitions of ``other`` and empty it."""
        for t in other.transitions:
            self.add_transition(t.to, t.predicate, t.debug_symbol)
        other.delete()

    def delete(self) -> None:
        self.transitions = []
        self.epsilons = []

    def set_success(self) -> None:
        self.success = True

    def epsilon_closure(self) -> set[State]:
        """This state and every state reachable from it through epsilons."""
        closure = {self}
        pending = [self]
        while pending:
            for state in pending.pop().epsilons:
                if state not in closure:
                    closure.add(state)
                    pending.append(state)
        return closure


class OrderedSet(Generic[T]):
    """A set of unique items that remembers the order of first insertion."""

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._indices: dict[T, int] = {}
        self.add(*items)

    def add(self, *args: T) -> None:
        for item in args:
            self._indices.setdefault(item, len(self._indices))

    def index(self, item: T) -> int:
        """Position at which ``item`` was first added."""
        return self._indices[item]

    def items(self) -> list[T]:
        """The items in insertion order."""
        return list(self._indices)

    def __contains__(self, item: object) -> bool:
        return item in self._indices

    def __len__(self) -> int:
        return len(self._indices)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items())