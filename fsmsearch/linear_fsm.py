"""A deterministic, hand-built state machine that follows one path at a time."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

Predicate = Callable[[str], bool]

__all__ = ["Predicate", "Runner", "State", "Status", "Transition"]


class Status(Enum):
    """Overall state of a runner."""

    SUCCESS = "success"
    FAIL = "fail"
    NORMAL = "normal"


@dataclass
class Transition:
    """An edge to ``to`` taken when ``predicate`` accepts the input."""

    to: State
    predicate: Predicate
    source: Optional[State] = None


@dataclass(eq=False)
class State:
    """A machine state; a state with no outgoing edges is a success state."""

    id: int = 0
    transitions: list[Transition] = field(default_factory=list)

    def first_matching_transition(self, char: str) -> Optional[State]:
        """Destination of the first transition accepting ``char``, if any."""
        return next((t.to for t in self.transitions if t.predicate(char)), None)

    def is_success_state(self) -> bool:
        return not self.transitions


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