"""Nondeterministic state machine with epsilon transitions, and its runner."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

Predicate = Callable[[str], bool]

_ids = itertools.count(1)


class Status(str, Enum):
    """Overall status of a runner."""

    SUCCESS = "success"
    FAIL = "fail"
    NORMAL = "normal"


@dataclass
class Transition:
    """An edge to ``to`` taken when ``predicate`` accepts the input."""

    to: State
    predicate: Predicate | None = None
    description: str = ""


@dataclass(eq=False)
class State:
    """A machine state; a state with no outgoing edges is a success state."""

    id: int = 0
    transitions: list[Transition] = field(default_factory=list)
    epsilons: list[Transition] = field(default_factory=list)

    def matching_transitions(self, char: str) -> list[State]:
        """Destinations of every transition accepting ``char``."""
        return [t.to for t in self.transitions if t.predicate(char)]

    def is_success_state(self) -> bool:
        return not self.transitions and not self.epsilons

    def add_transition(
        self, destination: State, predicate: Predicate, description: str = ""
    ) -> None:
        self.transitions.append(Transition(destination, predicate, description))

    def add_epsilon_transition(self, destination: State) -> None:
        self.epsilons.append(Transition(destination, description="epsilon"))

    def merge(self, other: State) -> None:
        """Copy the outgoing edges of ``other``, which must have no incoming edges."""
        other._check_no_incoming(other)
        for t in other.transitions:
            self.add_transition(t.to, t.predicate)
        for t in other.epsilons:
            self.add_epsilon_transition(t.to)

    def _check_no_incoming(self, target: State) -> None:
        seen: set[State] = set()
        pending = [self]
        while pending:
            state = pending.pop()
            if state in seen:
                continue
            seen.add(state)
            for t in (*state.transitions, *state.epsilons):
                if t.to is target:
                    raise ValueError("state should have no incoming transitions")
                pending.append(t.to)


class Runner:
    """Tracks the set of active states while feeding characters."""

    def __init__(self, head: State) -> None:
        self.head = head
        self.branches: set[State] = set()
        self.reset()

    def next(self, char: str) -> Status:
        """Advance every active state on ``char`` and report the status."""
        self._process_epsilons()
        self.branches = {
            destination
            for branch in self.branches
            for destination in branch.matching_transitions(char)
        }
        self._process_epsilons()
        return self.status()

    def status(self) -> Status:
        if not self.branches:
            return Status.FAIL
        if any(branch.is_success_state() for branch in self.branches):
            return Status.SUCCESS
        return Status.NORMAL

    def reset(self) -> None:
        self.branches = {self.head}
        self._process_epsilons()

    def _process_epsilons(self) -> None:
        pending = list(self.branches)
        while pending:
            state = pending.pop()
            for t in state.epsilons:
                if t.to not in self.branches:
                    self.branches.add(t.to)
                    pending.append(t.to)


class StateBuilder:
    """Builds a machine from numbered states; state 1 is the start."""

    def __init__(self) -> None:
        self.states: list[State] = [State(id=0)]

    def add_transition(self, source: int, target: int, letter: str) -> StateBuilder:
        self._fill_to(target)
        self._fill_to(source)
        self.states[source].add_transition(
            self.states[target], lambda char: char == letter, f"Matches: '{letter}'"
        )
        return self

    def add_wild_transition(self, source: int, target: int) -> StateBuilder:
        self._fill_to(target)
        self._fill_to(source)
        self.states[source].add_transition(
            self.states[target], lambda char: True, "Matches anything"
        )
        return self

    def add_machine_transition(self, source: int, state: State) -> StateBuilder:
        """Merge the first transitions of ``state`` into state ``source``."""
        self._fill_to(source)
        for t in state.transitions:
            self.states[source].add_transition(t.to, t.predicate, t.description)
        return self

    def build(self) -> State:
        if len(self.states) < 2:
            raise ValueError("no states have been added")
        return self.states[1]

    def _fill_to(self, index: int) -> None:
        while len(self.states) <= index:
            self.states.append(State(id=next(_ids)))