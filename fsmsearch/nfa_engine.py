"""Runner, drawing, epsilon reduction and the regex front end of the epsilon-NFA engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from .nfa_parser import Parser, lex
from .nfa_state import OrderedSet, State, Status, Transition

__all__ = ["DebugStep", "EpsilonReducer", "Reducer", "Regex", "Runner", "draw"]

_EPSILON = "ε"


def draw(state: State) -> tuple[str, OrderedSet[State]]:
    """Draw the machine starting at ``state`` as a mermaid graph.

    Returns the graph text and the states in the order they were labelled.
    """
    transitions: OrderedSet[Transition] = OrderedSet()
    nodes: OrderedSet[State] = OrderedSet()
    _visit_nodes(state, transitions, nodes)

    output = ["graph LR"]
    for t in transitions.items():
        source = _label(nodes, t.source)
        target = _label(nodes, t.to)
        if t.debug_symbol == _EPSILON:
            arrow = f'-."{t.debug_symbol}".->'
        else:
            arrow = f'--"{t.debug_symbol}"-->'
        output.append(f"{source}(({source})) {arrow} {target}(({target}))")

    for node in nodes.items():
        if node.is_success_state():
            output.append(f"style {nodes.index(node)} stroke:green,stroke-width:4px;")

    return "\n".join(output), nodes


def _label(nodes: OrderedSet[State], state: Optional[State]) -> int:
    if state is None or state not in nodes:
        return 0
    return nodes.index(state)


def _visit_nodes(
    start: State, transitions: OrderedSet[Transition], visited: OrderedSet[State]
) -> None:
    """Depth-first, pre-order walk collecting every state and transition."""
    pending = [start]
    while pending:
        node = pending.pop()
        if node in visited:
            continue
        for epsilon in node.epsilons:
            transitions.add(Transition(_EPSILON, epsilon, node))
        transitions.add(*node.transitions)
        visited.add(node)
        children = [*node.epsilons, *(t.to for t in node.transitions)]
        pending.extend(reversed(children))


class Runner:
    """Tracks the active states of a machine while characters are fed in."""

    def __init__(self, head: State) -> None:
        self.head = head
        self.active_states: set[State] = {head}

    def next(self, char: str) -> None:
        """Advance every active state on ``char``."""
        if not self.active_states:
            return
        self._advance_epsilons()
        self.active_states = {
            destination
            for state in self.active_states
            for destination in state.matching_transitions(char)
        }
        self._advance_epsilons()

    def status(self) -> Status:
        if not self.active_states:
            return Status.FAIL
        if any(state.is_success_state() for state in self.active_states):
            return Status.SUCCESS
        return Status.NORMAL

    def reset(self) -> None:
        """Make the head, and what it reaches by epsilons, the only active states."""
        self.active_states = {self.head}
        self._advance_epsilons()

    def start(self) -> None:
        """Activate the head as well, so that a new match may begin."""
        self.active_states.add(self.head)
        self._advance_epsilons()

    def draw_snapshot(self) -> str:
        """Draw the machine with the active states coloured."""
        graph, nodes = draw(self.head)
        active = sorted(self.active_states, key=lambda state: _label(nodes, state))
        for state in active:
            colour = "#00ab41" if state.is_success_state() else "#ff5555"
            graph += f"\nstyle {_label(nodes, state)} fill:{colour};"
        return graph

    def _advance_epsilons(self) -> None:
        pending = list(self.active_states)
        while pending:
            for epsilon in pending.pop().epsilons:
                if epsilon not in self.active_states:
                    self.active_states.add(epsilon)
                    pending.append(epsilon)


class Reducer(Protocol):
    """Rewrites a compiled machine in place."""

    def reduce(self, state: State) -> None: ...


def _ordered_closure(state: State) -> list[State]:
    closure: dict[State, None] = {state: None}
    pending = [state]
    while pending:
        for epsilon in pending.pop().epsilons:
            if epsilon not in closure:
                closure[epsilon] = None
                pending.append(epsilon)
    return list(closure)


class EpsilonReducer:
    """Turns an epsilon-NFA into an NFA.

    Each state takes over the transitions of every state in its epsilon
    closure, and becomes a success state if any of them is one.
    """

    def reduce(self, state: State) -> None:
        visited: set[State] = set()
        pending = [state]
        while pending:
            current = pending.pop()
            if current in visited:
                continue
            visited.add(current)

            closure = _ordered_closure(current)
            collected = [t for member in closure for t in member.transitions]
            success = any(member.is_success_state() for member in closure)

            current.epsilons = []
            current.transitions = []
            for t in collected:
                current.add_transition(t.to, t.predicate, t.debug_symbol)
            if success:
                current.set_success()

            pending.extend(reversed([t.to for t in current.transitions]))


@dataclass(frozen=True)
class DebugStep:
    """A drawing of the runner after ``current_character_index`` characters."""

    runner_drawing: str
    current_character_index: int


class Regex:
    """A compiled pattern that reports whether it occurs anywhere in a text."""

    def __init__(self, pattern: str, *reducers: Reducer) -> None:
        tree = Parser(lex(pattern)).parse()
        state, end = tree.compile()
        end.set_success()
        for reducer in reducers:
            reducer.reduce(state)
        self.pattern = pattern
        self.fsm = state

    def match_string(self, text: str) -> bool:
        """True if the pattern matches some part of ``text``."""
        return _run(Runner(self.fsm), text, None)

    def debug_fsm(self) -> str:
        """The mermaid drawing of the machine."""
        graph, _ = draw(self.fsm)
        return graph

    def debug_match(self, text: str) -> list[DebugStep]:
        """Snapshots of the runner before and after each character consumed."""
        steps: list[DebugStep] = []
        _run(Runner(self.fsm), text, steps)
        return steps


def _run(runner: Runner, text: str, steps: Optional[list[DebugStep]]) -> bool:
    runner.reset()
    if steps is not None:
        steps.append(DebugStep(runner.draw_snapshot(), 0))

    for i, char in enumerate(text):
        runner.next(char)
        runner.start()
        if steps is not None:
            steps.append(DebugStep(runner.draw_snapshot(), i + 1))
        if runner.status() is Status.SUCCESS:
            return True

    return runner.status() is Status.SUCCESS