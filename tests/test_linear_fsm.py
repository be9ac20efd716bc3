import pytest

from fsmsearch.linear_fsm import Runner, State, Status, Transition


@pytest.fixture
def abc_machine():
    start, state_a, state_b, state_c = State(), State(), State(), State()
    start.transitions.append(Transition(state_a, lambda char: char == "a"))
    state_a.transitions.append(Transition(state_b, lambda char: char == "b"))
    state_b.transitions.append(Transition(state_c, lambda char: char == "c"))
    return start


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", Status.NORMAL),
        ("xxx", Status.FAIL),
        ("abc", Status.SUCCESS),
        ("ab", Status.NORMAL),
    ],
)
def test_handmade_fsm(abc_machine, text, expected):
    runner = Runner(abc_machine)
    for char in text:
        runner.next(char)
    assert runner.status() is expected


def test_failed_runner_stays_failed(abc_machine):
    runner = Runner(abc_machine)
    runner.next("x")
    runner.next("a")
    assert runner.status() is Status.FAIL
    assert runner.current is None


def test_reset_returns_to_head(abc_machine):
    runner = Runner(abc_machine)
    runner.next("x")
    runner.reset()
    assert runner.current is abc_machine
    for char in "abc":
        runner.next(char)
    assert runner.status() is Status.SUCCESS


def test_first_matching_transition_prefers_earlier_edge():
    first, second = State(), State()
    start = State(
        transitions=[
            Transition(first, lambda char: True),
            Transition(second, lambda char: True),
        ]
    )
    assert start.first_matching_transition("z") is first


def test_first_matching_transition_none_when_nothing_matches(abc_machine):
    assert abc_machine.first_matching_transition("q") is None
    assert State().is_success_state() is True
    assert abc_machine.is_success_state() is False