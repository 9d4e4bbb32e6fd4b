# test_state_snapshot.py
#
# Unit tests for the state snapshot value used for change detection.
# Scope:
# - state_snapshot: StateSnapshot.capture, equality, is_overdue, describe

import dataclasses

import pytest

from deploy_states import DeployState, ExecutionContext
from state_snapshot import NOT_SLEEPING, StateSnapshot


class FakeDeployable:
    def __init__(self, state: DeployState = DeployState.EXTENDED, mobile: bool = True):
        self.state = state
        self.mobile = mobile
        self.commands: list[str] = []

    def deploy_state(self) -> DeployState:
        return self.state

    def can_move(self) -> bool:
        return self.mobile

    def retract(self) -> None:
        self.commands.append("retract")

    def extend(self) -> None:
        self.commands.append("extend")


def base_snapshot() -> StateSnapshot:
    return StateSnapshot(
        has_deployable=True,
        can_move=True,
        is_editor=False,
        is_flight=True,
        is_sleeping=True,
        is_overdue=False,
        deploy_state=DeployState.RETRACTED,
    )


# -----------------------------
# Equality
# -----------------------------

def test_independently_captured_snapshots_are_equal():
    d = FakeDeployable(state=DeployState.RETRACTING)

    a = StateSnapshot.capture(d, ExecutionContext.FLIGHT, wake_time=300.0, now=10.0)
    b = StateSnapshot.capture(d, ExecutionContext.FLIGHT, wake_time=300.0, now=20.0)

    assert a == b
    assert b == a


@pytest.mark.parametrize(
    "change",
    [
        {"has_deployable": False},
        {"can_move": False},
        {"is_editor": True},
        {"is_flight": False},
        {"is_sleeping": False},
        {"is_overdue": True},
        {"deploy_state": DeployState.RETRACTING},
    ],
)
def test_any_single_field_difference_breaks_equality(change):
    a = base_snapshot()
    b = dataclasses.replace(a, **change)

    assert a != b


def test_snapshot_is_frozen():
    snap = base_snapshot()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.is_overdue = True


# -----------------------------
# Capture
# -----------------------------

def test_capture_reads_context_flags():
    d = FakeDeployable()

    editor = StateSnapshot.capture(d, ExecutionContext.EDITOR, NOT_SLEEPING, 0.0)
    flight = StateSnapshot.capture(d, ExecutionContext.FLIGHT, NOT_SLEEPING, 0.0)
    other = StateSnapshot.capture(d, ExecutionContext.OTHER, NOT_SLEEPING, 0.0)

    assert (editor.is_editor, editor.is_flight) == (True, False)
    assert (flight.is_editor, flight.is_flight) == (False, True)
    assert (other.is_editor, other.is_flight) == (False, False)


def test_capture_without_deployable_is_degraded():
    snap = StateSnapshot.capture(None, ExecutionContext.FLIGHT, NOT_SLEEPING, 0.0)

    assert snap.has_deployable is False
    assert snap.can_move is False
    assert snap.deploy_state == DeployState.BROKEN


def test_capture_does_not_command_deployable():
    d = FakeDeployable()
    StateSnapshot.capture(d, ExecutionContext.FLIGHT, 300.0, 400.0)

    assert d.commands == []


@pytest.mark.parametrize(
    "wake_time, now, expected",
    [
        (NOT_SLEEPING, 1000.0, False),
        (300.0, 299.999, False),
        (300.0, 300.0, True),
        (300.0, 301.0, True),
    ],
)
def test_is_overdue(wake_time, now, expected):
    snap = StateSnapshot.capture(FakeDeployable(), ExecutionContext.FLIGHT, wake_time, now)

    assert snap.is_overdue is expected
    assert snap.is_sleeping is (wake_time > NOT_SLEEPING)


def test_is_overdue_is_cached_at_capture():
    d = FakeDeployable()
    snap = StateSnapshot.capture(d, ExecutionContext.FLIGHT, 300.0, 100.0)

    d.state = DeployState.BROKEN

    assert snap.is_overdue is False
    assert snap.deploy_state == DeployState.EXTENDED


def test_describe_lists_every_field():
    text = base_snapshot().describe()

    assert text == (
        "has_deployable=True, can_move=True, is_editor=False, is_flight=True, "
        "is_sleeping=True, is_overdue=False, deploy_state=RETRACTED"
    )
