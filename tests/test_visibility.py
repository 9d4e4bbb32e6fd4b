"""
Title: Deployable Sleep Control Visibility Unit Tests
Author: Alex Cooke
Date Created: 2026-10-14
Last Modified: 2026-10-17
Version: 1.1

Purpose:
Provides unit-level verification of control visibility derivation in the
DeployableSleepController across execution contexts and deploy states,
including the auto-cancellation of a sleep the actuator state has made
meaningless.

Scope and Limitations:
- Tests controller logic only; no widgets are rendered.
- Uses a deterministic fake clock and actuator.

Dependencies:
- Python 3.10+
- pytest
- deployable_sleep_controller.py
- deploy_states.py
"""

import pytest

from deploy_states import ControllerMode, DeployState, ExecutionContext
from deployable_sleep_controller import DeployableSleepController
from sleep_state_store import SleepModuleState


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.t = float(start)

    def __call__(self) -> float:
        return self.t


class FakeDeployable:
    def __init__(self, state: DeployState = DeployState.EXTENDED, mobile: bool = True):
        self.state = state
        self.mobile = mobile
        self.retract_cmds = 0
        self.extend_cmds = 0

    def deploy_state(self) -> DeployState:
        return self.state

    def can_move(self) -> bool:
        return self.mobile

    def retract(self) -> None:
        self.retract_cmds += 1
        if self.mobile and self.state in (DeployState.EXTENDED, DeployState.EXTENDING):
            self.state = DeployState.RETRACTING

    def extend(self) -> None:
        self.extend_cmds += 1
        if self.mobile and self.state in (DeployState.RETRACTED, DeployState.RETRACTING):
            self.state = DeployState.EXTENDING


def make_controller(state=DeployState.EXTENDED, context=ExecutionContext.FLIGHT, wake_time=0.0):
    clock = FakeClock()
    d = FakeDeployable(state=state)
    c = DeployableSleepController(
        deployable=d,
        clock=clock,
        context=context,
        saved_state=SleepModuleState(wake_time=wake_time, sleep_minutes=5.0),
    )
    return c, d, clock


# -----------------------------
# Flight, awake
# -----------------------------

def test_awake_extended_exposes_sleep_controls():
    c, _, _ = make_controller(state=DeployState.EXTENDED)

    assert c.mode == ControllerMode.AWAKE
    assert c.controls.sleep_command.visible is True
    assert c.controls.sleep_command.enabled is True
    assert c.controls.sleep_minutes.visible is True
    assert c.controls.countdown.visible is False
    assert c.controls.wake_command.visible is False


@pytest.mark.parametrize(
    "state",
    [DeployState.RETRACTED, DeployState.RETRACTING, DeployState.EXTENDING, DeployState.BROKEN],
)
def test_awake_not_extended_hides_sleep_controls(state):
    c, _, _ = make_controller(state=state)

    assert c.controls.sleep_command.visible is False
    assert c.controls.sleep_minutes.visible is False
    assert c.controls.countdown.visible is False
    # Action binding stays available in flight
    assert c.controls.sleep_command.enabled is True


# -----------------------------
# Flight, asleep
# -----------------------------

@pytest.mark.parametrize("state", [DeployState.RETRACTED, DeployState.RETRACTING])
def test_asleep_shows_countdown_and_hides_sleep(state):
    c, _, _ = make_controller(state=state, wake_time=300.0)

    assert c.mode == ControllerMode.ASLEEP
    assert c.controls.countdown.visible is True
    assert c.controls.wake_command.visible is True
    assert c.controls.sleep_command.visible is False
    assert c.controls.sleep_minutes.visible is False


@pytest.mark.parametrize(
    "state",
    [DeployState.BROKEN, DeployState.EXTENDED, DeployState.EXTENDING],
)
def test_auto_cancel_on_incompatible_state(state):
    c, d, clock = make_controller(state=DeployState.EXTENDED)
    c.initiate_sleep()
    assert c.wake_time == pytest.approx(300.0)
    assert d.retract_cmds == 1

    clock.t = 100.0
    d.state = state
    c.tick()

    assert c.wake_time == 0.0
    assert c.controls.countdown.visible is False
    assert d.retract_cmds == 1
    assert d.extend_cmds == 0


def test_auto_cancel_exposes_sleep_again_when_extended():
    c, d, clock = make_controller(state=DeployState.EXTENDED)
    c.initiate_sleep()

    clock.t = 100.0
    d.state = DeployState.EXTENDED
    c.tick()

    assert c.mode == ControllerMode.AWAKE
    assert c.controls.sleep_command.visible is True
    assert c.controls.sleep_minutes.visible is True


def test_sleep_on_immobile_deployable_cancels_immediately():
    c, d, _ = make_controller(state=DeployState.EXTENDED)
    d.mobile = False

    assert c.initiate_sleep() is True

    # Retract did not start, so the sleep is meaningless
    assert d.retract_cmds == 1
    assert c.wake_time == 0.0


# -----------------------------
# Editor and other contexts
# -----------------------------

def test_editor_forces_timer_reset_and_exposes_duration():
    c, _, clock = make_controller(state=DeployState.EXTENDED)
    c.initiate_sleep()
    assert c.is_sleeping

    clock.t = 10.0
    c.tick(context=ExecutionContext.EDITOR)

    assert c.mode == ControllerMode.EDITOR
    assert c.wake_time == 0.0
    assert c.controls.sleep_minutes_editor.visible is True
    assert c.controls.sleep_command.enabled is True
    assert c.controls.countdown.visible is False
    assert c.controls.wake_command.visible is False
    assert c.controls.sleep_minutes.visible is False


def test_editor_context_at_construction_discards_saved_sleep():
    c, _, _ = make_controller(
        state=DeployState.RETRACTED,
        context=ExecutionContext.EDITOR,
        wake_time=300.0,
    )

    assert c.wake_time == 0.0
    assert c.mode == ControllerMode.EDITOR


def test_other_context_hides_everything_and_keeps_timer():
    c, _, clock = make_controller(state=DeployState.EXTENDED)
    c.initiate_sleep()

    clock.t = 10.0
    c.tick(context=ExecutionContext.OTHER)

    assert c.mode == ControllerMode.IDLE
    assert c.wake_time == pytest.approx(300.0)
    assert all(v == (False, False) for v in c.controls.visibility().values())

    clock.t = 20.0
    c.tick(context=ExecutionContext.FLIGHT)
    assert c.controls.countdown.visible is True


def test_context_provider_is_read_each_tick():
    context = {"value": ExecutionContext.FLIGHT}
    d = FakeDeployable()
    c = DeployableSleepController(
        deployable=d,
        clock=FakeClock(),
        context_provider=lambda: context["value"],
    )
    assert c.mode == ControllerMode.AWAKE

    context["value"] = ExecutionContext.EDITOR
    c.tick()

    assert c.mode == ControllerMode.EDITOR


# -----------------------------
# Idempotence
# -----------------------------

@pytest.mark.parametrize("context", list(ExecutionContext))
@pytest.mark.parametrize("state", list(DeployState))
@pytest.mark.parametrize("wake_time", [0.0, 300.0])
def test_derive_visibility_is_idempotent(context, state, wake_time):
    c, _, _ = make_controller(state=state, context=context, wake_time=wake_time)

    c.derive_visibility()
    first = (c.controls.visibility(), c.wake_time)
    c.derive_visibility()
    second = (c.controls.visibility(), c.wake_time)

    assert first == second


def test_unchanged_state_does_not_rederive(caplog):
    c, _, clock = make_controller(state=DeployState.EXTENDED)

    with caplog.at_level("INFO"):
        for i in range(5):
            clock.t = float(i)
            c.tick()

    assert not any("Updating" in r.getMessage() for r in caplog.records)
