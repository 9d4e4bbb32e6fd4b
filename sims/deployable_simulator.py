"""
Title: Deployable Actuator Simulator
Author: Alex Cooke
Date Created: 2026-10-13
Last Modified: 2026-10-16
Version: 1.1

Purpose:
Provides a lightweight deployable actuator model for exercising the
Deployable Sleep Controller from the CLI and from tests. Retract and extend
commands start a timed motion that completes after a configurable travel
time; the actuator can be locked (cannot move) or broken to inject the
degraded conditions the controller must handle.

Scope and Limitations:
- Motion is linear in normalised position (0.0 = retracted, 1.0 = extended).
- Does not model loads, wind, or sun tracking.
- Supports both fixed time-step and injected-clock operation.
"""

from deploy_states import DeployState


class DeployableSimulator:
    def __init__(
        self,
        travel_time_s: float = 3.0,
        initial_state: DeployState = DeployState.EXTENDED,
        clock=None,
    ):
        if travel_time_s <= 0.0:
            raise ValueError("travel_time_s must be positive")

        self.travel_time_s = float(travel_time_s)
        self.clock = clock

        self._state = initial_state
        self._position = 0.0 if initial_state in (DeployState.RETRACTED, DeployState.EXTENDING) else 1.0
        self._locked = False

        self.retract_cmds = 0
        self.extend_cmds = 0

        self._last_time = self.clock() if self.clock else None

    # -------------------------
    # Deployable interface
    # -------------------------

    def deploy_state(self) -> DeployState:
        return self._state

    def can_move(self) -> bool:
        return not self._locked and self._state != DeployState.BROKEN

    def retract(self) -> None:
        self.retract_cmds += 1
        if not self.can_move():
            return
        if self._state in (DeployState.EXTENDED, DeployState.EXTENDING):
            self._state = DeployState.RETRACTING

    def extend(self) -> None:
        self.extend_cmds += 1
        if not self.can_move():
            return
        if self._state in (DeployState.RETRACTED, DeployState.RETRACTING):
            self._state = DeployState.EXTENDING

    # -------------------------
    # Fault injection
    # -------------------------

    @property
    def position(self) -> float:
        return self._position

    @property
    def locked(self) -> bool:
        return self._locked

    def set_locked(self, locked: bool) -> None:
        self._locked = bool(locked)

    def break_part(self) -> None:
        self._state = DeployState.BROKEN

    def repair(self) -> None:
        # Settle into whichever end stop is nearest.
        if self._state == DeployState.BROKEN:
            self._state = DeployState.EXTENDED if self._position >= 0.5 else DeployState.RETRACTED

    def force_state(self, state: DeployState) -> None:
        # Externally driven change (e.g. another mod or the player).
        self._state = state
        if state == DeployState.RETRACTED:
            self._position = 0.0
        elif state == DeployState.EXTENDED:
            self._position = 1.0

    # -------------------------
    # Simulation
    # -------------------------

    def step(self, dt: float) -> DeployState:
        # Advance motion by dt seconds and return the deploy state.
        if dt <= 0.0 or self._locked:
            return self._state

        rate = dt / self.travel_time_s

        if self._state == DeployState.RETRACTING:
            self._position = max(0.0, self._position - rate)
            if self._position <= 0.0:
                self._state = DeployState.RETRACTED
        elif self._state == DeployState.EXTENDING:
            self._position = min(1.0, self._position + rate)
            if self._position >= 1.0:
                self._state = DeployState.EXTENDED

        return self._state

    def update(self) -> DeployState:
        # Advance simulation using the injected clock.
        if not self.clock:
            raise RuntimeError(
                "DeployableSimulator.update() requires a clock; use step(dt) instead."
            )

        now = self.clock()
        dt = now - (self._last_time if self._last_time is not None else now)
        self._last_time = now
        return self.step(dt)
