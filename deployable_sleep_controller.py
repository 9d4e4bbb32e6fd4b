"""
Title: Deployable Sleep State Machine (Deployable Sleep Controller)
Author: Alex Cooke
Date Created: 2026-10-12
Last Modified: 2026-10-19
Version: 1.5

Purpose:
Implements a deterministic, tick-driven state machine that puts a single
deployable actuator into a timed sleep (retracted) and automatically
re-extends it once the wake deadline passes. The controller detects when it
must re-evaluate itself by comparing state snapshots between ticks, defers a
wake while the actuator cannot move, cancels a sleep the actuator's state has
made meaningless, and derives the visibility of its control surface from the
execution context and the actuator state.

Targeted Behaviour:
- Sleep sets an absolute wake deadline and commands a retract.
- An overdue wake is attempted every tick until the actuator can move.
- A sleep is auto-canceled if the actuator is BROKEN, EXTENDED or EXTENDING.
- The editor context (and a missing actuator) force the timer to not-sleeping.
- The wake countdown is republished only when the whole-second value changes.

Scope and Limitations:
- Single-threaded; every mutation happens inside tick() or a command call.
- Actuator commands are fire-and-forget; their outcome is observed on later
  ticks through the deploy state.
- No actuator mechanics, physics, or rendering.

Dependencies:
- Python 3.10+
- logging (standard library)
- math (standard library)
- time (standard library)
- typing (standard library)
- control_surface.py
- deploy_states.py
- deployable.py
- sleep_configuration.py
- sleep_state_store.py
- state_snapshot.py

Related Documents:
- DESIGN.md
"""

# -----------------------------------------------------------------------------
# Version History
# -----------------------------------------------------------------------------
# 1.5 (2026-10-19)
#   - request_wake() no longer moves the deadline (a deadline pulled to time 0
#     read as not-sleeping); it wakes at once or retries every tick until the
#     actuator can move.
#   - Commands use the last time passed to tick(now=...) so a host driving
#     its own time base does not mix it with the injected clock.
#
# 1.4 (2026-10-17)
#   - Deferred wake warning is reported once per occurrence instead of every
#     tick; the latch clears when the wake proceeds or the sleep is canceled.
#   - Snapshot changes observed during a deferred wake re-derive visibility so
#     an editor switch or a broken actuator can still cancel the sleep.
#
# 1.3 (2026-10-16)
#   - Added save_state() and resume from SleepModuleState.
#   - Added request_wake() ("Wake Now").
#
# 1.2 (2026-10-15)
#   - Auto-cancel is applied before visibility flags are computed so repeated
#     derivations with no state change yield identical flags.
#
# 1.1 (2026-10-13)
#   - Replaced the double-buffered mutable snapshots with immutable
#     StateSnapshot values.
#
# 1.0 (2026-10-12)
#   - Initial sleep/wake state machine, countdown display and control surface.


import logging
import math
import time
from typing import Callable

from control_surface import ControlSurface
from deploy_states import (
    COUNTDOWN_STATES,
    SLEEP_CANCELING_STATES,
    ControllerMode,
    DeployState,
    ExecutionContext,
)
from deployable import Deployable
from sleep_configuration import SleepConfiguration
from sleep_state_store import SleepModuleState
from state_snapshot import NOT_SLEEPING, StateSnapshot

logger = logging.getLogger(__name__)


def format_sleep_time(total_seconds: int) -> str:
    minutes, seconds = divmod(max(0, int(total_seconds)), 60)
    return f"{minutes}:{seconds:02d}"


class DeployableSleepController:
    def __init__(
        self,
        deployable: Deployable | None = None,
        clock: Callable[[], float] = time.monotonic,
        context_provider: Callable[[], ExecutionContext] | None = None,
        config: SleepConfiguration | None = None,
        saved_state: SleepModuleState | None = None,
        part_name: str = "deployable",
        context: ExecutionContext = ExecutionContext.FLIGHT,
    ):
        self._config = config if config is not None else SleepConfiguration()
        if not self._config.is_valid():
            raise ValueError(f"Invalid sleep configuration: {self._config}")

        self._deployable = deployable
        self._clock = clock
        self.context_provider = context_provider
        self._context = context
        self._part_name = part_name

        self.controls = ControlSurface()

        # Persisted fields
        self._wake_time: float = NOT_SLEEPING
        self._sleep_minutes: float = self._config.default_minutes
        if saved_state is not None:
            self._wake_time = max(NOT_SLEEPING, float(saved_state.wake_time))
            self._sleep_minutes = self._config.snap_minutes(saved_state.sleep_minutes)

        # Countdown throttle (-1 forces the first publish)
        self._last_sleep_seconds_remaining: int = -1

        # Remember whether the current deferred wake has been reported
        self._wake_blocked_reported: bool = False

        # Manual wake pending (retried like an overdue wake)
        self._wake_requested: bool = False

        # Last time passed in by the host through tick(now=...)
        self._host_time: float | None = None

        if self._deployable is None:
            # Degraded for the lifetime of this instance; no further lookups.
            self.error(f"No deployable found for {self._part_name}, ignoring")

        if self.context_provider is not None:
            self._context = self.context_provider()

        self.derive_visibility()
        self._previous_snapshot = self._capture(self._clock())

    # -------------------------
    # Properties / small helpers
    # -------------------------

    @property
    def part_name(self) -> str:
        return self._part_name

    @property
    def deployable(self) -> Deployable | None:
        return self._deployable

    @property
    def context(self) -> ExecutionContext:
        return self._context

    @property
    def wake_time(self) -> float:
        return self._wake_time

    @property
    def is_sleeping(self) -> bool:
        return self._wake_time > NOT_SLEEPING

    @property
    def sleep_minutes(self) -> float:
        return self._sleep_minutes

    @sleep_minutes.setter
    def sleep_minutes(self, value: float) -> None:
        self._sleep_minutes = self._config.snap_minutes(value)

    @property
    def mode(self) -> ControllerMode:
        if self._deployable is None:
            return ControllerMode.DISABLED
        if self._context == ExecutionContext.EDITOR:
            return ControllerMode.EDITOR
        if self._context == ExecutionContext.FLIGHT:
            return ControllerMode.ASLEEP if self.is_sleeping else ControllerMode.AWAKE
        return ControllerMode.IDLE

    def log(self, msg: str) -> None:
        logger.info(msg)

    def warn(self, msg: str) -> None:
        logger.warning(msg)

    def error(self, msg: str) -> None:
        logger.error(msg)

    def save_state(self) -> SleepModuleState:
        return SleepModuleState(wake_time=self._wake_time, sleep_minutes=self._sleep_minutes)

    def _capture(self, now: float) -> StateSnapshot:
        return StateSnapshot.capture(self._deployable, self._context, self._wake_time, now)

    def _deploy_state(self) -> DeployState:
        if self._deployable is None:
            return DeployState.BROKEN
        return self._deployable.deploy_state()

    def _now(self) -> float:
        # Commands between ticks use the host time base when tick() is given one.
        if self._host_time is not None:
            return self._host_time
        return self._clock()

    def _clear_wake_time(self) -> None:
        self._wake_time = NOT_SLEEPING
        self._wake_blocked_reported = False
        self._wake_requested = False

    # -------------------------
    # Core update loop
    # -------------------------

    def tick(self, now: float | None = None, context: ExecutionContext | None = None) -> None:
        # Advances the sleep state machine by one frame
        if now is None:
            now = self._clock()
        else:
            self._host_time = float(now)

        if context is not None:
            self._context = context
        elif self.context_provider is not None:
            self._context = self.context_provider()

        current = self._capture(now)
        changed = current != self._previous_snapshot

        if current.is_overdue or self._wake_requested:
            # Overdue handling takes priority over a same-tick state change
            self._wake(snapshot_changed=changed)
        elif changed:
            self.log(f"Updating {self._part_name} state ({current.describe()})")
            self.derive_visibility()

        self._previous_snapshot = current

        if self.is_sleeping:
            self._update_sleep_time_remaining(now)

    # -------------------------
    # Commands
    # -------------------------

    def initiate_sleep(self) -> bool:
        if self._deployable is None:
            self.log(f"Sleep rejected: no deployable bound to {self._part_name}")
            return False

        now = self._now()
        self.log(f"{self._part_name} sleeping for {self._sleep_minutes:g} minutes")

        self._wake_time = now + self._config.sleep_seconds(self._sleep_minutes)
        self._wake_blocked_reported = False
        self._wake_requested = False
        self._last_sleep_seconds_remaining = -1

        # No guard on deploy state; moving an actuator already in motion is its own concern.
        self._deployable.retract()
        self.derive_visibility()
        return True

    def attempt_wake(self) -> bool:
        # No-op unless sleeping and the deadline has been reached.
        if not self.is_sleeping or self._now() < self._wake_time:
            return False
        return self._wake()

    def request_wake(self) -> bool:
        if not self.is_sleeping:
            self.log(f"Wake rejected: {self._part_name} is not sleeping")
            return False

        # Deadline is left alone; a deferred request is retried every tick.
        self.log(f"Wake requested for {self._part_name}")
        self._wake_requested = True
        self._wake()
        return True

    def _wake(self, snapshot_changed: bool = False) -> bool:
        if self._deployable is None:
            self.derive_visibility()
            return False

        if not self._deployable.can_move():
            # It wants to wake up, but physically can't. Retried next tick.
            if not self._wake_blocked_reported:
                self.warn(f"Can't wake {self._part_name} (can't currently move)")
                self._wake_blocked_reported = True
            if snapshot_changed:
                self.derive_visibility()
            return False

        # Clear first so a no-op wake never leaves the timer overdue
        self._clear_wake_time()

        state = self._deploy_state()
        woke = False
        if state == DeployState.RETRACTED:
            self.log(f"Waking {self._part_name}")
            self._deployable.extend()
            woke = True
        else:
            self.log(f"Can't wake {self._part_name} (it's already {getattr(state, 'name', state)})")

        self.derive_visibility()
        return woke

    # -------------------------
    # Control visibility
    # -------------------------

    def derive_visibility(self) -> None:
        controls = self.controls

        if self._deployable is None:
            # Something is set up wrong for this part. Turn off all controls.
            self._clear_wake_time()
            controls.hide_all()
            return

        if self._context == ExecutionContext.EDITOR:
            # Sleep has no meaning outside flight.
            self._clear_wake_time()
            controls.sleep_minutes_editor.visible = True
            controls.sleep_minutes_editor.enabled = True
            controls.sleep_minutes.visible = False
            controls.sleep_minutes.enabled = False
            # Bindable as an action, but no menu button in the editor.
            controls.sleep_command.visible = False
            controls.sleep_command.enabled = True
            controls.wake_command.visible = False
            controls.wake_command.enabled = False
            controls.countdown.visible = False
            controls.countdown.enabled = False
            return

        if self._context == ExecutionContext.FLIGHT:
            state = self._deploy_state()

            if self.is_sleeping and state in SLEEP_CANCELING_STATES:
                self.log(f"Sleeping {self._part_name} is already {state.name}, canceling sleep")
                self._clear_wake_time()

            sleeping = self.is_sleeping
            show_countdown = sleeping and state in COUNTDOWN_STATES
            can_sleep = not sleeping and state == DeployState.EXTENDED

            controls.countdown.visible = show_countdown
            controls.countdown.enabled = show_countdown
            controls.wake_command.visible = show_countdown
            controls.wake_command.enabled = show_countdown
            controls.sleep_command.visible = can_sleep
            controls.sleep_command.enabled = True
            controls.sleep_minutes.visible = can_sleep
            controls.sleep_minutes.enabled = can_sleep
            controls.sleep_minutes_editor.visible = False
            controls.sleep_minutes_editor.enabled = False
            return

        # OTHER (or an unrecognised context): nothing to interact with, timer untouched.
        controls.hide_all()

    # -------------------------
    # Countdown display
    # -------------------------

    def sleep_seconds_remaining(self, now: float | None = None) -> int:
        if not self.is_sleeping:
            return 0
        if now is None:
            now = self._now()
        return max(0, math.ceil(self._wake_time - now))

    def _update_sleep_time_remaining(self, now: float) -> None:
        remaining = self.sleep_seconds_remaining(now)
        if remaining == self._last_sleep_seconds_remaining:
            return
        self._last_sleep_seconds_remaining = remaining
        self.controls.countdown_text = format_sleep_time(remaining)
