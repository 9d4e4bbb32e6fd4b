#!/usr/bin/env python3

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from cli_support import ControlLoop, MutableContext
from deploy_states import DeployState, ExecutionContext
from deployable import find_deployable
from deployable_sleep_controller import DeployableSleepController
from sims.deployable_simulator import DeployableSimulator
from sims.universe_clock import UniverseClock
from sleep_configuration import SleepConfiguration
from sleep_state_store import SleepStateStore


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


class ModeAnnunciator:
    # Prints the derived controller mode whenever it changes.
    def __init__(self):
        self._last_mode = None

    def __call__(self, controller: DeployableSleepController) -> None:
        mode = controller.mode
        if mode != self._last_mode:
            print(f"MODE: {mode.name}")
            self._last_mode = mode


@dataclass
class CliSession:
    controller: DeployableSleepController
    simulator: DeployableSimulator
    clock: UniverseClock
    context: MutableContext
    loop: ControlLoop
    store: SleepStateStore


def build_session(
    state_path: str | Path = "sleep_state.json",
    travel_time_s: float = 3.0,
    start_ut: float = 0.0,
    real_clock=time.monotonic,
    part_name: str = "Communotron 16",
) -> CliSession:
    config = SleepConfiguration()
    if not config.is_valid():
        raise ValueError(f"Invalid sleep configuration: {config}")

    store = SleepStateStore(state_path)
    saved_state = store.load()
    initial_state = DeployState.EXTENDED
    if saved_state is not None:
        logging.info("Resuming from %s", store.path)
        saved_ut = store.load_universal_time()
        if saved_ut is not None:
            start_ut = saved_ut
        if saved_state.wake_time > 0:
            # A sleeping part was left retracted
            initial_state = DeployState.RETRACTED

    clock = UniverseClock(start_ut=start_ut, real_clock=real_clock)
    context = MutableContext(ExecutionContext.FLIGHT)
    simulator = DeployableSimulator(
        travel_time_s=travel_time_s,
        initial_state=initial_state,
        clock=clock,
    )

    part_modules = [simulator]
    controller = DeployableSleepController(
        deployable=find_deployable(part_modules),
        clock=clock,
        context_provider=context,
        config=config,
        saved_state=saved_state,
        part_name=part_name,
    )

    loop = ControlLoop(controller, period_s=0.1, on_tick=ModeAnnunciator(), simulator=simulator)

    return CliSession(
        controller=controller,
        simulator=simulator,
        clock=clock,
        context=context,
        loop=loop,
        store=store,
    )


def _fmt_flags(name: str, visible: bool, enabled: bool) -> str:
    return f"  {name}: visible={visible} enabled={enabled}"


def _print_status(session: CliSession) -> None:
    controller = session.controller
    sim = session.simulator

    print("\n=== STATUS ===")
    print(f"UT: {session.clock.now():.1f}  Warp: {session.clock.warp:g}x")
    print(f"Context: {controller.context.name}")
    print(f"Mode: {controller.mode.name}")
    print(f"DeployState: {sim.deploy_state().name}  Position: {sim.position:.2f}")
    print(f"CanMove: {sim.can_move()}")
    print(f"WakeTime: {controller.wake_time:.1f}")
    print(f"SleepMinutes: {controller.sleep_minutes:g}")
    if controller.controls.countdown.visible:
        print(f"WakeIn: {controller.controls.countdown_text}")
    print("Controls:")
    for name, (visible, enabled) in controller.controls.visibility().items():
        print(_fmt_flags(name, visible, enabled))
    print("=============\n")


def _print_help() -> None:
    print(
        """
Commands
  help                         Print help
  q                            Quit (saves state)

Loop control
  run [period_s]               Start background update loop (default period unchanged)
  stop                         Stop background loop
  step [n]                     Run n update ticks (default 1)
  period <seconds>             Set background period (min 0.01)

Time
  warp <factor>                Set time warp factor
  advance <seconds>            Jump universal time forward

Sleep controls
  sleep                        Put the deployable to sleep
  wake                         Wake the deployable now
  minutes <m>                  Set sleep minutes (0.5 - 20, step 0.5)

Host / actuator inputs
  ctx editor|flight|other      Set execution context
  lock 0|1                     Lock (cannot move) / unlock the deployable
  break                        Break the deployable
  repair                       Repair the deployable
  force <deploy_state>         Force deploy state (RETRACTED, EXTENDED, ...)

State / persistence
  state                        Print controller mode
  status                       Print full status block
  save                         Save wake time, sleep minutes and UT
"""
    )


def _parse_flag(token: str) -> bool | None:
    if token == "1":
        return True
    if token == "0":
        return False
    return None


def execute_command(session: CliSession, cmd: str) -> bool:
    # Runs one CLI command. Returns False when the session should end.
    parts = cmd.split()
    if not parts:
        return True

    op = parts[0].lower()
    controller = session.controller
    loop = session.loop

    if op in ("q", "quit", "exit"):
        return False

    if op in ("help", "?"):
        _print_help()
        return True

    if op == "run":
        if len(parts) >= 2:
            loop.set_period(float(parts[1]))
        loop.start()
        print(f"Loop running @ {loop.period_s:.3f}s")
        return True

    if op == "stop":
        loop.stop()
        print("Loop stopped")
        return True

    if op == "period":
        if len(parts) != 2:
            print("Usage: period <seconds>")
            return True
        loop.set_period(float(parts[1]))
        print(f"Loop period set to {loop.period_s:.3f}s")
        return True

    if op == "step":
        n = int(parts[1]) if len(parts) >= 2 else 1
        loop.step(n)
        print(f"Stepped {n} ticks")
        return True

    if op == "warp":
        if len(parts) != 2:
            print("Usage: warp <factor>")
            return True
        try:
            session.clock.set_warp(float(parts[1]))
        except ValueError as e:
            print(f"Invalid warp: {e}")
            return True
        print(f"Warp set to {session.clock.warp:g}x")
        return True

    if op == "advance":
        if len(parts) != 2:
            print("Usage: advance <seconds>")
            return True
        session.clock.advance(float(parts[1]))
        print(f"UT advanced to {session.clock.now():.1f}")
        return True

    if op == "sleep":
        with loop.lock:
            accepted = controller.initiate_sleep()
        print(f"Sleep accepted: {accepted}")
        return True

    if op == "wake":
        with loop.lock:
            accepted = controller.request_wake()
        print(f"Wake accepted: {accepted}")
        return True

    if op == "minutes":
        if len(parts) != 2:
            print("Usage: minutes <m>")
            return True
        try:
            with loop.lock:
                controller.sleep_minutes = float(parts[1])
        except ValueError as e:
            print(f"Invalid minutes: {e}")
            return True
        print(f"Sleep minutes set to {controller.sleep_minutes:g}")
        return True

    if op == "ctx":
        names = [c.name.lower() for c in ExecutionContext]
        if len(parts) != 2 or parts[1].lower() not in names:
            print("Usage: ctx editor|flight|other")
            return True
        session.context.value = ExecutionContext[parts[1].upper()]
        print(f"Context set to {session.context.value.name}")
        return True

    if op == "lock":
        flag = _parse_flag(parts[1]) if len(parts) == 2 else None
        if flag is None:
            print("Usage: lock 0|1")
            return True
        session.simulator.set_locked(flag)
        print(f"Deployable locked: {flag}")
        return True

    if op == "break":
        session.simulator.break_part()
        print("Deployable broken")
        return True

    if op == "repair":
        session.simulator.repair()
        print(f"Deployable state: {session.simulator.deploy_state().name}")
        return True

    if op == "force":
        names = [s.name for s in DeployState]
        if len(parts) != 2 or parts[1].upper() not in names:
            print(f"Usage: force {'|'.join(names)}")
            return True
        session.simulator.force_state(DeployState[parts[1].upper()])
        print(f"Deployable state forced to {parts[1].upper()}")
        return True

    if op == "state":
        print(controller.mode.name)
        return True

    if op == "status":
        _print_status(session)
        return True

    if op == "save":
        session.store.save(controller.save_state(), universal_time=session.clock.now())
        print(f"State saved to {session.store.path}")
        return True

    print("Unknown command. Type 'help'.")
    return True


def main() -> int:
    setup_logging()
    session = build_session()

    _print_help()
    while True:
        try:
            cmd = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        try:
            if not execute_command(session, cmd):
                break
        except ValueError as e:
            print(f"Invalid input: {e}")

    session.loop.stop()
    session.store.save(session.controller.save_state(), universal_time=session.clock.now())
    logging.info("State saved to %s", session.store.path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
