"""
Title: CLI Support Utilities and Control Loop Abstractions
Author: Alex Cooke
Date Created: 2026-10-13
Last Modified: 2026-10-16
Version: 1.1

Purpose:
Provides shared support utilities for the Deployable Sleep CLI and simulation
environment. This module defines a mutable execution context holder for
interactive input and a lightweight control loop abstraction for driving the
DeployableSleepController either step-wise or in a background thread.

Scope and Limitations:
- Intended for CLI-driven simulation and test support only.
- ControlLoop timing is approximate and not frame-accurate.
- Ticks and interactive commands are serialized through ControlLoop.lock.

Dependencies:
- Python 3.10+
- logging (standard library)
- threading (standard library)
- time (standard library)
- dataclasses (standard library)
- typing (standard library)
- deployable_sleep_controller.py
- deploy_states.py
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from deploy_states import ExecutionContext
from deployable_sleep_controller import DeployableSleepController


@dataclass
class MutableContext:
    value: ExecutionContext = ExecutionContext.FLIGHT

    def __call__(self) -> ExecutionContext:
        return self.value


class ControlLoop:
    def __init__(self,
                 controller: DeployableSleepController,
                 period_s: float = 0.1,
                 on_tick: Optional[Callable] = None,
                 simulator=None,):
        self._controller = controller
        self._period_s = float(period_s)
        self._on_tick = on_tick
        self._simulator = simulator
        self._running = False
        self._stop_evt = threading.Event()
        self._thread: threading.Thread | None = None
        self.lock = threading.RLock()

    @property
    def period_s(self) -> float:
        return self._period_s

    def set_period(self, period_s: float) -> None:
        self._period_s = max(0.01, float(period_s))

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._stop_evt.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if not self._running:
            return
        self._stop_evt.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
        self._running = False
        self._thread = None

    def step(self, n: int = 1) -> None:
        for _ in range(max(1, int(n))):
            self._tick_once()

    def _tick_once(self) -> None:
        with self.lock:
            try:
                if self._simulator is not None:
                    self._simulator.update()
                self._controller.tick()
            except Exception:
                logging.exception("Unhandled exception in control loop")
                return
            if self._on_tick:
                self._on_tick(self._controller)

    def _run(self) -> None:
        while not self._stop_evt.is_set():
            self._tick_once()
            time.sleep(self._period_s)
