"""
Title: Sleep Duration Configuration Model (SleepConfiguration)
Author: Alex Cooke
Date Created: 2026-10-12
Last Modified: 2026-10-14
Version: 1.1

Purpose:
Defines the immutable configuration of the user-adjustable sleep duration
setting exposed by the Deployable Sleep Controller. The configuration bounds
the setting to the range offered by the host's slider control and provides
pure helpers to snap arbitrary input onto that range.

Targeted Behaviour:
- Sleep duration is bounded to [0.5, 20] minutes in steps of 0.5.
- Out-of-range input is clamped, off-step input is snapped to the nearest step.

Scope and Limitations:
- Configuration is static and not modified at runtime.
- The setting is consulted only when a sleep is initiated.

Dependencies:
- Python 3.10+
- dataclasses (standard library)
- math (standard library)

Related Documents:
- DESIGN.md
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SleepConfiguration:
    # Immutable sleep duration slider configuration (minutes).
    min_minutes: float = 0.5
    max_minutes: float = 20.0
    step_minutes: float = 0.5
    default_minutes: float = 5.0

    def is_valid(self) -> bool:
        values = (self.min_minutes, self.max_minutes, self.step_minutes, self.default_minutes)
        if not all(math.isfinite(float(v)) for v in values):
            return False
        if self.step_minutes <= 0 or self.min_minutes <= 0:
            return False
        if self.min_minutes > self.max_minutes:
            return False
        return self.min_minutes <= self.default_minutes <= self.max_minutes

    def snap_minutes(self, value: float) -> float:
        # Pure calculation, no side effects.
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Sleep minutes must be finite, got {value!r}")

        steps = round((value - self.min_minutes) / self.step_minutes)
        snapped = self.min_minutes + steps * self.step_minutes

        return min(self.max_minutes, max(self.min_minutes, snapped))

    def sleep_seconds(self, minutes: float) -> float:
        return 60.0 * float(minutes)
