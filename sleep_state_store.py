"""
Title: Deployable Sleep Persisted State and Store
Author: Alex Cooke
Date Created: 2026-10-13
Last Modified: 2026-10-19
Version: 1.2

Purpose:
Defines the two scalars that survive a restart of the Deployable Sleep
Controller (the absolute wake deadline and the configured sleep duration) and
a simple file-backed store that persists them between sessions. All derived
visibility and snapshot state is rebuilt from these values on the first tick
after resume.

Scope and Limitations:
- Persistence is file-based (JSON) and overwrites the previous save.
- No versioning, locking, or migration of the on-disk format.
- A missing file is not an error; a malformed file is.
- A host may store its universal time beside the two scalars so the wake
  deadline keeps its meaning across a restart.

Dependencies:
- Python 3.10+
- dataclasses (standard library)
- json (standard library)
- math (standard library)
- pathlib (standard library)
"""

import json
import math
from dataclasses import asdict, dataclass
from pathlib import Path


@dataclass(frozen=True)
class SleepModuleState:
    wake_time: float = 0.0
    sleep_minutes: float = 5.0

    @classmethod
    def from_dict(cls, data: dict) -> "SleepModuleState":
        try:
            wake_time = float(data["wake_time"])
            sleep_minutes = float(data["sleep_minutes"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid sleep state: {data!r}") from e

        if not math.isfinite(wake_time) or not math.isfinite(sleep_minutes):
            raise ValueError(f"Invalid sleep state: {data!r}")

        return cls(wake_time=wake_time, sleep_minutes=sleep_minutes)

    def to_dict(self) -> dict:
        return asdict(self)


class SleepStateStore:
    def __init__(self, filepath: str | Path):
        self._path = Path(filepath)

        # Ensures directory exists for persistence target.
        if self._path.parent:
            self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, state: SleepModuleState, universal_time: float | None = None) -> None:
        data = state.to_dict()
        if universal_time is not None:
            # Host time base the wake deadline is measured against
            data["universal_time"] = float(universal_time)

        with self._path.open("w", encoding="utf-8") as f:
            json.dump(data, f)
            f.write("\n")

    def _read(self) -> dict | None:
        if not self._path.exists():
            return None

        with self._path.open("r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Malformed sleep state file: {self._path}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Malformed sleep state file: {self._path}")

        return data

    def load(self) -> SleepModuleState | None:
        data = self._read()
        if data is None:
            return None
        return SleepModuleState.from_dict(data)

    def load_universal_time(self) -> float | None:
        data = self._read()
        if data is None or "universal_time" not in data:
            return None

        try:
            universal_time = float(data["universal_time"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid universal time in {self._path}") from e

        if not math.isfinite(universal_time):
            raise ValueError(f"Invalid universal time in {self._path}")
        return universal_time
