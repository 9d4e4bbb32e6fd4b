"""
Title: Deployable Sleep State Snapshot (StateSnapshot)
Author: Alex Cooke
Date Created: 2026-10-12
Last Modified: 2026-10-15
Version: 1.2

Purpose:
Captures a point-in-time record of every externally observable fact the
Deployable Sleep Controller uses to decide its behaviour. Two snapshots taken
on consecutive ticks are compared to detect when control visibility must be
re-derived, and the snapshot carries the overdue predicate evaluated at the
moment of capture so a single tick sees one consistent clock reading.

Targeted Behaviour:
- Equality is structural over all seven fields, none weighted over another.
- is_overdue is cached at capture time and never recomputed on access.
- A missing deployable reads as immobile and BROKEN.

Scope and Limitations:
- Snapshots are immutable values; capturing never mutates the deployable,
  the context, or the controller.

Dependencies:
- Python 3.10+
- dataclasses (standard library)
- deploy_states.py
- deployable.py
"""

from dataclasses import dataclass, fields

from deploy_states import DeployState, ExecutionContext
from deployable import Deployable

NOT_SLEEPING = 0.0


@dataclass(frozen=True)
class StateSnapshot:
    has_deployable: bool
    can_move: bool
    is_editor: bool
    is_flight: bool
    is_sleeping: bool
    is_overdue: bool
    deploy_state: DeployState

    @classmethod
    def capture(
        cls,
        deployable: Deployable | None,
        context: ExecutionContext,
        wake_time: float,
        now: float,
    ) -> "StateSnapshot":
        has_deployable = deployable is not None
        is_sleeping = wake_time > NOT_SLEEPING

        return cls(
            has_deployable=has_deployable,
            can_move=bool(deployable.can_move()) if has_deployable else False,
            is_editor=context == ExecutionContext.EDITOR,
            is_flight=context == ExecutionContext.FLIGHT,
            is_sleeping=is_sleeping,
            # The deadline itself counts as passed.
            is_overdue=is_sleeping and now >= wake_time,
            deploy_state=deployable.deploy_state() if has_deployable else DeployState.BROKEN,
        )

    def describe(self) -> str:
        parts = []
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, DeployState):
                value = value.name
            parts.append(f"{f.name}={value}")
        return ", ".join(parts)
