"""
Title: Deployable Actuator Interface
Author: Alex Cooke
Date Created: 2026-10-12
Last Modified: 2026-10-13
Version: 1.0

Purpose:
Defines the narrow interface through which the Deployable Sleep Controller
observes and commands the single actuator it governs, together with a helper
that locates that actuator among the modules attached to a part.

Scope and Limitations:
- retract() and extend() are fire-and-forget; the controller observes the
  outcome through deploy_state() on later ticks.
- A part with no matching module yields None, which the controller treats as
  a permanent degraded condition.

Dependencies:
- Python 3.10+
- typing (standard library)
- deploy_states.py
"""

from typing import Iterable, Protocol, runtime_checkable

from deploy_states import DeployState


@runtime_checkable
class Deployable(Protocol):
    """Actuator that can be retracted and extended."""

    def deploy_state(self) -> DeployState: ...

    def can_move(self) -> bool: ...

    def retract(self) -> None: ...

    def extend(self) -> None: ...


def find_deployable(modules: Iterable[object] | None) -> Deployable | None:
    # First module implementing the Deployable interface wins.
    if modules is None:
        return None
    for candidate in modules:
        if isinstance(candidate, Deployable):
            return candidate
    return None
