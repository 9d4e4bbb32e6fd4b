"""
Title: Deployable and Execution Context State Definitions
Author: Alex Cooke
Date Created: 2026-10-12
Last Modified: 2026-10-14
Version: 1.1

Purpose:
Defines the closed sets of states consumed by the Deployable Sleep Controller:
the mechanical deploy state reported by the governed actuator, the execution
context supplied by the host each tick, and the derived controller modes
reported back to the host for annunciation.

Targeted Behaviour:
- Deploy state drives sleep auto-cancellation and wake eligibility.
- Execution context selects which controls are exposed (editor vs flight).
- Controller modes are derived, never stored, and exist for display only.

Scope and Limitations:
- These enumerations describe logical states only; they do not encode
  animation progress or the reason an actuator is broken.
- No hierarchy or substates are modeled.

Dependencies:
- Python 3.10+
- enum (standard library)

Related Documents:
- DESIGN.md
"""

from enum import Enum, auto


class DeployState(Enum):
    RETRACTED = auto()
    RETRACTING = auto()
    EXTENDED = auto()
    EXTENDING = auto()
    BROKEN = auto()


class ExecutionContext(Enum):
    EDITOR = auto()
    FLIGHT = auto()
    OTHER = auto()


class ControllerMode(Enum):
    DISABLED = auto()
    EDITOR = auto()
    AWAKE = auto()
    ASLEEP = auto()
    IDLE = auto()


# Deploy states in which a pending sleep no longer makes sense.
SLEEP_CANCELING_STATES = (
    DeployState.BROKEN,
    DeployState.EXTENDED,
    DeployState.EXTENDING,
)

# Deploy states in which the wake countdown is shown.
COUNTDOWN_STATES = (
    DeployState.RETRACTED,
    DeployState.RETRACTING,
)
