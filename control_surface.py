"""
Title: Deployable Sleep Control Surface Model
Author: Alex Cooke
Date Created: 2026-10-13
Last Modified: 2026-10-15
Version: 1.1

Purpose:
Holds the visibility and enabled flags of every control the host renders for
the Deployable Sleep Controller, together with the countdown display text.
The controller writes these flags whenever it re-derives visibility; the host
only reads them.

Scope and Limitations:
- Flags are plain data; no rendering or widget logic lives here.

Dependencies:
- Python 3.10+
- dataclasses (standard library)
"""

from dataclasses import dataclass, field


@dataclass
class ControlFlags:
    visible: bool = False
    enabled: bool = False


@dataclass
class ControlSurface:
    # "Sleep" menu button (visible) and "Sleep" action-group binding (enabled).
    sleep_command: ControlFlags = field(default_factory=ControlFlags)
    # "Wake Now" menu button.
    wake_command: ControlFlags = field(default_factory=ControlFlags)
    # "Sleep Minutes" slider; editor visibility is tracked separately.
    sleep_minutes: ControlFlags = field(default_factory=ControlFlags)
    sleep_minutes_editor: ControlFlags = field(default_factory=ControlFlags)
    # "Wake In" display field.
    countdown: ControlFlags = field(default_factory=ControlFlags)
    countdown_text: str = ""

    def hide_all(self) -> None:
        for flags in (
            self.sleep_command,
            self.wake_command,
            self.sleep_minutes,
            self.sleep_minutes_editor,
            self.countdown,
        ):
            flags.visible = False
            flags.enabled = False

    def visibility(self) -> dict[str, tuple[bool, bool]]:
        return {
            "sleep_command": (self.sleep_command.visible, self.sleep_command.enabled),
            "wake_command": (self.wake_command.visible, self.wake_command.enabled),
            "sleep_minutes": (self.sleep_minutes.visible, self.sleep_minutes.enabled),
            "sleep_minutes_editor": (
                self.sleep_minutes_editor.visible,
                self.sleep_minutes_editor.enabled,
            ),
            "countdown": (self.countdown.visible, self.countdown.enabled),
        }
