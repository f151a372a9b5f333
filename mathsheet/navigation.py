"""
MathSheet Navigation Bridge
Maps navigation events emitted by the math input widget onto sheet operations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from mathsheet.sheet_controller import SheetController


class NavigationKind(str, Enum):
    ENTER = "enter"
    UP = "up"
    DOWN = "down"
    DELETE = "delete"


@dataclass(frozen=True)
class NavigationEvent:
    kind: NavigationKind
    row_index: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NavigationEvent":
        """Build an event from a widget message such as {"kind": "up", "row": 2}."""
        try:
            kind = NavigationKind(data["kind"])
        except (KeyError, ValueError):
            raise ValueError(f"Unknown navigation kind: {data.get('kind')!r}") from None
        row = data.get("row", data.get("row_index"))
        if not isinstance(row, int) or isinstance(row, bool):
            raise ValueError(f"Navigation event needs an integer row, got {row!r}")
        return cls(kind, row)


class NavigationBridge:
    """Dispatches each widget event to exactly one controller call."""

    def __init__(self, controller: SheetController):
        self.controller = controller
        self._handlers = {
            NavigationKind.ENTER: controller.enter_at,
            NavigationKind.UP: controller.focus_up_from,
            NavigationKind.DOWN: controller.focus_down_from,
            NavigationKind.DELETE: controller.delete_out_from,
        }

    def handle(self, event: NavigationEvent):
        return self._handlers[NavigationKind(event.kind)](event.row_index)


__all__ = ["NavigationKind", "NavigationEvent", "NavigationBridge"]
