import pytest

from mathsheet.navigation import NavigationBridge, NavigationEvent, NavigationKind
from mathsheet.sheet_controller import SheetController


def make_bridge(content="a\nb\nc"):
    controller = SheetController(None)
    controller.load_text(content)
    return controller, NavigationBridge(controller)


def test_enter_on_last_row_appends():
    controller, bridge = make_bridge()
    bridge.handle(NavigationEvent(NavigationKind.ENTER, 2))
    assert [row.text for row in controller.rows] == ["a", "b", "c", ""]
    assert controller.focused_row == 3


def test_enter_in_middle_moves_focus_only():
    controller, bridge = make_bridge()
    bridge.handle(NavigationEvent(NavigationKind.ENTER, 1))
    assert len(controller.rows) == 3
    assert controller.focused_row == 2


def test_up_and_down_do_not_wrap():
    controller, bridge = make_bridge()
    assert bridge.handle(NavigationEvent(NavigationKind.UP, 0)) is False
    assert bridge.handle(NavigationEvent(NavigationKind.DOWN, 2)) is False
    assert bridge.handle(NavigationEvent(NavigationKind.DOWN, 0)) is True
    assert controller.focused_row == 1
    assert bridge.handle(NavigationEvent(NavigationKind.UP, 1)) is True
    assert controller.focused_row == 0


def test_delete_keeps_last_row():
    controller, bridge = make_bridge("only")
    assert bridge.handle(NavigationEvent(NavigationKind.DELETE, 0)) is False
    assert [row.text for row in controller.rows] == ["only"]


def test_delete_removes_row():
    controller, bridge = make_bridge()
    assert bridge.handle(NavigationEvent(NavigationKind.DELETE, 2)) is True
    assert [row.text for row in controller.rows] == ["a", "b"]
    assert controller.focused_row == 1


def test_event_from_widget_message():
    assert NavigationEvent.from_dict({"kind": "up", "row": 2}) == NavigationEvent(NavigationKind.UP, 2)
    assert NavigationEvent.from_dict({"kind": "delete", "row_index": 0}).kind is NavigationKind.DELETE


@pytest.mark.parametrize("message", [
    {"kind": "left", "row": 0},
    {"row": 0},
    {"kind": "enter"},
    {"kind": "enter", "row": "1"},
])
def test_invalid_widget_messages(message):
    with pytest.raises(ValueError):
        NavigationEvent.from_dict(message)
