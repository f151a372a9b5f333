from mathsheet.sheet_controller import SheetController
from mathsheet.sheet_io import load_from_file, save_to_file


def notifications(controller):
    messages = []
    controller.add_listener(
        lambda event, payload: messages.append(payload["message"]) if event == "notification" else None)
    return messages


def test_save_then_open_round_trip(tmp_path):
    path = tmp_path / "sheet.md"
    source = SheetController(None)
    source.load_text("x = 2\nx^2\n")
    messages = notifications(source)

    assert save_to_file(source, str(path)) is True
    assert path.read_text(encoding="utf-8") == "x = 2\nx^2\n"
    assert messages == ["Saved sheet.md"]

    target = SheetController(None)
    target_messages = notifications(target)
    assert load_from_file(target, str(path)) is True
    assert [row.text for row in target.rows] == ["x = 2", "x^2", ""]
    assert target_messages == ["Opened sheet.md"]


def test_open_empty_file_resets_to_one_row(tmp_path):
    path = tmp_path / "empty.md"
    path.write_text("", encoding="utf-8")
    controller = SheetController(None)
    controller.load_text("a\nb")
    assert load_from_file(controller, str(path)) is True
    assert [row.text for row in controller.rows] == [""]


def test_open_missing_file(tmp_path):
    controller = SheetController(None)
    controller.edit_row(0, "keep")
    assert load_from_file(controller, str(tmp_path / "missing.md")) is False
    assert [row.text for row in controller.rows] == ["keep"]


def test_save_to_unwritable_path(tmp_path):
    controller = SheetController(None)
    assert save_to_file(controller, str(tmp_path / "no_such_dir" / "sheet.md")) is False
