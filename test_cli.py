import io

from mathsheet.cli import main


class FakeEvaluator:
    async def evaluate(self, mode, text):
        table = {
            ("float", "2+2"): {"Ok": "4"},
            ("float", "3 kg"): {"Err": {"DefinitionNotFoundError": "kg"}},
            ("units", "2+2"): {"Ok": "4"},
            ("units", "3 kg"): {"Ok": "3 kg"},
            ("units", "1/0"): {"Err": {"EvalError": "Division by zero"}},
        }
        return [table.get((mode.value, line), {"Ok": None}) for line in text.split("\n")]


def test_prints_each_line_with_result(tmp_path):
    path = tmp_path / "sheet.md"
    path.write_text("2+2\n\n3 kg\n1/0\n", encoding="utf-8")
    out = io.StringIO()

    assert main([str(path)], evaluator=FakeEvaluator(), out=out) == 0
    assert out.getvalue().splitlines() == [
        "2+2 = 4",
        "3 kg = 3 kg",
        "1/0: Error: Division by zero",
    ]


def test_missing_file(tmp_path):
    assert main([str(tmp_path / "missing.md")], evaluator=FakeEvaluator(), out=io.StringIO()) == 1
