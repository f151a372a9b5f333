"""
MathSheet Row Model
Value objects for the rows of an expression sheet.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from mathsheet.mode_detector import Mode
from mathsheet.result_classifier import Result, result_to_dict


@dataclass
class Row:
    """One line of the sheet: its input text and last computed result."""
    text: str = ""
    result: Optional[Result] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "result": result_to_dict(self.result)}


@dataclass
class Sheet:
    """Ordered rows plus the active evaluation mode. Never holds zero rows."""
    rows: List[Row] = field(default_factory=lambda: [Row()])
    mode: Mode = Mode.FLOAT
    mode_locked: bool = False

    def __post_init__(self):
        if not self.rows:
            self.rows.append(Row())

    def texts(self) -> List[str]:
        return [row.text for row in self.rows]

    def full_text(self) -> str:
        """Newline-joined row texts, as sent to the evaluator and saved to disk."""
        return "\n".join(self.texts())

    def replace_texts(self, texts: List[str]) -> None:
        self.rows = [Row(text) for text in texts] or [Row()]

    def clear_results(self) -> None:
        for row in self.rows:
            row.result = None
