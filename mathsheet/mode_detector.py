"""
MathSheet Mode Detector
Decides whether an undefined symbol reported by the evaluator means the
sheet is written for a different evaluation mode.
"""

from enum import Enum
from typing import Optional

from mathsheet.constants import IMAGINARY_UNIT, UNIT_SYMBOLS


class Mode(str, Enum):
    """Evaluation domain; selects the evaluator entry point."""
    FLOAT = "float"
    COMPLEX = "complex"
    UNITS = "units"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def detect(symbol: str) -> Optional[Mode]:
    """
    Suggest the evaluation mode implied by a missing symbol.

    Args:
        symbol (str): Symbol from a "definition not found" error

    Returns:
        Mode: COMPLEX for the imaginary unit, UNITS for a known unit symbol,
        otherwise None (no change suggested)
    """
    if symbol == IMAGINARY_UNIT:
        return Mode.COMPLEX
    if symbol in UNIT_SYMBOLS:
        return Mode.UNITS
    return None


__all__ = ["Mode", "detect"]
