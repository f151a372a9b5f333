"""
MathSheet - interactive multi-line expression sheet.
"""

from mathsheet.constants import APP_VERSION as __version__
from mathsheet.mode_detector import Mode, detect
from mathsheet.result_classifier import classify
from mathsheet.sheet_controller import SheetController, FocusAfterDelete
from mathsheet.navigation import NavigationBridge, NavigationEvent, NavigationKind

__all__ = [
    "Mode", "detect", "classify", "SheetController", "FocusAfterDelete",
    "NavigationBridge", "NavigationEvent", "NavigationKind",
]
