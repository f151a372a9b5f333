"""
MathSheet File Operations
Opens and saves sheets as plain text, one row per line.
"""

import logging
import os
from pathlib import Path

from mathsheet.constants import SAVED_MESSAGE
from mathsheet.sheet_controller import SheetController

logger = logging.getLogger(__name__)


def save_to_file(controller: SheetController, file_path: str) -> bool:
    """
    Save the sheet's rows to a file.

    Args:
        controller (SheetController): Sheet to save
        file_path (str): Path to save the file

    Returns:
        bool: True if saved successfully
    """
    try:
        with open(file_path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(controller.full_text())
    except OSError as e:
        logger.error("Error saving sheet to %s: %s", file_path, e)
        return False

    logger.info("Saved %d rows to %s", len(controller.rows), file_path)
    controller.notify(SAVED_MESSAGE.format(name=Path(file_path).name))
    return True


def load_from_file(controller: SheetController, file_path: str) -> bool:
    """
    Replace the sheet's rows with the lines of a file.

    Args:
        controller (SheetController): Sheet to reinitialize
        file_path (str): Path to the file to load

    Returns:
        bool: True if loaded successfully
    """
    if not os.path.exists(file_path):
        logger.error("Sheet file not found: %s", file_path)
        return False

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Error loading sheet from %s: %s", file_path, e)
        return False

    controller.load_text(content, name=Path(file_path).name)
    logger.info("Loaded %d rows from %s", len(controller.rows), file_path)
    return True


__all__ = ["save_to_file", "load_from_file"]
