"""
MathSheet command line
Evaluates a sheet file through the evaluation service and prints each line
with its result.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, TextIO

from mathsheet.config import get_config
from mathsheet.constants import APP_NAME, APP_VERSION
from mathsheet.evaluation_client import HttpEvaluationService
from mathsheet.logging_config import setup_logging
from mathsheet.mode_detector import Mode
from mathsheet.result_classifier import Err
from mathsheet.sheet_controller import SheetController
from mathsheet.sheet_io import load_from_file

logger = logging.getLogger(__name__)


def format_rows(controller: SheetController) -> List[str]:
    """One output line per non-blank row."""
    lines = []
    for row in controller.rows:
        if not row.text.strip():
            continue
        if row.result is None:
            lines.append(row.text)
        elif isinstance(row.result, Err):
            lines.append(f"{row.text}: Error: {row.result.display}")
        else:
            lines.append(f"{row.text} = {row.result.display}")
    return lines


async def evaluate_file(controller: SheetController, file_path: str) -> bool:
    if not load_from_file(controller, file_path):
        return False
    try:
        await controller.flush()
    finally:
        await controller.close()
    return True


def _print_notification(event: str, payload) -> None:
    if event == "notification":
        print(payload["message"], file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    config = get_config()
    parser = argparse.ArgumentParser(
        prog="mathsheet", description="Evaluate every line of a sheet file.")
    parser.add_argument("file", help="Sheet file, one expression per line")
    parser.add_argument("--mode", choices=[mode.value for mode in Mode], default=Mode.FLOAT.value,
                        help="Initial evaluation mode (switched automatically once if needed)")
    parser.add_argument("--evaluator", default=config.EVALUATOR_URL, help="Evaluation service URL")
    parser.add_argument("--timeout", type=float, default=config.EVALUATION_TIMEOUT,
                        help="Evaluation timeout in seconds")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    return parser


def main(argv: Optional[List[str]] = None, evaluator=None, out: Optional[TextIO] = None) -> int:
    args = build_parser().parse_args(argv)
    out = out or sys.stdout
    setup_logging(args.log_level)

    if evaluator is None:
        evaluator = HttpEvaluationService(args.evaluator, args.timeout)
    controller = SheetController(evaluator, timeout=args.timeout, mode=Mode(args.mode))
    controller.add_listener(_print_notification)

    if not asyncio.run(evaluate_file(controller, args.file)):
        print(f"Unable to read {args.file}", file=sys.stderr)
        return 1
    logger.debug("Evaluated %s in %s mode", args.file, controller.mode.value)

    for line in format_rows(controller):
        print(line, file=out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
