from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from datareview import __version__
from datareview.app import (
    generate_report,
    run_consulate_check,
    run_detention_check,
    run_legal_aid_check,
)
from datareview.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Coroutine, Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Quarterly data review: check stored contact data against public sources",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("consulates", help="Check consulates against their websites and Nominatim")
    subparsers.add_parser(
        "detention-facilities",
        help="Check detention facilities against the ICE facility list",
    )
    subparsers.add_parser("legal-aid", help="Check legal aid organizations against EOIR and LSC")
    subparsers.add_parser("report", help="Merge the diff files into a GitHub issue")
    return parser.parse_args(list(argv))


def _command(name: str) -> Coroutine[object, object, object]:
    if name == "consulates":
        return run_consulate_check()
    if name == "detention-facilities":
        return run_detention_check()
    if name == "legal-aid":
        return run_legal_aid_check()
    if name == "report":
        return generate_report()
    raise ValueError(f"Unsupported command: {name}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        asyncio.run(_command(parsed_args.command))
    except Exception:
        log.exception("Fatal error in %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run(argv: Sequence[str] | None = None) -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main(argv)


def consulates() -> None:
    run(["consulates"])


def detention_facilities() -> None:
    run(["detention-facilities"])


def legal_aid() -> None:
    run(["legal-aid"])


def report() -> None:
    run(["report"])


if __name__ == "__main__":
    run()
