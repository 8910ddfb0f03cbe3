import argparse
import logging
import sys
from typing import List, Optional
import structlog

from config import Settings, get_settings
from errors import ReplayError
from repositories import InMemoryLedger
from reports import write_report
from services import TransactionProcessor, replay
from sources import CsvTransactionSource


def configure_logging(settings: Settings) -> None:
    """Route structlog through stdlib logging on stderr; stdout carries the report."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="replay-engine",
        description="Replay a CSV log of client transactions and print the final account balances",
    )
    parser.add_argument("path", help="path to the transactions CSV file")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {settings.app_version}",
    )
    return parser


def run(path: str, settings: Settings) -> int:
    ledger = InMemoryLedger()
    processor = TransactionProcessor()

    with CsvTransactionSource(path, delimiter=settings.csv_delimiter, encoding=settings.encoding) as source:
        replay(source, ledger, processor)

    # Only reached once the whole file replayed, so a fatal error leaves stdout empty
    return write_report(ledger.snapshot_accounts(), sys.stdout)


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    configure_logging(settings)

    args = build_parser(settings).parse_args(argv)

    logger.info("Starting replay", app=settings.app_name, path=args.path)
    try:
        rows = run(args.path, settings)
    except ReplayError as e:
        logger.debug("Replay aborted", path=args.path, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    logger.info("Report written", rows=rows)
    return 0


if __name__ == "__main__":
    sys.exit(main())
