import argparse
import logging
import sys
from typing import List, Optional

from payments_engine import MalformedRecordError, PaymentsEngine, write_accounts

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="payments-engine",
        description="Replay a transaction CSV and print final client balances as CSV.",
    )
    parser.add_argument("input_file", help="path to the input transactions CSV")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="fail on the first malformed row instead of skipping it",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="stderr log level (default: WARNING)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    engine = PaymentsEngine(strict=args.strict)
    try:
        accounts = engine.process_file(args.input_file)
    except OSError as e:
        logger.error(f"Cannot read {args.input_file}: {e}")
        return 1
    except MalformedRecordError as e:
        logger.error(f"Malformed input in {args.input_file}: {e}")
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
