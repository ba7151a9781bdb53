import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional, TextIO

from models import (
    MAX_AMOUNT,
    MAX_CLIENT_ID,
    MAX_TRANSACTION_ID,
    ClientAccount,
    ProcessingStats,
    Transaction,
    TransactionType,
)
from state_manager import LedgerState
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


class MalformedRecordError(ValueError):
    """Raised when an input row cannot be turned into a Transaction."""


def _parse_bounded_int(value: str, field: str, maximum: int) -> int:
    number = int(value)
    if not 0 <= number <= maximum:
        raise MalformedRecordError(f"{field} {number} out of range 0..{maximum}")
    return number


def parse_csv_row(row: Dict[Optional[str], Optional[str]]) -> Transaction:
    """Parse CSV row into Transaction."""
    try:
        # DictReader puts surplus fields under a None key and pads short rows with None.
        normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_bounded_int(normalized["client"], "client", MAX_CLIENT_ID)
        transaction_id = _parse_bounded_int(normalized["tx"], "tx", MAX_TRANSACTION_ID)

        amount = None
        amount_str = normalized.get("amount", "")
        if amount_str and transaction_type.carries_amount:
            amount = Decimal(amount_str)
            if not amount.is_finite():
                raise MalformedRecordError(f"amount {amount_str!r} is not a finite number")
            if amount.copy_abs() > MAX_AMOUNT:
                raise MalformedRecordError(f"amount {amount_str!r} out of range -{MAX_AMOUNT}..{MAX_AMOUNT}")
    except MalformedRecordError:
        raise
    except (KeyError, ValueError, InvalidOperation) as e:
        raise MalformedRecordError(f"Failed to parse row {row}: {e!r}") from e

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def read_transactions(stream: TextIO, strict: bool = False, stats: Optional[ProcessingStats] = None) -> Iterator[Transaction]:
    """
    Yield transactions from a CSV stream with a `type, client, tx, amount` header.

    Malformed rows are logged and skipped, or raise MalformedRecordError when
    `strict` is set.
    """
    reader = csv.DictReader(stream)
    for row in reader:
        try:
            yield parse_csv_row(row)
        except MalformedRecordError as e:
            if strict:
                raise MalformedRecordError(f"line {reader.line_num}: {e}") from e
            logger.warning(f"Skipping line {reader.line_num}: {e}")
            if stats is not None:
                stats.record_malformed()


def format_decimal(value: Decimal) -> str:
    """Format decimal in fixed-point notation, keeping the scale it was computed with."""
    return f"{value:f}"


def write_accounts(accounts: Dict[int, ClientAccount], stream: TextIO) -> None:
    """Write final account states as CSV, one row per client ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])


class PaymentsEngine:
    """
    Reads a transaction CSV file and replays it through a TransactionProcessor.
    """

    def __init__(self, strict: bool = False):
        self._strict = strict
        self._state = LedgerState()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        with open(filepath, "r", newline="") as f:
            return self.process_stream(f)

    def process_stream(self, stream: TextIO) -> Dict[int, ClientAccount]:
        """Process an open CSV stream and return final account states."""
        logger.info("Starting processing")

        for transaction in read_transactions(stream, strict=self._strict, stats=self._stats):
            result = self._processor.process_transaction(transaction)
            self._stats.record_result(result)

        logger.info(f"Processing complete. {self._stats}")
        return self._state.get_all_accounts()
