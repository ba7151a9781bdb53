from dataclasses import dataclass
from decimal import Context, Decimal
from enum import Enum
from typing import Optional

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

# Largest magnitude representable by a 96-bit decimal mantissa.
MAX_AMOUNT = Decimal(2**96 - 1)
MIN_AMOUNT = Decimal(-(2**96 - 1))

ZERO = Decimal("0")

# Wide enough to hold MAX_AMOUNT plus fractional digits without rounding.
# No traps: an out-of-range result becomes Infinity and is then clamped.
_ARITHMETIC = Context(prec=64, traps=[])


def saturating_add(a: Decimal, b: Decimal) -> Decimal:
    """Add two amounts, clamping the result to [MIN_AMOUNT, MAX_AMOUNT]."""
    return min(max(_ARITHMETIC.add(a, b), MIN_AMOUNT), MAX_AMOUNT)


def saturating_sub(a: Decimal, b: Decimal) -> Decimal:
    """Subtract two amounts, clamping the result to [MIN_AMOUNT, MAX_AMOUNT]."""
    return min(max(_ARITHMETIC.subtract(a, b), MIN_AMOUNT), MAX_AMOUNT)


def saturating_move(amount: Decimal, raised=(), lowered=()) -> Decimal:
    """
    Clamp `amount` so that adding it to every value in `raised` and
    subtracting it from every value in `lowered` stays within
    [MIN_AMOUNT, MAX_AMOUNT].

    Applying one clamped amount to each side of a balance keeps the sides
    consistent with each other, where clamping each side separately would not.
    """
    low, high = MIN_AMOUNT, MAX_AMOUNT
    for value in raised:
        low = max(low, saturating_sub(MIN_AMOUNT, value))
        high = min(high, saturating_sub(MAX_AMOUNT, value))
    for value in lowered:
        low = max(low, saturating_sub(value, MAX_AMOUNT))
        high = min(high, saturating_sub(value, MIN_AMOUNT))
    return min(max(amount, low), high)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class ProcessingResult(Enum):
    SUCCESS = "success"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    @property
    def carries_amount(self) -> bool:
        return self.transaction_type.carries_amount

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    """
    Balance snapshot for one client.
    Every mutation moves `total` together with `available`/`held` so that
    total == available + held holds after each call.
    """

    client_id: int
    available: Decimal = ZERO
    held: Decimal = ZERO
    total: Decimal = ZERO
    locked: bool = False

    def credit(self, amount: Decimal) -> None:
        amount = saturating_move(amount, raised=(self.available, self.total))
        self.available = saturating_add(self.available, amount)
        self.total = saturating_add(self.total, amount)

    def debit(self, amount: Decimal) -> None:
        amount = saturating_move(amount, lowered=(self.available, self.total))
        self.available = saturating_sub(self.available, amount)
        self.total = saturating_sub(self.total, amount)

    def hold(self, amount: Decimal) -> None:
        amount = saturating_move(amount, raised=(self.held,), lowered=(self.available,))
        self.available = saturating_sub(self.available, amount)
        self.held = saturating_add(self.held, amount)

    def release_hold(self, amount: Decimal) -> None:
        amount = saturating_move(amount, raised=(self.available,), lowered=(self.held,))
        self.held = saturating_sub(self.held, amount)
        self.available = saturating_add(self.available, amount)

    def charge_back(self, amount: Decimal) -> None:
        """Remove held funds from the account and lock it permanently."""
        amount = saturating_move(amount, lowered=(self.held, self.total))
        self.held = saturating_sub(self.held, amount)
        self.total = saturating_sub(self.total, amount)
        self.locked = True


@dataclass
class HistoryEntry:
    """Amount and dispute status of an accepted deposit or withdrawal."""

    client_id: int
    amount: Decimal
    disputed: bool = False


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.processed = 0
        self.ignored = 0
        self.malformed = 0

    def record_result(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.SUCCESS:
            self.processed += 1
        else:
            self.ignored += 1

    def record_malformed(self) -> None:
        self.malformed += 1

    def __repr__(self) -> str:
        return f"Processed: {self.processed}, Ignored: {self.ignored}, Malformed: {self.malformed}"
