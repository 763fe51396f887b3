"""
Data models for the bank ledger.

This module contains the account variants, their transaction ledgers and
the risk classification they report. Amounts are kept as Decimal; any
int, float or string passed in is converted through its string form.
"""

import calendar
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Iterator, List, Optional, Tuple

from .exceptions import InsufficientFunds, InvalidAmount, UnsupportedOperation, UnknownAccountType

SAVINGS_PENALTY_RATE = Decimal('0.05')
DAYS_IN_YEAR = 365


def to_decimal(value) -> Decimal:
    """Convert an amount to Decimal."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def add_months(start: date, months: int) -> date:
    """Add calendar months to a date, clamping the day to the month's end."""
    month = start.month - 1 + months
    year = start.year + month // 12
    month = month % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class AccountType(Enum):
    """Variant tags of the closed set of account kinds."""
    CURRENT = "current"
    SAVINGS = "saving"
    FIXED_DEPOSIT = "deposit"

    @classmethod
    def from_tag(cls, tag) -> "AccountType":
        """Look up a variant by its tag, ignoring case."""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(str(tag).strip().lower())
        except ValueError:
            raise UnknownAccountType(str(tag))

    @property
    def earns_interest(self) -> bool:
        return self in (AccountType.SAVINGS, AccountType.FIXED_DEPOSIT)


class RiskLevel(Enum):
    """Risk classification of an account."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class RiskAssessment:
    """Result of evaluating an account's risk."""

    label: str
    level: RiskLevel
    message: str

    def __str__(self) -> str:
        return f"{self.label}-{self.level.value} Risk: {self.message}"


@dataclass(frozen=True)
class Transaction:
    """One side of a transfer, as recorded on a single account's ledger."""

    sender_id: str
    receiver_id: str
    amount: Decimal
    date: date
    transaction_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        """Normalize the amount to Decimal."""
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', to_decimal(self.amount))


class Ledger:
    """Append-only list of transactions, in the order they were applied."""

    def __init__(self):
        self._entries: List[Transaction] = []

    def append(self, transaction: Transaction) -> None:
        self._entries.append(transaction)

    @property
    def entries(self) -> Tuple[Transaction, ...]:
        return tuple(self._entries)

    def total_in(self) -> Decimal:
        """Sum of all positive entries."""
        return sum((t.amount for t in self._entries if t.amount > 0), Decimal('0'))

    def total_out(self) -> Decimal:
        """Sum of all negative entries, as a positive number."""
        return -sum((t.amount for t in self._entries if t.amount < 0), Decimal('0'))

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Ledger({len(self._entries)} entries)"


@dataclass
class Account(ABC):
    """Base class for all account variants."""

    account_type: ClassVar[AccountType]
    label: ClassVar[str]

    account_id: str
    balance: Decimal = Decimal('0.00')
    ledger: Ledger = field(default_factory=Ledger, repr=False, compare=False)

    def __post_init__(self):
        """Validate identity and normalize amounts."""
        if not self.account_id or not str(self.account_id).strip():
            raise ValueError("Account ID cannot be empty")
        self.balance = to_decimal(self.balance)

    @abstractmethod
    def withdraw(self, amount, on: Optional[date] = None) -> None:
        """Withdraw money, raising InsufficientFunds if the rules forbid it."""

    @abstractmethod
    def deposit(self, amount) -> None:
        """Deposit money into the account."""

    @abstractmethod
    def evaluate_risk(self, on: Optional[date] = None) -> RiskAssessment:
        """Classify the account's current risk."""

    def record_transaction(self, sender_id: str, receiver_id: str, amount,
                           on: Optional[date] = None) -> Transaction:
        """Append a transaction to this account's ledger."""
        transaction = Transaction(
            sender_id=sender_id,
            receiver_id=receiver_id,
            amount=to_decimal(amount),
            date=on or date.today()
        )
        self.ledger.append(transaction)
        return transaction

    def _risk(self, level: RiskLevel, message: str) -> RiskAssessment:
        return RiskAssessment(self.label, level, message)


class _DepositMixin:
    """Deposits for variants that accept any positive amount."""

    def deposit(self, amount) -> None:
        amount = to_decimal(amount)
        if amount <= 0:
            raise InvalidAmount(f"Invalid deposit amount: {amount}")
        self.balance += amount


@dataclass
class CurrentAccount(_DepositMixin, Account):
    """Account that may be overdrawn down to (but not onto) its limit."""

    account_type: ClassVar[AccountType] = AccountType.CURRENT
    label: ClassVar[str] = "Current Account"

    overdraft_limit: Decimal = Decimal('0.00')

    def __post_init__(self):
        super().__post_init__()
        self.overdraft_limit = to_decimal(self.overdraft_limit)
        if self.overdraft_limit < 0:
            raise ValueError("Overdraft limit cannot be negative")

    def withdraw(self, amount, on: Optional[date] = None) -> None:
        amount = to_decimal(amount)
        # touching the limit is rejected as well
        if self.balance - amount <= -self.overdraft_limit:
            raise InsufficientFunds(
                f"Current Account: Amount exceeds overdraft limit. "
                f"Amount: {amount} Balance: {self.balance} Limit: {self.overdraft_limit}"
            )
        self.balance -= amount

    def evaluate_risk(self, on: Optional[date] = None) -> RiskAssessment:
        if self.balance < 0:
            return self._risk(RiskLevel.MEDIUM, "Account is in overdraft.")
        return self._risk(RiskLevel.LOW, "Account is stable.")


@dataclass
class SavingsAccount(_DepositMixin, Account):
    """
    Interest-bearing account with a minimum balance.

    Withdrawals that leave the balance under the minimum are charged a
    penalty of 5% of the shortfall. With double_deduction set (the default)
    the amount is deducted once on its own and once more together with the
    penalty; clear it to deduct amount plus penalty a single time.
    """

    account_type: ClassVar[AccountType] = AccountType.SAVINGS
    label: ClassVar[str] = "Saving Account"

    interest_rate: Decimal = Decimal('0.00')
    min_balance: Decimal = Decimal('0.00')
    double_deduction: bool = True

    def __post_init__(self):
        super().__post_init__()
        self.interest_rate = to_decimal(self.interest_rate)
        self.min_balance = to_decimal(self.min_balance)
        if not 0 <= self.interest_rate <= 1:
            raise ValueError("Interest rate must be between 0 and 1")
        if self.min_balance < 0:
            raise ValueError("Minimum balance cannot be negative")

    def withdraw(self, amount, on: Optional[date] = None) -> None:
        amount = to_decimal(amount)
        if amount > self.min_balance + self.balance:
            raise InsufficientFunds(
                f"Saving Account: Amount exceeds available funds. "
                f"Amount: {amount} Balance: {self.balance} Minimum: {self.min_balance}"
            )

        projected = self.balance - amount
        if projected < self.min_balance:
            penalty = (self.min_balance - projected) * SAVINGS_PENALTY_RATE
            if self.double_deduction:
                self.balance -= amount
            self.balance -= amount + penalty
        else:
            self.balance -= amount

    def calculate_interest(self, on: Optional[date] = None) -> Decimal:
        """Interest = balance x interest rate."""
        return self.balance * self.interest_rate

    def evaluate_risk(self, on: Optional[date] = None) -> RiskAssessment:
        if self.balance < self.min_balance:
            return self._risk(RiskLevel.MEDIUM, "Balance is below minimum.")
        return self._risk(RiskLevel.LOW, "Account is stable.")


@dataclass
class FixedDepositAccount(Account):
    """Term deposit: no deposits, penalized withdrawals before maturity."""

    account_type: ClassVar[AccountType] = AccountType.FIXED_DEPOSIT
    label: ClassVar[str] = "Fixed Deposit Account"

    interest_rate: Decimal = Decimal('0.00')
    term_in_months: int = 12
    early_penalty_rate: Decimal = Decimal('0.00')
    start_date: Optional[date] = None

    def __post_init__(self):
        super().__post_init__()
        if self.start_date is None:
            self.start_date = date.today()
        self.interest_rate = to_decimal(self.interest_rate)
        self.early_penalty_rate = to_decimal(self.early_penalty_rate)
        self.term_in_months = int(self.term_in_months)
        if not 0 <= self.interest_rate <= 1:
            raise ValueError("Interest rate must be between 0 and 1")
        if not 0 <= self.early_penalty_rate <= 1:
            raise ValueError("Early withdrawal penalty rate must be between 0 and 1")
        if self.term_in_months <= 0:
            raise ValueError("Term must be at least one month")

    @property
    def maturity_date(self) -> date:
        return add_months(self.start_date, self.term_in_months)

    def is_matured(self, on: Optional[date] = None) -> bool:
        return (on or date.today()) >= self.maturity_date

    def days_to_maturity(self, on: Optional[date] = None) -> int:
        """Days left until maturity; zero or negative once matured."""
        return (self.maturity_date - (on or date.today())).days

    def withdraw(self, amount, on: Optional[date] = None) -> None:
        amount = to_decimal(amount)
        if not self.is_matured(on):
            total = amount + amount * self.early_penalty_rate
            if total > self.balance:
                raise InsufficientFunds(
                    "Fixed Deposit Account: Insufficient funds including penalty charges."
                )
            self.balance -= total
        else:
            if amount > self.balance:
                raise InsufficientFunds("Fixed Deposit Account: Insufficient funds.")
            self.balance -= amount

    def deposit(self, amount) -> None:
        raise UnsupportedOperation("Deposits are not allowed in Fixed Deposit Accounts.")

    def calculate_interest(self, on: Optional[date] = None) -> Decimal:
        """Simple interest on the balance for the days left until maturity."""
        days = self.days_to_maturity(on)
        if days <= 0:
            return Decimal('0')
        return self.balance * self.interest_rate * days / DAYS_IN_YEAR

    def evaluate_risk(self, on: Optional[date] = None) -> RiskAssessment:
        if self.is_matured(on):
            return self._risk(RiskLevel.HIGH, "Account has matured.")
        return self._risk(RiskLevel.LOW, "Account is active.")


ACCOUNT_CLASSES = {
    AccountType.CURRENT: CurrentAccount,
    AccountType.SAVINGS: SavingsAccount,
    AccountType.FIXED_DEPOSIT: FixedDepositAccount,
}
