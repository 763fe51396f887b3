"""
Transaction processor for the bank ledger.

This module applies transfer requests against an account registry, strictly
in input order. A rejected request never stops the run.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, List, Optional

from .exceptions import BankError
from .models import to_decimal
from .registry import AccountRegistry

logger = logging.getLogger(__name__)


class TransferStatus(Enum):
    """Lifecycle of a transfer request."""
    PENDING = "pending"
    APPLIED = "applied"
    REJECTED = "rejected"


@dataclass(frozen=True)
class TransferRequest:
    """A request to move money from one account to another."""

    sender_id: str
    amount: Decimal
    receiver_id: str

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', to_decimal(self.amount))


@dataclass
class TransferResult:
    """Outcome of processing one transfer request."""

    request: TransferRequest
    status: TransferStatus = TransferStatus.PENDING
    error: Optional[BankError] = None
    deposit_error: Optional[BankError] = None

    @property
    def applied(self) -> bool:
        return self.status is TransferStatus.APPLIED

    @property
    def inconsistent(self) -> bool:
        """Sender was debited but the receiver refused the deposit."""
        return self.applied and self.deposit_error is not None


class TransactionProcessor:
    """Applies transfers between accounts of a registry."""

    def __init__(self, registry: AccountRegistry, as_of: Optional[date] = None):
        """
        Initialize the processor.

        Args:
            registry: Registry holding every account of the run
            as_of: Date treated as today for all account operations
        """
        self.registry = registry
        self.as_of = as_of

    def process(self, request: TransferRequest) -> TransferResult:
        """Apply a single transfer request."""
        result = TransferResult(request=request)
        today = self.as_of or date.today()

        try:
            sender = self.registry.get(request.sender_id)
            receiver = self.registry.get(request.receiver_id)
            sender.withdraw(request.amount, on=today)
        except BankError as e:
            result.status = TransferStatus.REJECTED
            result.error = e
            logger.info(
                f"Rejected transfer {request.sender_id} -> {request.receiver_id} "
                f"of {request.amount}: {e}"
            )
            return result

        sender.record_transaction(request.sender_id, request.receiver_id, -request.amount, on=today)
        receiver.record_transaction(request.sender_id, request.receiver_id, request.amount, on=today)

        # no rollback: the sender stays debited if the receiver refuses
        try:
            receiver.deposit(request.amount)
        except BankError as e:
            result.deposit_error = e
            logger.warning(
                f"Transfer {request.sender_id} -> {request.receiver_id} of {request.amount} "
                f"debited the sender but was not credited: {e}"
            )

        result.status = TransferStatus.APPLIED
        return result

    def process_all(self, requests: Iterable[TransferRequest]) -> List[TransferResult]:
        """Apply transfer requests one after another, in order."""
        return [self.process(request) for request in requests]


def summarize(results: Iterable[TransferResult]) -> dict:
    """
    Summarize a batch of transfer results.

    Returns:
        Dictionary with the applied amount total, counts and result lists
    """
    applied = []
    rejected = []
    total_amount = Decimal('0.00')

    for result in results:
        if result.applied:
            applied.append(result)
            total_amount += result.request.amount
        else:
            rejected.append(result)

    return {
        'total_amount': total_amount,
        'applied_count': len(applied),
        'rejected_count': len(rejected),
        'applied': applied,
        'rejected': rejected,
        'inconsistent': [r for r in applied if r.inconsistent],
    }
