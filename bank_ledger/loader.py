"""
Loading accounts and transfers from comma-separated text files.

Account rows:
    id,current,balance,overdraftLimit
    id,saving,balance,interestRate,minBalance
    id,deposit,balance,interestRate,termInMonths,penalty,YYYY-MM-DD

Transfer rows:
    senderID,amount,receiverID

Malformed rows are logged and skipped.
"""

import csv
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, List

from .exceptions import UnknownAccountType
from .models import AccountType
from .processor import TransferRequest
from .registry import AccountRecord, AccountRegistry

logger = logging.getLogger(__name__)


def parse_amount(value: str) -> Decimal:
    """Parse a decimal amount, rejecting NaN and infinities."""
    amount = Decimal(value)
    if not amount.is_finite():
        raise ValueError(f"Amount must be a finite number: {value!r}")
    return amount


VARIANT_FIELDS = {
    AccountType.CURRENT: [('overdraft_limit', parse_amount)],
    AccountType.SAVINGS: [('interest_rate', parse_amount), ('min_balance', parse_amount)],
    AccountType.FIXED_DEPOSIT: [
        ('interest_rate', parse_amount),
        ('term_in_months', int),
        ('early_penalty_rate', parse_amount),
        ('start_date', date.fromisoformat),
    ],
}


def _rows(lines: Iterable[str]):
    for line_number, row in enumerate(csv.reader(lines), start=1):
        row = [value.strip() for value in row]
        if not any(row):
            continue
        yield line_number, row


def parse_account_rows(lines: Iterable[str]) -> List[AccountRecord]:
    """Parse account rows into records; unknown variants are kept as-is."""
    records = []
    for line_number, row in _rows(lines):
        if len(row) < 3:
            logger.warning(f"Skipping account line {line_number}: expected at least 3 fields")
            continue

        account_id, variant, balance = row[:3]
        try:
            account_type = AccountType.from_tag(variant)
        except UnknownAccountType:
            # the registry reports these when it builds the accounts
            records.append(AccountRecord(account_id, variant, balance))
            continue

        spec = VARIANT_FIELDS[account_type]
        values = row[3:]
        if len(values) != len(spec):
            logger.warning(
                f"Skipping account line {line_number}: {account_type.value} "
                f"expects {len(spec) + 3} fields, got {len(row)}"
            )
            continue

        try:
            fields = {name: convert(value) for (name, convert), value in zip(spec, values)}
            record = AccountRecord(account_id, variant, parse_amount(balance), fields)
        except (InvalidOperation, ValueError) as e:
            logger.warning(f"Skipping account line {line_number}: {e}")
            continue
        records.append(record)
    return records


def parse_transfer_rows(lines: Iterable[str]) -> List[TransferRequest]:
    """Parse transfer rows into requests, in file order."""
    requests = []
    for line_number, row in _rows(lines):
        if len(row) != 3:
            logger.warning(f"Skipping transfer line {line_number}: expected 3 fields, got {len(row)}")
            continue

        sender_id, amount, receiver_id = row
        try:
            requests.append(TransferRequest(sender_id, parse_amount(amount), receiver_id))
        except (InvalidOperation, ValueError):
            logger.warning(f"Skipping transfer line {line_number}: invalid amount {amount!r}")
    return requests


def load_registry(path, **overrides) -> AccountRegistry:
    """Read an accounts file and build the registry."""
    with open(Path(path), newline='', encoding='utf-8') as f:
        records = parse_account_rows(f)
    return AccountRegistry.from_records(records, **overrides)


def load_transfers(path) -> List[TransferRequest]:
    """Read a transfers file."""
    with open(Path(path), newline='', encoding='utf-8') as f:
        return parse_transfer_rows(f)
