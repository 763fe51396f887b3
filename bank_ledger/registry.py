"""
Account registry for the bank ledger.

The registry owns every account for the duration of a run and is the only
place accounts are looked up by ID.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, Union

from .exceptions import AccountNotFound, DuplicateAccount, UnknownAccountType
from .models import ACCOUNT_CLASSES, Account, AccountType

logger = logging.getLogger(__name__)


@dataclass
class AccountRecord:
    """A parsed account row, before it becomes an Account."""

    account_id: str
    variant: str
    # raw text for variants the loader does not know
    balance: Union[Decimal, str] = Decimal('0')
    fields: Dict[str, object] = field(default_factory=dict)


def create_account(variant, account_id: str, balance=0, **fields) -> Account:
    """
    Create an account of the given variant.

    Args:
        variant: AccountType or its tag ("current", "saving", "deposit")
        account_id: Unique account identifier
        balance: Opening balance
        **fields: Variant-specific fields

    Returns:
        A new Account instance

    Raises:
        UnknownAccountType: If the variant tag is not recognized
    """
    account_type = AccountType.from_tag(variant)
    account_class = ACCOUNT_CLASSES[account_type]
    return account_class(account_id=account_id, balance=balance, **fields)


class AccountRegistry:
    """Maps account IDs to accounts; duplicate IDs are rejected."""

    def __init__(self):
        self._accounts: Dict[str, Account] = {}

    @classmethod
    def from_records(cls, records: Iterable[AccountRecord], **overrides) -> "AccountRegistry":
        """
        Build a registry from parsed account records.

        Unknown variants and duplicate IDs are skipped with a warning; the
        first account registered under an ID is kept. Extra keyword
        arguments are passed to every account whose variant accepts them.
        """
        registry = cls()
        for record in records:
            try:
                account_type = AccountType.from_tag(record.variant)
            except UnknownAccountType as e:
                logger.warning(f"Skipping account {record.account_id}: {e}")
                continue

            account_fields = dict(record.fields)
            for name, value in overrides.items():
                if name in ACCOUNT_CLASSES[account_type].__dataclass_fields__:
                    account_fields[name] = value

            try:
                account = create_account(account_type, record.account_id, record.balance,
                                         **account_fields)
                registry.add(account)
            except DuplicateAccount as e:
                logger.warning(f"Skipping account: {e}")
            except (InvalidOperation, ValueError) as e:
                logger.warning(f"Skipping account {record.account_id}: {e}")
        return registry

    def add(self, account: Account) -> Account:
        """Register an account, raising DuplicateAccount if its ID is taken."""
        if account.account_id in self._accounts:
            raise DuplicateAccount(account.account_id)
        self._accounts[account.account_id] = account
        logger.debug(f"Registered {account.label} {account.account_id}")
        return account

    def get(self, account_id: str) -> Account:
        """Get an account by ID, raising AccountNotFound if absent."""
        account = self._accounts.get(account_id)
        if account is None:
            raise AccountNotFound(account_id)
        return account

    def __contains__(self, account_id: str) -> bool:
        return account_id in self._accounts

    def __iter__(self) -> Iterator[Account]:
        return iter(self._accounts.values())

    def __len__(self) -> int:
        return len(self._accounts)
