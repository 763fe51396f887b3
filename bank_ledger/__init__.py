"""
Bank Ledger

An in-memory account ledger applying per-variant withdrawal, deposit and
risk rules to a sequence of inter-account transfers.
"""

__version__ = "0.1.0"
__author__ = "Developer"
__email__ = "dev@example.com"

from .exceptions import (
    BankError,
    InsufficientFunds,
    InvalidAmount,
    UnsupportedOperation,
    UnknownAccountType,
    AccountNotFound,
    DuplicateAccount,
)
from .models import (
    Account,
    AccountType,
    CurrentAccount,
    SavingsAccount,
    FixedDepositAccount,
    Ledger,
    RiskAssessment,
    RiskLevel,
    Transaction,
)
from .registry import AccountRecord, AccountRegistry, create_account
from .processor import TransactionProcessor, TransferRequest, TransferResult, TransferStatus, summarize
from .reporting import account_report, registry_report
from .loader import load_registry, load_transfers
from .cli import main


def process_files(accounts_file, transfers_file, as_of=None):
    """
    Load accounts and transfers from files and apply the transfers.

    Args:
        accounts_file: Path to the accounts file
        transfers_file: Path to the transfers file
        as_of: Date treated as today, defaults to the current date

    Returns:
        Tuple of (registry, transfer results)
    """
    registry = load_registry(accounts_file)
    processor = TransactionProcessor(registry, as_of=as_of)
    return registry, processor.process_all(load_transfers(transfers_file))


__all__ = [
    "BankError",
    "InsufficientFunds",
    "InvalidAmount",
    "UnsupportedOperation",
    "UnknownAccountType",
    "AccountNotFound",
    "DuplicateAccount",
    "Account",
    "AccountType",
    "CurrentAccount",
    "SavingsAccount",
    "FixedDepositAccount",
    "Ledger",
    "RiskAssessment",
    "RiskLevel",
    "Transaction",
    "AccountRecord",
    "AccountRegistry",
    "create_account",
    "TransactionProcessor",
    "TransferRequest",
    "TransferResult",
    "TransferStatus",
    "summarize",
    "account_report",
    "registry_report",
    "load_registry",
    "load_transfers",
    "process_files",
    "main",
]
