"""
Exceptions for the bank ledger.

Every error here is a recoverable, per-request failure: the transaction
processor captures them into transfer results and ingestion logs and skips
them. None of them aborts a run.
"""


class BankError(Exception):
    """Base exception for all ledger errors."""
    pass


class InsufficientFunds(BankError):
    """Raised when a withdrawal violates the account's balance rules."""
    pass


class InvalidAmount(BankError):
    """Raised when a deposit amount is zero or negative."""
    pass


class UnsupportedOperation(BankError):
    """Raised when an account type does not allow an operation."""
    pass


class UnknownAccountType(BankError):
    """Raised when a variant tag does not name a known account type."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"Unknown account type: {tag}")


class AccountNotFound(BankError):
    """Raised when an account ID is not in the registry."""

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


class DuplicateAccount(BankError):
    """Raised when an account ID is already registered."""

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Duplicate account ID: {account_id}")
