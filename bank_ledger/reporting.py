"""
Read-only account reports: balance, variant details, risk and interest.
"""

from datetime import date
from typing import List, Optional

from .models import Account, CurrentAccount, FixedDepositAccount, SavingsAccount
from .registry import AccountRegistry


def account_report(account: Account, on: Optional[date] = None) -> dict:
    """Build the report for a single account without modifying it."""
    today = on or date.today()
    report = {
        'account': account,
        'account_id': account.account_id,
        'account_type': account.account_type,
        'label': account.label,
        'balance': account.balance,
        'risk': account.evaluate_risk(on=today),
        'interest': None,
        'transactions': account.ledger.entries,
        'total_in': account.ledger.total_in(),
        'total_out': account.ledger.total_out(),
    }

    if account.account_type.earns_interest:
        report['interest'] = account.calculate_interest(on=today)

    if isinstance(account, CurrentAccount):
        report['overdraft_limit'] = account.overdraft_limit
    elif isinstance(account, SavingsAccount):
        report['interest_rate'] = account.interest_rate
        report['min_balance'] = account.min_balance
    elif isinstance(account, FixedDepositAccount):
        report['interest_rate'] = account.interest_rate
        report['term_in_months'] = account.term_in_months
        report['early_penalty_rate'] = account.early_penalty_rate
        report['start_date'] = account.start_date
        report['maturity_date'] = account.maturity_date
        report['status'] = 'Matured' if account.is_matured(today) else 'Active'

    return report


def registry_report(registry: AccountRegistry, on: Optional[date] = None) -> List[dict]:
    """Reports for every account in the registry, in registration order."""
    return [account_report(account, on=on) for account in registry]
