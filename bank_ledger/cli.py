"""
CLI interface for the bank ledger.

This module reads account and transfer files, runs the transfers and prints
a summary of every account.
"""

import logging
import sys
from decimal import Decimal

import click

from .loader import load_registry, load_transfers
from .processor import TransactionProcessor, summarize
from .reporting import registry_report

SEPARATOR = '*' * 76


class LedgerCLI:
    """CLI wrapper holding the run configuration."""

    def __init__(self, as_of=None):
        """Initialize CLI with the date treated as today."""
        self.as_of = as_of

    def format_currency(self, amount: Decimal) -> str:
        """Format currency for display."""
        if amount < 0:
            return f"-${-amount:,.2f}"
        return f"${amount:,.2f}"

    def format_rate(self, rate: Decimal) -> str:
        """Format a fractional rate as a percentage."""
        return f"{rate * 100:.2f}%"

    def echo_report(self, report: dict) -> None:
        """Print the summary of one account."""
        click.echo(f"{'*' * 18} Summary for Account {report['account_id']} {'*' * 18}")
        for txn in report['transactions']:
            click.echo('-' * 36)
            click.echo(f"Transaction ID: {txn.transaction_id}")
            click.echo(f"Date: {txn.date.isoformat()}")
            click.echo(f"Sender: {txn.sender_id}")
            click.echo(f"Receiver: {txn.receiver_id}")
            click.echo(f"Amount: {self.format_currency(txn.amount)}")
        if report['transactions']:
            click.echo('-' * 36)

        click.echo("Account Info")
        click.echo(f"{report['label']} - Account Number: {report['account_id']}")
        click.echo(f"Balance: {self.format_currency(report['balance'])}")
        if 'overdraft_limit' in report:
            click.echo(f"Overdraft Limit: {self.format_currency(report['overdraft_limit'])}")
        if 'interest_rate' in report:
            click.echo(f"Interest Rate: {self.format_rate(report['interest_rate'])}")
        if 'min_balance' in report:
            click.echo(f"Minimum Balance: {self.format_currency(report['min_balance'])}")
        if 'maturity_date' in report:
            click.echo(f"Maturity Date: {report['maturity_date'].isoformat()}")
            click.echo(f"Status: {report['status']}")
        click.echo(f"Total Received: {self.format_currency(report['total_in'])}")
        click.echo(f"Total Sent: {self.format_currency(report['total_out'])}")
        if report['interest'] is not None:
            click.echo(f"Projected Interest: {self.format_currency(report['interest'])}")
        click.echo("Account Risk Evaluation")
        click.echo(str(report['risk']))
        click.echo(SEPARATOR)


@click.group()
@click.option('--log-level', default='WARNING',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level')
@click.option('--as-of', type=click.DateTime(formats=['%Y-%m-%d']), default=None,
              help='Date treated as today (YYYY-MM-DD)')
@click.pass_context
def cli(ctx, log_level, as_of):
    """Bank Ledger CLI"""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    ctx.ensure_object(dict)
    ctx.obj['cli'] = LedgerCLI(as_of.date() if as_of else None)


@cli.command()
@click.argument('accounts_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('transfers_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--corrected-savings-penalty', is_flag=True, default=False,
              help='Deduct savings withdrawals once, plus penalty')
@click.pass_context
def process(ctx, accounts_file, transfers_file, corrected_savings_penalty):
    """Process transfers and print a summary of every account."""
    ledger_cli = ctx.obj['cli']

    try:
        overrides = {'double_deduction': False} if corrected_savings_penalty else {}
        registry = load_registry(accounts_file, **overrides)
        requests = load_transfers(transfers_file)
    except OSError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    processor = TransactionProcessor(registry, as_of=ledger_cli.as_of)
    results = processor.process_all(requests)
    summary = summarize(results)

    for result in summary['rejected']:
        click.echo(f"❌ {result.error}", err=True)
    for result in summary['inconsistent']:
        click.echo(f"⚠️ {result.request.receiver_id} was not credited: {result.deposit_error}", err=True)

    for report in registry_report(registry, on=ledger_cli.as_of):
        ledger_cli.echo_report(report)

    click.echo(f"Applied Transfers: {summary['applied_count']}")
    click.echo(f"Rejected Transfers: {summary['rejected_count']}")
    click.echo(f"Total Transferred: {ledger_cli.format_currency(summary['total_amount'])}")


@cli.command()
@click.argument('accounts_file', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def report(ctx, accounts_file):
    """Print the risk and interest of every account."""
    ledger_cli = ctx.obj['cli']

    try:
        registry = load_registry(accounts_file)
    except OSError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"{'Account':<12} {'Type':<22} {'Balance':>14} {'Interest':>14}  Risk")
    click.echo('-' * 90)
    for entry in registry_report(registry, on=ledger_cli.as_of):
        interest = entry['interest']
        click.echo(
            f"{entry['account_id']:<12} "
            f"{entry['label']:<22} "
            f"{ledger_cli.format_currency(entry['balance']):>14} "
            f"{ledger_cli.format_currency(interest) if interest is not None else '-':>14}  "
            f"{entry['risk'].level.value}"
        )


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == '__main__':
    main()
