"""
Tests for the processor module.

This module contains tests for applying transfers: rejection isolation,
ledger entries on both sides, ordering and receiver deposit failures.
"""

import logging
import pytest
from datetime import date
from decimal import Decimal

from bank_ledger.exceptions import AccountNotFound, InsufficientFunds, UnsupportedOperation
from bank_ledger.models import CurrentAccount, FixedDepositAccount, SavingsAccount
from bank_ledger.processor import TransactionProcessor, TransferRequest, TransferStatus, summarize
from bank_ledger.registry import AccountRegistry

AS_OF = date(2024, 6, 1)


@pytest.fixture
def registry():
    registry = AccountRegistry()
    registry.add(CurrentAccount("C1", Decimal('100'), overdraft_limit=Decimal('50')))
    registry.add(SavingsAccount("S1", Decimal('200'), interest_rate=Decimal('0.03'), min_balance=Decimal('50')))
    registry.add(FixedDepositAccount(
        "F1", Decimal('1000'), interest_rate=Decimal('0.05'), term_in_months=12,
        early_penalty_rate=Decimal('0.1'), start_date=date(2024, 1, 1)
    ))
    return registry


@pytest.fixture
def processor(registry):
    return TransactionProcessor(registry, as_of=AS_OF)


class TestTransferRequest:
    """Test TransferRequest."""

    def test_amount_converted(self):
        request = TransferRequest("C1", "12.50", "S1")
        assert request.amount == Decimal('12.50')


class TestTransactionProcessor:
    """Test TransactionProcessor.process."""

    def test_successful_transfer(self, processor, registry):
        result = processor.process(TransferRequest("C1", Decimal('30'), "S1"))

        assert result.status is TransferStatus.APPLIED
        assert result.error is None
        assert registry.get("C1").balance == Decimal('70')
        assert registry.get("S1").balance == Decimal('230')

        sent = registry.get("C1").ledger.entries
        received = registry.get("S1").ledger.entries
        assert len(sent) == 1 and len(received) == 1
        assert sent[0].amount == Decimal('-30')
        assert received[0].amount == Decimal('30')
        assert sent[0].sender_id == received[0].sender_id == "C1"
        assert sent[0].receiver_id == received[0].receiver_id == "S1"
        assert sent[0].date == AS_OF
        assert sent[0] is not received[0]

    def test_savings_sender_double_deduction(self, processor, registry):
        """Savings 200 with minimum 50 sends 160: balance ends at -120.5."""
        result = processor.process(TransferRequest("S1", Decimal('160'), "C1"))

        assert result.applied
        assert registry.get("S1").balance == Decimal('-120.5')
        assert registry.get("C1").balance == Decimal('260')

    def test_unknown_receiver_rejected(self, processor, registry):
        result = processor.process(TransferRequest("C1", Decimal('10'), "X9"))

        assert result.status is TransferStatus.REJECTED
        assert isinstance(result.error, AccountNotFound)
        assert result.error.account_id == "X9"
        assert registry.get("C1").balance == Decimal('100')
        assert len(registry.get("C1").ledger) == 0

    def test_unknown_sender_rejected(self, processor, registry):
        result = processor.process(TransferRequest("X9", Decimal('10'), "C1"))

        assert isinstance(result.error, AccountNotFound)
        assert result.error.account_id == "X9"
        assert registry.get("C1").balance == Decimal('100')
        assert len(registry.get("C1").ledger) == 0

    def test_failed_withdrawal_leaves_both_sides_untouched(self, processor, registry):
        result = processor.process(TransferRequest("C1", Decimal('150'), "S1"))

        assert result.status is TransferStatus.REJECTED
        assert isinstance(result.error, InsufficientFunds)
        assert registry.get("C1").balance == Decimal('100')
        assert registry.get("S1").balance == Decimal('200')
        assert len(registry.get("C1").ledger) == 0
        assert len(registry.get("S1").ledger) == 0

    def test_fixed_deposit_receiver_is_debited_but_not_credited(self, processor, registry, caplog):
        with caplog.at_level(logging.WARNING):
            result = processor.process(TransferRequest("C1", Decimal('40'), "F1"))

        assert result.status is TransferStatus.APPLIED
        assert isinstance(result.deposit_error, UnsupportedOperation)
        assert result.inconsistent
        assert registry.get("C1").balance == Decimal('60')
        assert registry.get("F1").balance == Decimal('1000')
        assert len(registry.get("C1").ledger) == 1
        assert registry.get("F1").ledger.entries[0].amount == Decimal('40')
        assert "was not credited" in caplog.text

    def test_fixed_deposit_sender_pays_early_penalty(self, processor, registry):
        processor.process(TransferRequest("F1", Decimal('100'), "C1"))

        assert registry.get("F1").balance == Decimal('890')
        assert registry.get("C1").balance == Decimal('200')
        assert registry.get("F1").ledger.entries[0].amount == Decimal('-100')

    def test_rejection_is_logged(self, processor, caplog):
        with caplog.at_level(logging.INFO, logger='bank_ledger.processor'):
            processor.process(TransferRequest("C1", Decimal('10'), "X9"))
        assert "Rejected transfer C1 -> X9" in caplog.text


class TestProcessAll:
    """Test batch processing."""

    def test_order_is_preserved_and_failures_isolated(self, processor, registry):
        results = processor.process_all([
            TransferRequest("C1", Decimal('140'), "S1"),  # C1 -> -40
            TransferRequest("C1", Decimal('20'), "S1"),   # -60 would breach the limit
            TransferRequest("X9", Decimal('5'), "S1"),
            TransferRequest("S1", Decimal('30'), "C1"),   # sees the first credit
        ])

        assert [r.status for r in results] == [
            TransferStatus.APPLIED,
            TransferStatus.REJECTED,
            TransferStatus.REJECTED,
            TransferStatus.APPLIED,
        ]
        assert registry.get("C1").balance == Decimal('-10')
        assert registry.get("S1").balance == Decimal('310')
        assert [t.amount for t in registry.get("S1").ledger] == [Decimal('140'), Decimal('-30')]

    def test_later_request_depends_on_earlier(self, processor, registry):
        results = processor.process_all([
            TransferRequest("S1", Decimal('100'), "C1"),
            TransferRequest("C1", Decimal('240'), "S1"),
        ])
        assert all(r.applied for r in results)
        assert registry.get("C1").balance == Decimal('-40')

    def test_empty_batch(self, processor):
        assert processor.process_all([]) == []


class TestSummarize:
    """Test summarize."""

    def test_summary(self, processor):
        results = processor.process_all([
            TransferRequest("C1", Decimal('30'), "S1"),
            TransferRequest("C1", Decimal('10'), "F1"),
            TransferRequest("C1", Decimal('500'), "S1"),
        ])
        summary = summarize(results)

        assert summary['total_amount'] == Decimal('40')
        assert summary['applied_count'] == 2
        assert summary['rejected_count'] == 1
        assert summary['rejected'][0].request.amount == Decimal('500')
        assert [r.request.receiver_id for r in summary['inconsistent']] == ["F1"]
