"""Tests for the wallet collaborator."""

import threading
from decimal import Decimal

import pytest

from casino import wallet as wallet_module
from casino.config import AppConfig
from casino.errors import InsufficientFunds
from casino.wallet import InMemoryWallet, TransactionKind, Wallet, to_amount, to_cents


class TestInMemoryWallet:
    """Tests for InMemoryWallet."""

    def test_default_balance_comes_from_config(self, monkeypatch):
        """Without an explicit balance the configured starting balance is used."""
        monkeypatch.setattr(wallet_module, "config", AppConfig(starting_balance=Decimal("250")))
        assert InMemoryWallet().get_balance() == Decimal("250")

    def test_satisfies_protocol(self, wallet):
        assert isinstance(wallet, Wallet)

    def test_debit_and_credit(self, wallet):
        """Test balance movements."""
        wallet.debit(Decimal("100"))
        assert wallet.get_balance() == Decimal("900")
        wallet.credit(Decimal("250"))
        assert wallet.get_balance() == Decimal("1150")

    def test_debit_more_than_balance_raises(self):
        """Test that overdrawing raises and leaves the balance alone."""
        wallet = InMemoryWallet(Decimal("50"))
        with pytest.raises(InsufficientFunds) as exc_info:
            wallet.debit(Decimal("60"))
        assert exc_info.value.required == Decimal("60")
        assert exc_info.value.available == Decimal("50")
        assert wallet.get_balance() == Decimal("50")

    def test_debit_entire_balance(self):
        wallet = InMemoryWallet(Decimal("50"))
        wallet.debit(Decimal("50"))
        assert wallet.get_balance() == Decimal("0")

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
    def test_non_positive_amounts_rejected(self, wallet, amount):
        with pytest.raises(ValueError):
            wallet.debit(amount)
        with pytest.raises(ValueError):
            wallet.credit(amount)

    def test_negative_starting_balance_rejected(self):
        with pytest.raises(ValueError):
            InMemoryWallet(Decimal("-1"))

    def test_ledger_records_movements(self, wallet):
        """Test the transaction ledger."""
        wallet.debit(Decimal("20"), memo="bet")
        wallet.credit(Decimal("40"), memo="win")

        ledger = wallet.ledger
        assert [t.kind for t in ledger] == [TransactionKind.DEBIT, TransactionKind.CREDIT]
        assert ledger[0].balance_after == Decimal("980")
        assert ledger[1].memo == "win"
        assert wallet.total(TransactionKind.DEBIT) == Decimal("20")
        assert wallet.total(TransactionKind.CREDIT) == Decimal("40")

    def test_concurrent_debits_never_overdraw(self):
        """Parallel debits cannot take more than the balance."""
        wallet = InMemoryWallet(Decimal("100"))
        failures = []

        def spend():
            try:
                wallet.debit(Decimal("10"))
            except InsufficientFunds:
                failures.append(1)

        threads = [threading.Thread(target=spend) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert wallet.get_balance() == Decimal("0")
        assert len(failures) == 10


class TestAmounts:
    """Tests for amount helpers."""

    def test_to_amount(self):
        assert to_amount(10) == Decimal("10")
        assert to_amount(0.1) == Decimal("0.1")
        assert to_amount("2.50") == Decimal("2.50")

    def test_to_cents_rounds_half_up(self):
        assert to_cents(Decimal("1.005")) == Decimal("1.01")
        assert to_cents(Decimal("1.004")) == Decimal("1.00")
        assert to_cents(Decimal("23.75")) == Decimal("23.75")
