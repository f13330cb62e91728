import logging
from decimal import Decimal

import pytest

from cfonb_ledger.infrastructure.parsing.utils import encode_amount
from cfonb_ledger.logging_config import ROOT_LOGGER


class LineBuilder:
    """Builds 120-character CFONB lines for tests."""

    def __init__(self, bank: str = "30002", branch: str = "00550", currency: str = "EUR", account: str = "0000123456F"):
        self.bank = bank
        self.branch = branch
        self.currency = currency
        self.account = account

    def _base(self, code: str, account: str | None = None) -> list[str]:
        chars = [" "] * 120
        self._put(chars, 0, code)
        self._put(chars, 2, self.bank)
        self._put(chars, 11, self.branch)
        self._put(chars, 16, self.currency)
        self._put(chars, 21, (account or self.account).ljust(11))
        return chars

    @staticmethod
    def _put(chars: list[str], start: int, value: str) -> None:
        chars[start : start + len(value)] = list(value)

    def old_balance(self, amount: str, date: str = "010125", account: str | None = None) -> str:
        chars = self._base("01", account)
        self._put(chars, 34, date)
        self._put(chars, 90, encode_amount(Decimal(amount)))
        return "".join(chars)

    def new_balance(self, amount: str, date: str = "310125", account: str | None = None) -> str:
        chars = self._base("07", account)
        self._put(chars, 34, date)
        self._put(chars, 90, encode_amount(Decimal(amount)))
        return "".join(chars)

    def movement(
        self,
        amount: str,
        label: str = "VIR SEPA LOYER",
        date: str = "150125",
        value_date: str = "160125",
        operation_code: str = "05",
        entry_number: str = "0000001",
        account: str | None = None,
    ) -> str:
        chars = self._base("04", account)
        self._put(chars, 32, operation_code)
        self._put(chars, 34, date)
        self._put(chars, 42, value_date)
        self._put(chars, 48, label[:31].ljust(31))
        self._put(chars, 81, entry_number)
        self._put(chars, 90, encode_amount(Decimal(amount)))
        return "".join(chars)

    def complement(self, text: str, qualifier: str = "LIB", account: str | None = None) -> str:
        chars = self._base("05", account)
        self._put(chars, 45, qualifier)
        self._put(chars, 48, text[:70].ljust(70))
        return "".join(chars)


@pytest.fixture
def lines() -> LineBuilder:
    return LineBuilder()


@pytest.fixture
def statement_text(lines: LineBuilder) -> str:
    return "\n".join(
        [
            lines.old_balance("100.00"),
            lines.movement("50.00", label="VIR SALAIRE", entry_number="0000001"),
            lines.complement("REF FACTURE 2025-001"),
            lines.movement("-20.00", label="CB CARREFOUR", entry_number="0000002"),
            lines.new_balance("130.00"),
        ]
    )


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.propagate = True
