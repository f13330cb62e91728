"""Domain models for the CFONB statement pipeline.

These dataclasses capture the canonical shape of a decoded CFONB 120 line.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

OLD_BALANCE_LABEL = "ANCIEN SOLDE"
NEW_BALANCE_LABEL = "NOUVEAU SOLDE"
COMPLEMENT_LABEL = "COMPLEMENT"


class RecordType(str, Enum):
    """CFONB record codes handled by the decoder."""

    OLD_BALANCE = "01"
    MOVEMENT = "04"
    COMPLEMENT = "05"
    NEW_BALANCE = "07"

    @classmethod
    def from_code(cls, code: str) -> RecordType | None:
        try:
            return cls(code)
        except ValueError:
            return None


@dataclass(frozen=True)
class AccountKey:
    """Identity of the account owning a record."""

    bank_code: str
    branch_code: str
    account_number: str

    def key(self) -> tuple[str, str, str]:
        return (self.bank_code, self.branch_code, self.account_number)

    def is_complete(self) -> bool:
        return all(self.key())

    @property
    def display_name(self) -> str:
        return f"{self.bank_code}-{self.branch_code} • {self.account_number}"

    @classmethod
    def parse(cls, value: str) -> AccountKey:
        parts = value.split("-", 2)
        if len(parts) != 3:
            raise ValueError(f"Account key must look like bank-branch-account, got {value!r}")
        return cls(*parts)

    def __str__(self) -> str:
        return f"{self.bank_code}-{self.branch_code}-{self.account_number}"


@dataclass(frozen=True)
class Record:
    """One decoded CFONB line. Fields that do not apply to the type stay empty."""

    record_type: RecordType
    bank_code: str
    branch_code: str
    account_number: str
    currency: str
    label: str
    raw_line: str
    line_number: int
    amount: Decimal = Decimal("0")
    balance: Decimal | None = None
    accounting_date: str | None = None
    value_date: str | None = None
    balance_date: str | None = None
    operation_code: str | None = None
    entry_number: str | None = None
    qualifier: str | None = None
    complement_text: str | None = None

    @property
    def account(self) -> AccountKey:
        return AccountKey(self.bank_code, self.branch_code, self.account_number)

    @property
    def is_movement(self) -> bool:
        return self.record_type is RecordType.MOVEMENT


@dataclass(frozen=True)
class LineError:
    """A diagnostic attached to one source line."""

    line_number: int
    line: str
    message: str
