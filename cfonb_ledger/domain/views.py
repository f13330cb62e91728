"""Read-only views over a decoded record sequence."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from .models import AccountKey, Record, RecordType


@dataclass(frozen=True)
class MovementEntry:
    """A movement together with the complement lines that follow it."""

    movement: Record
    complements: Sequence[Record] = ()

    def matches(self, text: str) -> bool:
        needle = text.lower()
        if needle in self.movement.label.lower():
            return True
        return any(
            needle in (c.complement_text or "").lower() or needle in c.label.lower() for c in self.complements
        )


def unique_accounts(records: Sequence[Record]) -> list[AccountKey]:
    accounts = {record.account for record in records if record.account.is_complete()}
    return sorted(accounts, key=AccountKey.key)


def records_for_account(records: Sequence[Record], account: AccountKey) -> tuple[Record, ...]:
    return tuple(record for record in records if record.account == account)


def attach_complements(records: Sequence[Record]) -> list[MovementEntry]:
    entries: list[MovementEntry] = []
    current: Record | None = None
    pending: list[Record] = []
    for record in records:
        if record.record_type is RecordType.MOVEMENT:
            if current is not None:
                entries.append(MovementEntry(current, tuple(pending)))
            current, pending = record, []
        elif record.record_type is RecordType.COMPLEMENT and current is not None:
            pending.append(record)
    if current is not None:
        entries.append(MovementEntry(current, tuple(pending)))
    return entries


def filter_entries(entries: Sequence[MovementEntry], text: str) -> list[MovementEntry]:
    if not text:
        return list(entries)
    return [entry for entry in entries if entry.matches(text)]


def opening_balance(records: Sequence[Record]) -> Decimal:
    for record in records:
        if record.record_type is RecordType.OLD_BALANCE:
            return record.balance or Decimal("0")
    return Decimal("0")


def current_balance(records: Sequence[Record]) -> Decimal:
    movements = (record.amount for record in records if record.is_movement)
    return opening_balance(records) + sum(movements, Decimal("0"))


def running_balances(entries: Sequence[MovementEntry], opening: Decimal) -> list[tuple[MovementEntry, Decimal]]:
    """Cumulative balance after each entry, in accounting-date order."""
    ordered = sorted(entries, key=lambda e: (e.movement.accounting_date or "", e.movement.line_number))
    balance = opening
    rows: list[tuple[MovementEntry, Decimal]] = []
    for entry in ordered:
        balance += entry.movement.amount
        rows.append((entry, balance))
    return rows
