"""Domain services implementing the cross-record rules."""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Iterable, Mapping, Sequence

from .models import AccountKey, Record, RecordType
from .results import BalanceDiscrepancy, DuplicateGroup

CENT = Decimal("0.01")
# Two cents, not one: a closing balance 0.02 away from the computed one must
# still pass, so only gaps strictly larger than 0.02 are reported.
BALANCE_TOLERANCE = Decimal("0.02")

CRITERIA_LABELS = {
    "date": "Date",
    "amount": "Montant",
    "label": "Libellé",
    "account": "Compte",
    "operation_code": "Code op.",
}


class BalanceValidator:
    """Checks opening balance + movements = closing balance for every account."""

    def __init__(self, tolerance: Decimal | None = None) -> None:
        if tolerance is None:
            tolerance = BALANCE_TOLERANCE
        self._tolerance = tolerance

    def validate(self, records: Sequence[Record]) -> tuple[BalanceDiscrepancy, ...]:
        discrepancies: list[BalanceDiscrepancy] = []
        for account, account_records in self._group_by_account(records).items():
            old_balance = _first_of(account_records, RecordType.OLD_BALANCE)
            new_balance = _first_of(account_records, RecordType.NEW_BALANCE)
            movements = [r for r in account_records if r.record_type is RecordType.MOVEMENT]
            # Partial account sections are legitimate.
            if old_balance is None or new_balance is None or not movements:
                continue

            computed = (old_balance.balance or Decimal("0")) + sum((m.amount for m in movements), Decimal("0"))
            declared = new_balance.balance or Decimal("0")
            if abs(computed - declared) > self._tolerance:
                discrepancies.append(
                    BalanceDiscrepancy(account=account, computed=computed, declared=declared, record=new_balance)
                )
        return tuple(discrepancies)

    @staticmethod
    def _group_by_account(records: Iterable[Record]) -> Mapping[AccountKey, list[Record]]:
        groups: dict[AccountKey, list[Record]] = defaultdict(list)
        for record in records:
            groups[record.account].append(record)
        return groups


def _first_of(records: Iterable[Record], record_type: RecordType) -> Record | None:
    return next((r for r in records if r.record_type is record_type), None)


@dataclass(frozen=True)
class DuplicateCriteria:
    """Which movement fields take part in the duplicate fingerprint."""

    date: bool = True
    amount: bool = True
    label: bool = True
    account: bool = True
    operation_code: bool = False

    def enabled(self) -> tuple[str, ...]:
        return tuple(f.name for f in fields(self) if getattr(self, f.name))

    def labels(self) -> tuple[str, ...]:
        return tuple(CRITERIA_LABELS[name] for name in self.enabled())

    @classmethod
    def from_names(cls, names: Iterable[str]) -> DuplicateCriteria:
        selected = {name.strip().lower().replace("-", "_") for name in names if name.strip()}
        unknown = selected - set(CRITERIA_LABELS)
        if unknown:
            raise ValueError(f"Unknown duplicate criteria: {', '.join(sorted(unknown))}")
        return cls(**{name: name in selected for name in CRITERIA_LABELS})


class DuplicateDetector:
    """Groups movements sharing the same fingerprint. Never removes anything."""

    def __init__(self, criteria: DuplicateCriteria | None = None) -> None:
        self._criteria = criteria or DuplicateCriteria()

    @property
    def criteria(self) -> DuplicateCriteria:
        return self._criteria

    def fingerprint(self, record: Record) -> str | None:
        values = [(name, self._encode(name, record)) for name in self._criteria.enabled()]
        if not any(value for _, value in values):
            return None
        return "|".join(f"{_SEGMENT_NAMES[name]}:{value}" for name, value in values)

    def detect(self, records: Sequence[Record]) -> tuple[DuplicateGroup, ...]:
        buckets: dict[str, list[Record]] = defaultdict(list)
        for record in records:
            if not record.is_movement:
                continue
            key = self.fingerprint(record)
            if key is not None:
                buckets[key].append(record)

        labels = self._criteria.labels()
        groups = [
            DuplicateGroup(key=key, records=tuple(sorted(members, key=lambda r: r.line_number)), criteria=labels)
            for key, members in buckets.items()
            if len(members) > 1
        ]
        groups.sort(key=lambda group: group.records[0].line_number)
        return tuple(groups)

    @staticmethod
    def _encode(name: str, record: Record) -> str:
        if name == "date":
            return record.accounting_date or ""
        if name == "amount":
            return str(record.amount.quantize(CENT))
        if name == "label":
            return record.label.strip().lower()
        if name == "account":
            return str(record.account) if any(record.account.key()) else ""
        return record.operation_code or ""


_SEGMENT_NAMES = {
    "date": "date",
    "amount": "amount",
    "label": "label",
    "account": "account",
    "operation_code": "code",
}
