"""Domain-level results produced by parsing and analysis."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Sequence

from .models import AccountKey, LineError, Record, RecordType


@dataclass(frozen=True)
class Stats:
    total_lines: int
    old_balances: int
    movements: int
    complements: int
    new_balances: int
    errors: int

    @classmethod
    def from_records(cls, records: Sequence[Record], total_lines: int, errors: int) -> Stats:
        counts = {record_type: 0 for record_type in RecordType}
        for record in records:
            counts[record.record_type] += 1
        return cls(
            total_lines=total_lines,
            old_balances=counts[RecordType.OLD_BALANCE],
            movements=counts[RecordType.MOVEMENT],
            complements=counts[RecordType.COMPLEMENT],
            new_balances=counts[RecordType.NEW_BALANCE],
            errors=errors,
        )

    def count_for(self, record_type: RecordType) -> int:
        return {
            RecordType.OLD_BALANCE: self.old_balances,
            RecordType.MOVEMENT: self.movements,
            RecordType.COMPLEMENT: self.complements,
            RecordType.NEW_BALANCE: self.new_balances,
        }[record_type]


@dataclass(frozen=True)
class ParseResult:
    """Records in source order, aggregate statistics and every diagnostic."""

    records: Sequence[Record] = field(default_factory=tuple)
    stats: Stats = field(default_factory=lambda: Stats(0, 0, 0, 0, 0, 0))
    errors: Sequence[LineError] = field(default_factory=tuple)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def movements(self) -> tuple[Record, ...]:
        return tuple(record for record in self.records if record.is_movement)


@dataclass(frozen=True)
class BalanceDiscrepancy:
    """Opening balance plus movements does not match the declared closing balance."""

    account: AccountKey
    computed: Decimal
    declared: Decimal
    record: Record

    @property
    def message(self) -> str:
        return (
            f"Balance mismatch for account {self.account}: "
            f"computed {self.computed:.2f}, declared {self.declared:.2f}"
        )

    def to_line_error(self) -> LineError:
        return LineError(line_number=self.record.line_number, line=self.record.raw_line, message=self.message)


@dataclass(frozen=True)
class DuplicateGroup:
    key: str
    records: Sequence[Record]
    criteria: Sequence[str]

    @staticmethod
    def label_for(index: int) -> str:
        return "original" if index == 0 else f"duplicate {index}"

    def iter_labelled(self) -> Iterable[tuple[str, Record]]:
        for index, record in enumerate(self.records):
            yield self.label_for(index), record


@dataclass(frozen=True)
class DuplicateSummary:
    total_movements: int
    duplicate_records: int
    groups: int

    @property
    def clean_records(self) -> int:
        return self.total_movements - self.duplicate_records

    @classmethod
    def build(cls, records: Sequence[Record], groups: Sequence[DuplicateGroup]) -> DuplicateSummary:
        return cls(
            total_movements=sum(1 for record in records if record.is_movement),
            duplicate_records=sum(len(group.records) for group in groups),
            groups=len(groups),
        )


@dataclass(frozen=True)
class StatementSummary:
    movement_count: int
    account_count: int
    total_amount: Decimal
    total_credit: Decimal
    total_debit: Decimal

    @classmethod
    def build(cls, result: ParseResult) -> StatementSummary:
        movements = result.movements()
        credits = sum((m.amount for m in movements if m.amount > 0), Decimal("0"))
        debits = sum((m.amount for m in movements if m.amount < 0), Decimal("0"))
        accounts = {record.account for record in result.records if record.account.is_complete()}
        return cls(
            movement_count=len(movements),
            account_count=len(accounts),
            total_amount=credits + debits,
            total_credit=credits,
            total_debit=debits,
        )
