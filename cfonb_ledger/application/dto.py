"""Application-level DTOs for statement analysis."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from cfonb_ledger.domain.models import AccountKey, Record
from cfonb_ledger.domain.results import DuplicateGroup, DuplicateSummary, ParseResult, StatementSummary
from cfonb_ledger.domain.services import DuplicateCriteria


@dataclass(slots=True, frozen=True)
class StatementAnalysis:
    source_name: str
    file_hash: str
    result: ParseResult
    summary: StatementSummary
    accounts: Sequence[AccountKey]


@dataclass(slots=True, frozen=True)
class DuplicateRequest:
    records: Sequence[Record]
    criteria: DuplicateCriteria
    account: AccountKey | None = None


@dataclass(slots=True, frozen=True)
class DuplicateResponse:
    groups: Sequence[DuplicateGroup]
    summary: DuplicateSummary
    criteria: DuplicateCriteria
