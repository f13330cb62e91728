"""Application services orchestrating the statement workflow."""
from __future__ import annotations

from dataclasses import dataclass

from cfonb_ledger.application.dto import DuplicateRequest, DuplicateResponse, StatementAnalysis
from cfonb_ledger.domain.repositories import StatementRepository
from cfonb_ledger.domain.results import DuplicateSummary, StatementSummary
from cfonb_ledger.domain.services import DuplicateDetector
from cfonb_ledger.domain.views import records_for_account, unique_accounts
from cfonb_ledger.infrastructure.parsing.cfonb import parse_cfonb


@dataclass(slots=True)
class StatementContext:
    repository: StatementRepository
    max_workers: int | None = None


class ParseStatementUseCase:
    def __init__(self, context: StatementContext) -> None:
        self._context = context

    def execute(self) -> StatementAnalysis:
        repository = self._context.repository
        result = parse_cfonb(repository.load_text(), max_workers=self._context.max_workers)
        return StatementAnalysis(
            source_name=repository.source_name,
            file_hash=repository.file_hash,
            result=result,
            summary=StatementSummary.build(result),
            accounts=tuple(unique_accounts(result.records)),
        )


class DetectDuplicatesUseCase:
    def execute(self, request: DuplicateRequest) -> DuplicateResponse:
        records = request.records
        if request.account is not None:
            records = records_for_account(records, request.account)
        groups = DuplicateDetector(request.criteria).detect(records)
        return DuplicateResponse(
            groups=groups,
            summary=DuplicateSummary.build(records, groups),
            criteria=request.criteria,
        )
