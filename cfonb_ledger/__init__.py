"""CFONB 120 bank statement decoding and validation toolkit."""
from cfonb_ledger.application.use_cases import DetectDuplicatesUseCase, ParseStatementUseCase, StatementContext
from cfonb_ledger.domain.services import BalanceValidator, DuplicateCriteria, DuplicateDetector
from cfonb_ledger.infrastructure.parsing.cfonb import decode_line, parse_cfonb
from cfonb_ledger.infrastructure.repositories.file_repositories import CfonbFileRepository

__all__ = [
    "ParseStatementUseCase",
    "DetectDuplicatesUseCase",
    "StatementContext",
    "BalanceValidator",
    "DuplicateCriteria",
    "DuplicateDetector",
    "decode_line",
    "parse_cfonb",
    "CfonbFileRepository",
]
