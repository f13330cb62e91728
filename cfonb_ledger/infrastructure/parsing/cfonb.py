"""CFONB 120 parser producing canonical statement records."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal
from typing import Callable, Mapping, Sequence

from cfonb_ledger.config import SETTINGS
from cfonb_ledger.domain.errors import DecodeError, FormatError, InvalidLength, UnknownRecordType
from cfonb_ledger.domain.models import (
    COMPLEMENT_LABEL,
    NEW_BALANCE_LABEL,
    OLD_BALANCE_LABEL,
    LineError,
    Record,
    RecordType,
)
from cfonb_ledger.domain.results import ParseResult, Stats
from cfonb_ledger.domain.services import BalanceValidator
from cfonb_ledger.infrastructure.parsing.sniffer import sniff_format
from cfonb_ledger.infrastructure.parsing.utils import decode_amount, normalize_date
from cfonb_ledger.logging_config import get_logger

logger = get_logger(__name__)

AMOUNT_SLICE = slice(90, 104)

Extractor = Callable[[str, int, int], Record]


def _identity(line: str) -> dict[str, str]:
    return {
        "bank_code": line[2:7],
        "branch_code": line[11:16],
        "currency": line[16:19],
        "account_number": line[21:32].strip(),
    }


def _balance_extractor(record_type: RecordType, label: str) -> Extractor:
    def extract(line: str, line_number: int, pivot: int) -> Record:
        return Record(
            record_type=record_type,
            label=label,
            balance_date=normalize_date(line[34:40], pivot),
            balance=decode_amount(line[AMOUNT_SLICE]),
            raw_line=line,
            line_number=line_number,
            **_identity(line),
        )

    return extract


def _extract_movement(line: str, line_number: int, pivot: int) -> Record:
    return Record(
        record_type=RecordType.MOVEMENT,
        operation_code=line[32:34],
        accounting_date=normalize_date(line[34:40], pivot),
        value_date=normalize_date(line[42:48], pivot),
        label=line[48:79].strip(),
        entry_number=line[81:88],
        amount=decode_amount(line[AMOUNT_SLICE]),
        raw_line=line,
        line_number=line_number,
        **_identity(line),
    )


def _extract_complement(line: str, line_number: int, pivot: int) -> Record:
    return Record(
        record_type=RecordType.COMPLEMENT,
        label=COMPLEMENT_LABEL,
        qualifier=line[45:48],
        complement_text=line[48:118].strip(),
        raw_line=line,
        line_number=line_number,
        **_identity(line),
    )


EXTRACTORS: Mapping[RecordType, Extractor] = {
    RecordType.OLD_BALANCE: _balance_extractor(RecordType.OLD_BALANCE, OLD_BALANCE_LABEL),
    RecordType.MOVEMENT: _extract_movement,
    RecordType.COMPLEMENT: _extract_complement,
    RecordType.NEW_BALANCE: _balance_extractor(RecordType.NEW_BALANCE, NEW_BALANCE_LABEL),
}


def decode_line(
    line: str,
    line_number: int,
    accepted_lengths: Sequence[int] | None = None,
    century_pivot: int | None = None,
) -> Record:
    """Decode one physical line. Raises DecodeError subclasses on failure."""
    accepted_lengths = accepted_lengths or SETTINGS.accepted_lengths
    pivot = SETTINGS.century_pivot if century_pivot is None else century_pivot

    if len(line) not in accepted_lengths:
        raise InvalidLength(len(line))
    record_type = RecordType.from_code(line[:2])
    if record_type is None:
        raise UnknownRecordType(line[:2])
    return EXTRACTORS[record_type](line, line_number, pivot)


def split_lines(text: str) -> list[str]:
    return [line for line in text.split("\n") if line.strip()]


def _decode_outcome(line: str, line_number: int, pivot: int) -> Record | LineError:
    try:
        return decode_line(line, line_number, century_pivot=pivot)
    except DecodeError as exc:
        return LineError(line_number=line_number, line=line, message=str(exc))


def _decode_all(lines: Sequence[str], pivot: int, max_workers: int) -> list[Record | LineError]:
    if max_workers <= 1 or len(lines) < 2:
        return [_decode_outcome(line, index + 1, pivot) for index, line in enumerate(lines)]

    results_map: dict[int, Record | LineError] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(_decode_outcome, line, index + 1, pivot): index for index, line in enumerate(lines)
        }
        for future in as_completed(futures):
            results_map[futures[future]] = future.result()
    return [results_map[index] for index in sorted(results_map)]


def parse_cfonb(
    text: str,
    max_workers: int | None = None,
    balance_tolerance: Decimal | None = None,
    century_pivot: int | None = None,
) -> ParseResult:
    """Parse a whole statement.

    Only a FormatError escapes; decoding failures and balance mismatches end
    up in ``ParseResult.errors``.
    """
    try:
        sniff_format(text)
    except FormatError as exc:
        logger.error("Input rejected before decoding", reason=str(exc))
        raise

    lines = split_lines(text)
    pivot = SETTINGS.century_pivot if century_pivot is None else century_pivot
    workers = SETTINGS.max_workers if max_workers is None else max_workers

    records: list[Record] = []
    errors: list[LineError] = []
    for outcome in _decode_all(lines, pivot, workers):
        if isinstance(outcome, LineError):
            logger.warning("Line rejected", line_number=outcome.line_number, error=outcome.message)
            errors.append(outcome)
        else:
            records.append(outcome)

    stats = Stats.from_records(records, total_lines=len(lines), errors=len(errors))

    tolerance = SETTINGS.balance_tolerance if balance_tolerance is None else balance_tolerance
    for discrepancy in BalanceValidator(tolerance).validate(records):
        logger.warning(
            "Balance mismatch",
            account=str(discrepancy.account),
            computed=f"{discrepancy.computed:.2f}",
            declared=f"{discrepancy.declared:.2f}",
            line_number=discrepancy.record.line_number,
        )
        errors.append(discrepancy.to_line_error())

    logger.info(
        "Statement parsed",
        total_lines=stats.total_lines,
        records=len(records),
        errors=stats.errors,
        balance_mismatches=len(errors) - stats.errors,
    )
    return ParseResult(records=tuple(records), stats=stats, errors=tuple(errors))
