"""Command-line entrypoint for CFONB statement analysis."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from cfonb_ledger.application.dto import DuplicateRequest
from cfonb_ledger.application.use_cases import DetectDuplicatesUseCase, ParseStatementUseCase, StatementContext
from cfonb_ledger.config import SETTINGS
from cfonb_ledger.domain.errors import FormatError
from cfonb_ledger.domain.models import AccountKey
from cfonb_ledger.domain.services import DuplicateCriteria
from cfonb_ledger.domain.views import records_for_account
from cfonb_ledger.infrastructure.repositories.file_repositories import CfonbFileRepository
from cfonb_ledger.logging_config import setup_logging
from cfonb_ledger.presentation.exports import LIMPEED_FILENAME, export_filename, render_csv, render_limpeed_csv


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Decode and check a CFONB 120 bank statement")
    parser.add_argument("statement", type=str, help="Path to the CFONB statement file")
    parser.add_argument("--account", type=str, help="Restrict output to one account (bank-branch-account)")
    parser.add_argument(
        "--criteria",
        type=str,
        help="Comma separated duplicate criteria among date,amount,label,account,operation_code",
    )
    parser.add_argument(
        "--csv",
        nargs="?",
        const="",
        help="Write the generic CSV export (default name <statement>_export.csv)",
    )
    parser.add_argument(
        "--limpeed",
        nargs="?",
        const="",
        help=f"Write the LIMPEED CSV export (default name {LIMPEED_FILENAME})",
    )
    parser.add_argument("--workers", type=int, help="Decode lines on this many threads")
    parser.add_argument("--encoding", type=str, help=f"Input encoding (default {SETTINGS.encoding})")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or sys.argv[1:])
    setup_logging(SETTINGS.log_level)

    try:
        criteria = DuplicateCriteria.from_names(args.criteria.split(",")) if args.criteria else SETTINGS.default_criteria
        account = AccountKey.parse(args.account) if args.account else None
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    try:
        repository = CfonbFileRepository(Path(args.statement), encoding=args.encoding)
    except OSError as exc:
        print(f"Cannot read {args.statement}: {exc}", file=sys.stderr)
        return 1

    try:
        analysis = ParseStatementUseCase(StatementContext(repository, max_workers=args.workers)).execute()
    except FormatError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except (UnicodeDecodeError, LookupError) as exc:
        encoding = args.encoding or SETTINGS.encoding
        print(f"Cannot decode {args.statement} as {encoding}: {exc}", file=sys.stderr)
        return 1

    result = analysis.result
    records = records_for_account(result.records, account) if account else result.records

    print("Statement Summary")
    print("=================")
    stats = result.stats
    summary = analysis.summary
    print(f"File: {analysis.source_name}")
    print(f"Lines: {stats.total_lines}")
    print(f"Old balances: {stats.old_balances}")
    print(f"Movements: {stats.movements}")
    print(f"Complements: {stats.complements}")
    print(f"New balances: {stats.new_balances}")
    print(f"Rejected lines: {stats.errors}")
    print(f"Accounts: {summary.account_count}")
    print(f"Movement total: {summary.total_amount:.2f} (credits {summary.total_credit:.2f}, debits {summary.total_debit:.2f})")

    if result.errors:
        print("\nErrors:")
        for error in result.errors:
            print(f"- line {error.line_number}: {error.message}")

    duplicates = DetectDuplicatesUseCase().execute(DuplicateRequest(records=records, criteria=criteria))
    if duplicates.groups:
        print(f"\nDuplicate groups ({', '.join(criteria.labels())}):")
        for index, group in enumerate(duplicates.groups, start=1):
            print(f"Group {index} - {len(group.records)} records")
            for status, record in group.iter_labelled():
                print(f"  line {record.line_number} [{status}] {record.accounting_date} {record.label} {record.amount:.2f}")
    else:
        print("\nNo duplicates detected.")

    if args.csv is not None:
        csv_path = Path(args.csv or export_filename(analysis.source_name, account))
        csv_path.write_bytes(render_csv(records))
        print(f"CSV export written to {csv_path}")
    if args.limpeed is not None:
        limpeed_path = Path(args.limpeed or LIMPEED_FILENAME)
        limpeed_path.write_bytes(render_limpeed_csv(records))
        print(f"LIMPEED export written to {limpeed_path}")

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
