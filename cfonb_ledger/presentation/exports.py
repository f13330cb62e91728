"""CSV exports and tabular views of decoded statements."""
from __future__ import annotations

import csv
import io
from decimal import Decimal
from pathlib import PurePath
from typing import Sequence

import pandas as pd

from cfonb_ledger.domain.models import AccountKey, Record
from cfonb_ledger.domain.results import DuplicateGroup
from cfonb_ledger.infrastructure.parsing.utils import format_display_date

BOM = "\ufeff"
CENT = Decimal("0.01")

GENERIC_HEADER = [
    "ligne",
    "type_enregistrement",
    "banque",
    "guichet",
    "compte",
    "devise",
    "date_comptable",
    "date_valeur",
    "date_solde",
    "libelle",
    "montant",
    "solde",
    "code_operation",
    "numero_ecriture",
    "qualifiant",
    "complement",
]
LIMPEED_HEADER = ["Date", "Libellé", "Débit", "Crédit"]
LIMPEED_FILENAME = "export_limpeed.csv"


def _money(value: Decimal | None) -> Decimal | str:
    return "" if value is None else value.quantize(CENT)


def records_to_rows(records: Sequence[Record]) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for record in records:
        rows.append(
            {
                "ligne": record.line_number,
                "type_enregistrement": record.record_type.value,
                "banque": record.bank_code,
                "guichet": record.branch_code,
                "compte": record.account_number,
                "devise": record.currency,
                "date_comptable": record.accounting_date or "",
                "date_valeur": record.value_date or "",
                "date_solde": record.balance_date or "",
                "libelle": record.label,
                "montant": _money(record.amount),
                "solde": _money(record.balance),
                "code_operation": record.operation_code or "",
                "numero_ecriture": record.entry_number or "",
                "qualifiant": record.qualifier or "",
                "complement": record.complement_text or "",
            }
        )
    return rows


def _encode(buffer: io.StringIO) -> bytes:
    return (BOM + buffer.getvalue()).encode("utf-8")


def render_csv(records: Sequence[Record]) -> bytes:
    """Generic export: one row per record, comma separated, UTF-8 with BOM.

    Text cells are quoted, line numbers and amounts are written bare.
    """
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(GENERIC_HEADER)
    writer = csv.DictWriter(buffer, fieldnames=GENERIC_HEADER, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerows(records_to_rows(records))
    return _encode(buffer)


def _french_amount(value: Decimal) -> str:
    return f"{abs(value):.2f}".replace(".", ",")


def render_limpeed_csv(records: Sequence[Record]) -> bytes:
    """LIMPEED export: movements only, semicolon separated, debit/credit split."""
    buffer = io.StringIO()
    csv.writer(buffer, delimiter=";", lineterminator="\n").writerow(LIMPEED_HEADER)
    writer = csv.writer(buffer, delimiter=";", quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for record in records:
        if not record.is_movement:
            continue
        debit = _french_amount(record.amount) if record.amount < 0 else ""
        credit = _french_amount(record.amount) if record.amount > 0 else ""
        writer.writerow([format_display_date(record.accounting_date), record.label, debit, credit])
    return _encode(buffer)


def export_filename(source_name: str, account: AccountKey | None = None) -> str:
    stem = PurePath(source_name).stem or "export_cfonb"
    if account is None:
        return f"{stem}_export.csv"
    return f"{stem}_{'_'.join(account.key())}_export.csv"


def records_to_dataframe(records: Sequence[Record]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "line_number": r.line_number,
                "record_type": r.record_type.value,
                "account": str(r.account),
                "currency": r.currency,
                "accounting_date": r.accounting_date,
                "value_date": r.value_date,
                "balance_date": r.balance_date,
                "label": r.label,
                "amount": r.amount,
                "balance": r.balance,
                "operation_code": r.operation_code,
                "entry_number": r.entry_number,
                "qualifier": r.qualifier,
                "complement": r.complement_text,
            }
            for r in records
        ],
        columns=[
            "line_number",
            "record_type",
            "account",
            "currency",
            "accounting_date",
            "value_date",
            "balance_date",
            "label",
            "amount",
            "balance",
            "operation_code",
            "entry_number",
            "qualifier",
            "complement",
        ],
    )


def duplicates_to_dataframe(groups: Sequence[DuplicateGroup]) -> pd.DataFrame:
    rows = []
    for group_index, group in enumerate(groups, start=1):
        for status, record in group.iter_labelled():
            rows.append(
                {
                    "group": group_index,
                    "status": status,
                    "line_number": record.line_number,
                    "accounting_date": record.accounting_date,
                    "label": record.label,
                    "amount": record.amount,
                    "account": str(record.account),
                    "operation_code": record.operation_code,
                    "criteria": ", ".join(group.criteria),
                }
            )
    return pd.DataFrame(
        rows,
        columns=[
            "group",
            "status",
            "line_number",
            "accounting_date",
            "label",
            "amount",
            "account",
            "operation_code",
            "criteria",
        ],
    )
