import pytest

from cfonb_ledger.domain.results import DuplicateSummary
from cfonb_ledger.domain.services import DuplicateCriteria, DuplicateDetector
from cfonb_ledger.infrastructure.parsing.cfonb import decode_line


def _records(raw_lines):
    return [decode_line(line, index + 1) for index, line in enumerate(raw_lines)]


def test_default_criteria_group_identical_movements(lines):
    records = _records(
        [
            lines.old_balance("0.00"),
            lines.movement("-20.00", label="CB CARREFOUR", entry_number="0000001"),
            lines.movement("-20.00", label="CB CARREFOUR", entry_number="0000002"),
            lines.movement("-20.00", label="CB AUCHAN", entry_number="0000003"),
        ]
    )

    (group,) = DuplicateDetector().detect(records)

    assert [r.line_number for r in group.records] == [2, 3]
    assert group.criteria == ("Date", "Montant", "Libellé", "Compte")
    assert group.key.startswith("date:2025-01-15|amount:-20.00|label:cb carrefour|account:")


def test_label_comparison_ignores_case_and_padding(lines):
    records = _records([lines.movement("5.00", label="Loyer"), lines.movement("5.00", label="LOYER")])
    assert len(DuplicateDetector().detect(records)) == 1


def test_disabled_field_is_ignored(lines):
    records = _records([lines.movement("10.00"), lines.movement("99.00")])

    assert DuplicateDetector().detect(records) == ()
    criteria = DuplicateCriteria(amount=False)
    (group,) = DuplicateDetector(criteria).detect(records)
    assert len(group.records) == 2
    assert "amount:" not in group.key


def test_operation_code_criterion(lines):
    records = _records([lines.movement("10.00", operation_code="05"), lines.movement("10.00", operation_code="B1")])

    assert len(DuplicateDetector().detect(records)) == 1
    assert DuplicateDetector(DuplicateCriteria(operation_code=True)).detect(records) == ()


def test_no_enabled_criteria_yields_no_groups(lines):
    records = _records([lines.movement("10.00"), lines.movement("10.00")])
    criteria = DuplicateCriteria(date=False, amount=False, label=False, account=False)
    assert DuplicateDetector(criteria).detect(records) == ()


def test_records_with_empty_fingerprint_are_excluded(lines):
    records = _records([lines.movement("10.00", label=""), lines.movement("20.00", label="")])
    assert DuplicateDetector(DuplicateCriteria.from_names(["label"])).detect(records) == ()


def test_only_movements_are_compared(lines):
    records = _records([lines.old_balance("10.00"), lines.old_balance("10.00"), lines.complement("X"), lines.complement("X")])
    assert DuplicateDetector(DuplicateCriteria(date=False, amount=False, label=False)).detect(records) == ()


def test_groups_are_ordered_by_first_line(lines):
    records = _records(
        [
            lines.movement("1.00", label="B"),
            lines.movement("2.00", label="A"),
            lines.movement("1.00", label="B"),
            lines.movement("2.00", label="A"),
            lines.movement("1.00", label="B"),
        ]
    )

    groups = DuplicateDetector().detect(records)

    assert [[r.line_number for r in g.records] for g in groups] == [[1, 3, 5], [2, 4]]
    assert [label for label, _ in groups[0].iter_labelled()] == ["original", "duplicate 1", "duplicate 2"]


def test_summary_counts(lines):
    records = _records([lines.movement("1.00"), lines.movement("1.00"), lines.movement("2.00")])
    groups = DuplicateDetector().detect(records)

    summary = DuplicateSummary.build(records, groups)

    assert summary.total_movements == 3
    assert summary.duplicate_records == 2
    assert summary.groups == 1
    assert summary.clean_records == 1


def test_criteria_from_names():
    criteria = DuplicateCriteria.from_names(["amount", "operation-code", " "])

    assert criteria.enabled() == ("amount", "operation_code")
    assert criteria.labels() == ("Montant", "Code op.")
    with pytest.raises(ValueError):
        DuplicateCriteria.from_names(["colour"])
