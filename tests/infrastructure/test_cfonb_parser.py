from decimal import Decimal

import pytest

from cfonb_ledger.domain.errors import FormatError, InvalidLength, UnknownRecordType
from cfonb_ledger.domain.models import RecordType
from cfonb_ledger.infrastructure.parsing.cfonb import decode_line, parse_cfonb


def test_decode_old_balance(lines):
    record = decode_line(lines.old_balance("1500.25", date="311224"), 1)

    assert record.record_type is RecordType.OLD_BALANCE
    assert record.bank_code == "30002"
    assert record.branch_code == "00550"
    assert record.currency == "EUR"
    assert record.account_number == "0000123456F"
    assert record.balance_date == "2024-12-31"
    assert record.balance == Decimal("1500.25")
    assert record.label == "ANCIEN SOLDE"
    assert record.amount == Decimal("0")
    assert record.accounting_date is None
    assert record.operation_code is None


def test_decode_movement(lines):
    line = lines.movement("-42.10", label="PRLV SEPA EDF", date="050225", value_date="060225", operation_code="B1")
    record = decode_line(line, 7)

    assert record.record_type is RecordType.MOVEMENT
    assert record.line_number == 7
    assert record.operation_code == "B1"
    assert record.accounting_date == "2025-02-05"
    assert record.value_date == "2025-02-06"
    assert record.label == "PRLV SEPA EDF"
    assert record.entry_number == "0000001"
    assert record.amount == Decimal("-42.10")
    assert record.balance is None
    assert record.balance_date is None
    assert record.raw_line == line


def test_decode_complement(lines):
    record = decode_line(lines.complement("MOTIF: LOYER JANVIER", qualifier="LCC"), 3)

    assert record.record_type is RecordType.COMPLEMENT
    assert record.qualifier == "LCC"
    assert record.complement_text == "MOTIF: LOYER JANVIER"
    assert record.label == "COMPLEMENT"
    assert record.amount == Decimal("0")
    assert record.balance is None


def test_decode_new_balance(lines):
    record = decode_line(lines.new_balance("-80.00"), 9)

    assert record.record_type is RecordType.NEW_BALANCE
    assert record.label == "NOUVEAU SOLDE"
    assert record.balance == Decimal("-80.00")


def test_121_character_line_is_accepted(lines):
    record = decode_line(lines.movement("10.00") + "\r", 1)
    assert record.amount == Decimal("10.00")


@pytest.mark.parametrize("length", [119, 122])
def test_wrong_length_is_rejected(lines, length: int):
    line = (lines.movement("10.00") + "XX")[:length]
    with pytest.raises(InvalidLength) as excinfo:
        decode_line(line, 1)
    assert excinfo.value.actual == length


def test_unknown_record_type(lines):
    line = "99" + lines.movement("10.00")[2:]
    with pytest.raises(UnknownRecordType) as excinfo:
        decode_line(line, 1)
    assert excinfo.value.code == "99"


def test_parse_statement(statement_text):
    result = parse_cfonb(statement_text)

    assert [r.record_type for r in result.records] == [
        RecordType.OLD_BALANCE,
        RecordType.MOVEMENT,
        RecordType.COMPLEMENT,
        RecordType.MOVEMENT,
        RecordType.NEW_BALANCE,
    ]
    assert result.stats.total_lines == 5
    assert result.stats.old_balances == 1
    assert result.stats.movements == 2
    assert result.stats.complements == 1
    assert result.stats.new_balances == 1
    assert result.stats.errors == 0
    assert result.errors == ()


def test_blank_lines_do_not_count(lines):
    text = "\n\n" + lines.old_balance("0.00") + "\n   \n" + lines.movement("5.00") + "\n\n"
    result = parse_cfonb(text)

    assert [r.line_number for r in result.records] == [1, 2]
    assert result.stats.total_lines == 2


def test_crlf_lines_are_decoded(lines):
    text = "\r\n".join([lines.old_balance("10.00"), lines.movement("5.00"), lines.new_balance("15.00")])
    result = parse_cfonb(text)

    assert result.stats.errors == 0
    assert len(result.records) == 3


def test_bad_lines_are_isolated(lines):
    text = "\n".join(
        [
            lines.movement("1.00"),
            "99" + lines.movement("2.00")[2:],
            lines.movement("3.00")[:119],
            lines.movement("4.00"),
        ]
    )
    result = parse_cfonb(text)

    assert [r.line_number for r in result.records] == [1, 4]
    assert result.stats.errors == 2
    assert [e.line_number for e in result.errors] == [2, 3]
    assert result.errors[0].message == "Unknown record type: 99"
    assert result.errors[1].message == "Invalid length: 119 characters instead of 120"


def test_balance_mismatch_is_appended_after_line_errors(lines):
    text = "\n".join(
        [
            lines.old_balance("100.00"),
            "short line",
            lines.movement("50.00"),
            lines.movement("-20.00"),
            lines.new_balance("135.00"),
        ]
    )
    result = parse_cfonb(text)

    assert result.stats.errors == 1
    assert len(result.errors) == 2
    mismatch = result.errors[-1]
    assert mismatch.line_number == 5
    assert "30002-00550-0000123456F" in mismatch.message
    assert "computed 130.00" in mismatch.message
    assert "declared 135.00" in mismatch.message


def test_xml_is_rejected_before_decoding(lines):
    text = '<?xml version="1.0"?>\n' + lines.movement("1.00")
    with pytest.raises(FormatError):
        parse_cfonb(text)


def test_threaded_decoding_keeps_line_order(lines):
    text = "\n".join(lines.movement(f"{i}.00", entry_number=f"{i:07d}") for i in range(1, 40))

    sequential = parse_cfonb(text, max_workers=1)
    threaded = parse_cfonb(text, max_workers=4)

    assert threaded == sequential
    assert [r.entry_number for r in threaded.records] == [f"{i:07d}" for i in range(1, 40)]
