"""Shared parsing utilities for CFONB ingestion."""
from __future__ import annotations

from decimal import Decimal
from io import BytesIO
from pathlib import Path
from types import MappingProxyType
import hashlib

from cfonb_ledger.domain.errors import InvalidAmount

# Last character of an amount field -> (sign, last digit).
OVERPUNCH_TABLE = MappingProxyType(
    {
        "{": (1, "0"),
        "A": (1, "1"),
        "B": (1, "2"),
        "C": (1, "3"),
        "D": (1, "4"),
        "E": (1, "5"),
        "F": (1, "6"),
        "G": (1, "7"),
        "H": (1, "8"),
        "I": (1, "9"),
        "}": (-1, "0"),
        "J": (-1, "1"),
        "K": (-1, "2"),
        "L": (-1, "3"),
        "M": (-1, "4"),
        "N": (-1, "5"),
        "O": (-1, "6"),
        "P": (-1, "7"),
        "Q": (-1, "8"),
        "R": (-1, "9"),
    }
)
_REVERSE_OVERPUNCH = MappingProxyType({value: symbol for symbol, value in OVERPUNCH_TABLE.items()})

AMOUNT_WIDTH = 14
DEFAULT_CENTURY_PIVOT = 49


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def compute_file_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def decode_amount(field: str) -> Decimal:
    """Decode a signed-overpunch field holding minor currency units.

    The last character carries both the sign and the final digit, e.g.
    ``"0000000001234E"`` is ``123.45`` and ``"0000000001234N"`` is ``-123.45``.
    Characters missing from the table are read literally with a positive sign.
    """
    if not field or not field.strip():
        return Decimal("0")
    sign, last_digit = OVERPUNCH_TABLE.get(field[-1], (1, field[-1]))
    digits = field[:-1] + last_digit
    if not (digits.isascii() and digits.isdigit()):
        raise InvalidAmount(field)
    return Decimal(sign * int(digits)).scaleb(-2)


def encode_amount(value: Decimal, width: int = AMOUNT_WIDTH) -> str:
    cents = int((Decimal(value) * 100).to_integral_value())
    sign = -1 if cents < 0 else 1
    digits = str(abs(cents)).zfill(width)
    if len(digits) > width:
        raise ValueError(f"{value} does not fit in {width} characters")
    return digits[:-1] + _REVERSE_OVERPUNCH[(sign, digits[-1])]


def normalize_date(field: str, pivot: int = DEFAULT_CENTURY_PIVOT) -> str | None:
    """DDMMYY -> YYYY-MM-DD. Day and month are passed through unchecked."""
    if not field or len(field) != 6:
        return None
    day, month, year = field[0:2], field[2:4], field[4:6]
    try:
        century = "20" if int(year) <= pivot else "19"
    except ValueError:
        century = "19"
    return f"{century}{year}-{month}-{day}"


def format_display_date(iso_date: str | None) -> str:
    if not iso_date:
        return ""
    year, month, day = iso_date.split("-", 2)
    return f"{day}/{month}/{year}"
