"""Early rejection of inputs that are clearly not CFONB statements."""
from __future__ import annotations

import re

from cfonb_ledger.domain.errors import FileFormat, FormatError

_CSV_SPLIT = re.compile(r"[,;]")
_CSV_MIN_FIELDS = 5


def detect_foreign_format(text: str) -> FileFormat | None:
    trimmed = text.strip()
    if not trimmed:
        return FileFormat.EMPTY
    if trimmed.startswith("<"):
        return FileFormat.XML
    if trimmed.startswith(("{", "[")):
        return FileFormat.JSON
    first_line = next(line for line in text.split("\n") if line.strip())
    if "," in first_line and ";" in first_line and len(_CSV_SPLIT.split(first_line)) > _CSV_MIN_FIELDS:
        return FileFormat.CSV
    return None


def sniff_format(text: str) -> None:
    """Raise FormatError when the text is XML, JSON, CSV or has no content line."""
    detected = detect_foreign_format(text)
    if detected is not None:
        raise FormatError(detected)
