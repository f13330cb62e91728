"""Exceptions raised while reading CFONB statements."""
from __future__ import annotations

from enum import Enum


class FileFormat(str, Enum):
    XML = "XML"
    JSON = "JSON"
    CSV = "CSV"
    EMPTY = "EMPTY"


_FORMAT_MESSAGES = {
    FileFormat.XML: (
        "XML file detected (probably SEPA). Only CFONB 120/121 character statements are supported.\n"
        "Ask your bank for a CFONB export delivered through EBICS."
    ),
    FileFormat.JSON: "JSON file detected. Only CFONB 120/121 character statements are supported.",
    FileFormat.CSV: "CSV file detected. Only CFONB 120/121 character statements are supported.",
    FileFormat.EMPTY: "The file is empty or contains no usable line.",
}


class CfonbError(Exception):
    """Base class for every error raised by the package."""


class FormatError(CfonbError):
    """The whole input is not a CFONB statement. Aborts the parse."""

    def __init__(self, kind: FileFormat) -> None:
        self.kind = kind
        super().__init__(_FORMAT_MESSAGES[kind])


class DecodeError(CfonbError):
    """A single line could not be decoded. The parse continues with the next line."""


class InvalidLength(DecodeError):
    def __init__(self, actual: int) -> None:
        self.actual = actual
        super().__init__(f"Invalid length: {actual} characters instead of 120")


class UnknownRecordType(DecodeError):
    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Unknown record type: {code}")


class InvalidAmount(DecodeError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Invalid amount field: {field!r}")
