"""File-backed repositories for CFONB statements."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path

from cfonb_ledger.config import SETTINGS
from cfonb_ledger.domain.repositories import StatementRepository
from cfonb_ledger.infrastructure.parsing.utils import compute_file_hash, ensure_bytes


class CfonbFileRepository(StatementRepository):
    """Reads a statement from disk or memory using a single-byte encoding."""

    def __init__(
        self,
        source: BytesIO | Path | bytes,
        source_name: str | None = None,
        encoding: str | None = None,
    ) -> None:
        self._source = ensure_bytes(source)
        self._encoding = encoding or SETTINGS.encoding
        self.source_name = source_name or (source.name if isinstance(source, Path) else "statement.txt")
        self.file_hash = compute_file_hash(self._source)

    def load_text(self) -> str:
        return self._source.decode(self._encoding)
