"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Protocol


class StatementRepository(Protocol):
    """Provides the raw text of one CFONB statement."""

    source_name: str
    file_hash: str

    def load_text(self) -> str:
        ...
