from __future__ import annotations

import re

from shipready_core.models import TicketKey


class TicketExtractor:
    """Pulls ticket keys such as ``FOO-123`` out of free text."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.pattern = re.compile(rf"{re.escape(prefix)}-\d{{1,6}}", re.IGNORECASE)

    def extract(self, text: str | None) -> list[TicketKey]:
        """Return every match in order of appearance; duplicates are kept."""
        if not text:
            return []
        return [m.group(0) for m in self.pattern.finditer(text)]
