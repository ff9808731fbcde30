"""Pipeline data models.

Every entity is created by exactly one stage and handed to the next by value,
so all of them are frozen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

RevisionId = str
TicketKey = str


@dataclass(frozen=True)
class ChangeRequest:
    """Title and body of the pull request that introduced a commit."""

    title: str = ""
    body: str = ""

    @classmethod
    def empty(cls) -> ChangeRequest:
        return cls()


@dataclass(frozen=True)
class CommitRecord:
    revision: RevisionId
    timestamp: datetime
    author_email: str
    message: str
    request_title: str = ""
    request_body: str = ""

    @property
    def short_revision(self) -> str:
        return self.revision[:7]

    @property
    def author_handle(self) -> str:
        return self.author_email.split("@", 1)[0]

    @property
    def title(self) -> str:
        """Change-request title, or the message subject when no PR was found."""
        if self.request_title:
            return self.request_title
        return self.message.splitlines()[0] if self.message else ""

    def text_fields(self) -> list[str]:
        """Fields scanned for ticket keys, in priority order."""
        return [self.message, self.request_title, self.request_body]


@dataclass(frozen=True)
class TicketStatus:
    key: TicketKey
    status: str
    ready: bool


@dataclass(frozen=True)
class ReportEntry:
    commit: CommitRecord
    ticket: TicketStatus | None = None


@dataclass(frozen=True)
class Report:
    owner: str
    repo: str
    baseline_revision: RevisionId
    entries: tuple[ReportEntry, ...] = field(default_factory=tuple)
    target_revision: RevisionId = "master"
