from __future__ import annotations

from rich.console import Console

from shipready_core.models import Report, ReportEntry

READY_ICON = "🍏"
NOT_READY_ICON = "🍎"


def _matches_author(entry: ReportEntry, author: str) -> bool:
    author = author.lower().lstrip("@")
    return author in (entry.commit.author_handle.lower(), entry.commit.author_email.lower())


def format_entry(entry: ReportEntry, server: str, owner: str, repo: str) -> str:
    commit = entry.commit
    ticket = entry.ticket
    icon = READY_ICON if ticket is not None and ticket.ready else NOT_READY_ICON
    ticket_key = ticket.key if ticket is not None else ""
    return (
        f"{icon} @{commit.author_handle} {server}/{owner}/{repo}/commit/{commit.revision} "
        f"({commit.short_revision}) - [{ticket_key}] {commit.title}"
    )


def render_report(report: Report, server: str, author: str | None = None) -> list[str]:
    """Render ``report`` as plain text lines: compare URL, blank line, one line per commit."""
    server = server.rstrip("/")
    lines = [
        f"{server}/{report.owner}/{report.repo}/compare/{report.baseline_revision}...{report.target_revision}",
        "",
    ]
    for entry in report.entries:
        if author and not _matches_author(entry, author):
            continue
        lines.append(format_entry(entry, server, report.owner, report.repo))
    return lines


def print_report(report: Report, server: str, console: Console | None = None, author: str | None = None) -> None:
    console = console or Console()
    # Ticket keys look like rich markup ("[FOO-1]"), so print verbatim.
    for line in render_report(report, server, author=author):
        console.print(line, markup=False, highlight=False, emoji=False, soft_wrap=True)
