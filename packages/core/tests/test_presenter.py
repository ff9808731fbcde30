"""Tests for report rendering."""

import io
from datetime import datetime, timezone

from rich.console import Console

from shipready_core.models import CommitRecord, Report, ReportEntry, TicketStatus
from shipready_core.presenter import print_report, render_report

SERVER = "https://github.example.com"
SHA = "def2220123456789"


def _commit(sha=SHA, email="jane.doe@example.com", message="Fix FOO-42 bug\n\nDetails", title="FOO-42: fix checkout"):
    return CommitRecord(
        revision=sha,
        timestamp=datetime(2024, 1, 2, tzinfo=timezone.utc),
        author_email=email,
        message=message,
        request_title=title,
    )


def _report(*entries, target="master"):
    return Report(owner="acme", repo="foo-web", baseline_revision="abc111", entries=tuple(entries), target_revision=target)


def test_header_is_compare_url_followed_by_blank_line():
    lines = render_report(_report(target="v1.2"), SERVER + "/")
    assert lines == [f"{SERVER}/acme/foo-web/compare/abc111...v1.2", ""]


def test_ready_ticket_line():
    entry = ReportEntry(commit=_commit(), ticket=TicketStatus(key="FOO-42", status="Done", ready=True))
    line = render_report(_report(entry), SERVER)[2]
    assert line == (
        f"🍏 @jane.doe {SERVER}/acme/foo-web/commit/{SHA} (def2220) - [FOO-42] FOO-42: fix checkout"
    )


def test_not_ready_ticket_uses_red_icon():
    entry = ReportEntry(commit=_commit(), ticket=TicketStatus(key="FOO-42", status="Open", ready=False))
    assert render_report(_report(entry), SERVER)[2].startswith("🍎 @jane.doe ")


def test_missing_ticket_renders_empty_key():
    line = render_report(_report(ReportEntry(commit=_commit())), SERVER)[2]
    assert line.startswith("🍎 ")
    assert " - [] " in line


def test_title_falls_back_to_message_subject():
    entry = ReportEntry(commit=_commit(title=""))
    assert render_report(_report(entry), SERVER)[2].endswith("[] Fix FOO-42 bug")


def test_author_filter_matches_handle_or_email():
    jane = ReportEntry(commit=_commit(sha="a" * 10))
    sam = ReportEntry(commit=_commit(sha="b" * 10, email="sam@example.com"))
    report = _report(jane, sam)

    assert len(render_report(report, SERVER, author="@Sam")) == 3
    assert "@sam" in render_report(report, SERVER, author="sam@example.com")[2]
    assert len(render_report(report, SERVER, author="nobody")) == 2


def test_print_report_writes_lines_verbatim():
    buffer = io.StringIO()
    console = Console(file=buffer, width=40)
    entry = ReportEntry(commit=_commit(), ticket=TicketStatus(key="FOO-42", status="Done", ready=True))

    print_report(_report(entry), SERVER, console=console)

    output = buffer.getvalue().splitlines()
    assert output == render_report(_report(entry), SERVER)
