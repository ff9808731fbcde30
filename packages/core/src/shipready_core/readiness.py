"""Deploy readiness orchestration.

Pipeline:
    deployed revision (config repo) → baseline commit → commits since baseline
    → ticket keys per commit → ticket readiness (Jira) → Report

Steps up to and including the history gather are all-or-nothing: any error
aborts the run. Ticket lookups are the exception: a failed lookup is logged
and the scan moves on to the commit's next text field.
"""

from __future__ import annotations

import logging

from shipready_core.config import Config
from shipready_core.deployed import ConfigRevisionResolver
from shipready_core.errors import UpstreamError
from shipready_core.fanout import fan_out
from shipready_core.gh.client import GitHubClient
from shipready_core.history import CommitHistoryGatherer
from shipready_core.jira import JiraClient, TicketStatusResolver
from shipready_core.models import CommitRecord, Report, ReportEntry, RevisionId, TicketStatus
from shipready_core.profiles import get_profile
from shipready_core.tickets import TicketExtractor

logger = logging.getLogger(__name__)


class DeployReadinessEngine:
    def __init__(
        self,
        extractor: TicketExtractor,
        deployed: ConfigRevisionResolver,
        gatherer: CommitHistoryGatherer,
        tickets: TicketStatusResolver,
        max_workers: int | None = None,
        default_target: str = "master",
    ):
        self.extractor = extractor
        self.deployed = deployed
        self.gatherer = gatherer
        self.tickets = tickets
        self.max_workers = max_workers
        self.default_target = default_target

    def build_report(
        self,
        owner: str,
        service_name: str,
        env: str,
        sub_name: str | None = None,
        cluster: str | None = None,
        target_revision: RevisionId | None = None,
    ) -> Report:
        """Return the commits of ``owner/service_name`` not yet deployed to ``env``."""
        repo = service_name

        baseline_revision = self.deployed.resolve(service_name, env, sub_name=sub_name, cluster=cluster)
        baseline = self.gatherer.fetch_baseline(owner, repo, baseline_revision)
        commits = self.gatherer.gather_since(owner, repo, baseline)

        correlated = fan_out(
            lambda commit: (commit.revision, self.correlate(commit)),
            commits,
            max_workers=self.max_workers,
        )
        tickets = merge_correlations(correlated)

        return Report(
            owner=owner,
            repo=repo,
            baseline_revision=baseline.revision,
            entries=tuple(ReportEntry(commit=c, ticket=tickets.get(c.revision)) for c in commits),
            target_revision=target_revision or self.default_target,
        )

    def correlate(self, commit: CommitRecord) -> list[TicketStatus]:
        """Ticket statuses for the first text field that yields keys and a successful lookup."""
        for field_name, text in zip(("message", "request_title", "request_body"), commit.text_fields()):
            keys = self.extractor.extract(text)
            if not keys:
                continue
            try:
                return self.tickets.resolve(keys)
            except UpstreamError as e:
                logger.warning(
                    "Ticket lookup for %s (%s: %s) failed, trying next field: %s",
                    commit.short_revision,
                    field_name,
                    ", ".join(keys),
                    e,
                )
        return []


def merge_correlations(results: list[tuple[RevisionId, list[TicketStatus]]]) -> dict[RevisionId, TicketStatus]:
    """Collapse per-commit statuses to one ticket per commit.

    When a field referenced several tickets the last status returned wins.
    """
    merged: dict[RevisionId, TicketStatus] = {}
    for revision, statuses in results:
        for status in statuses:
            merged[revision] = status
    return merged


def build_engine(config: Config, project: str) -> DeployReadinessEngine:
    """Wire the collaborators for ``project`` from the process Config."""
    config.require("github_token", "jira_server", "jira_token", "config_owner")
    profile = get_profile(project, config.projects)

    github = GitHubClient(token=config.github_token, base_url=config.api_url)
    jira = JiraClient(
        base_url=config.jira_server,
        token=config.jira_token,
        ready_field=config.ready_field,
        max_results=config.max_results,
    )

    return DeployReadinessEngine(
        extractor=profile.extractor(),
        deployed=ConfigRevisionResolver(github, config.config_owner, config.config_repo, config.config_path),
        gatherer=CommitHistoryGatherer(github, max_workers=config.max_workers),
        tickets=TicketStatusResolver(jira, ready_value=config.ready_value),
        max_workers=config.max_workers,
        default_target=config.default_target,
    )
