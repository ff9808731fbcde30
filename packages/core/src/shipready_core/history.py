from __future__ import annotations

import logging

from shipready_core.fanout import fan_out
from shipready_core.models import CommitRecord, RevisionId

logger = logging.getLogger(__name__)


class CommitHistoryGatherer:
    """Collects the commits that landed after a baseline revision.

    Each listed commit is fetched with its pull request details in a
    concurrent fan-out. A single failed fetch fails the whole gather.
    """

    def __init__(self, client, max_workers: int | None = None):
        self.client = client
        self.max_workers = max_workers

    def fetch_baseline(self, owner: str, repo: str, revision: RevisionId) -> CommitRecord:
        return self.client.get_commit(owner, repo, revision, with_change_request=False)

    def gather_since(self, owner: str, repo: str, baseline: CommitRecord) -> list[CommitRecord]:
        shas = self.client.list_commits_since(owner, repo, baseline.timestamp)

        records = fan_out(
            lambda sha: self.client.get_commit(owner, repo, sha, with_change_request=True),
            shas,
            max_workers=self.max_workers,
        )

        # The host's "since" filter is inclusive; the baseline itself is deployed.
        newer = [r for r in records if r.timestamp > baseline.timestamp and r.revision != baseline.revision]
        logger.info(
            "%d commit(s) in %s/%s after %s (%d listed)",
            len(newer),
            owner,
            repo,
            baseline.short_revision,
            len(records),
        )
        return newer

    def gather(self, owner: str, repo: str, revision: RevisionId) -> list[CommitRecord]:
        baseline = self.fetch_baseline(owner, repo, revision)
        return self.gather_since(owner, repo, baseline)
