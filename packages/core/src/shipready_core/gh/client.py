"""Source-control collaborator backed by PyGithub.

Every call is a single attempt. GitHub and transport failures are re-raised
as UpstreamError so the pipeline only has to deal with its own taxonomy.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone

import requests
from github import Github, GithubException

from shipready_core.errors import TimestampParseError, UpstreamError
from shipready_core.models import ChangeRequest, CommitRecord

logger = logging.getLogger(__name__)


@contextmanager
def _upstream(action: str):
    try:
        yield
    except GithubException as e:
        raise UpstreamError(f"GitHub {action} failed (HTTP {e.status}): {e.data}") from e
    except requests.RequestException as e:
        raise UpstreamError(f"GitHub {action} failed: {e}") from e
    except ValueError as e:
        raise UpstreamError(f"GitHub {action} returned an unparsable payload: {e}") from e


def parse_timestamp(value) -> datetime:
    """Parse an ISO-8601 commit date into an aware UTC datetime."""
    if not isinstance(value, str) or not value:
        raise TimestampParseError(f"Commit date is missing or not a string: {value!r}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise TimestampParseError(f"Could not parse commit date {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class GitHubClient:
    """One PyGithub instance per thread; PyGithub connections are not thread-safe."""

    def __init__(self, token: str, base_url: str = "https://api.github.com"):
        self.base_url = base_url
        self._token = token
        self._local = threading.local()

    @property
    def _gh(self) -> Github:
        gh = getattr(self._local, "gh", None)
        if gh is None:
            gh = self._local.gh = Github(self._token, base_url=self.base_url, lazy=True)
        return gh

    def _repo(self, owner: str, repo: str):
        return self._gh.get_repo(f"{owner}/{repo}")

    def get_commit(self, owner: str, repo: str, sha: str, with_change_request: bool = False) -> CommitRecord:
        """Fetch one commit; ``with_change_request`` adds the first PR's title and body."""
        with _upstream(f"commit lookup for {owner}/{repo}@{sha}"):
            raw = self._repo(owner, repo).get_commit(sha).raw_data

        try:
            detail = raw["commit"]
            date = detail["committer"]["date"]
            author_email = detail["author"]["email"] or ""
            message = detail["message"] or ""
        except (KeyError, TypeError) as e:
            raise UpstreamError(f"Malformed commit payload for {owner}/{repo}@{sha}: missing {e}") from e

        timestamp = parse_timestamp(date)

        request = ChangeRequest.empty()
        if with_change_request:
            request = self.find_first_request_for_commit(owner, repo, sha)

        return CommitRecord(
            revision=sha,
            timestamp=timestamp,
            author_email=author_email,
            message=message,
            request_title=request.title,
            request_body=request.body,
        )

    def list_commits_since(self, owner: str, repo: str, timestamp: datetime) -> list[str]:
        """Return the SHAs of commits on the default branch since ``timestamp``."""
        with _upstream(f"commit listing for {owner}/{repo}"):
            shas = [c.sha for c in self._repo(owner, repo).get_commits(since=timestamp)]
        logger.debug("%d commit(s) in %s/%s since %s", len(shas), owner, repo, timestamp.isoformat())
        return shas

    def get_file_contents(self, owner: str, repo: str, path: str) -> str:
        with _upstream(f"contents lookup for {owner}/{repo}:{path}"):
            content = self._repo(owner, repo).get_contents(path)
            if isinstance(content, list):
                raise UpstreamError(f"{owner}/{repo}:{path} is a directory, not a file")
            data = content.decoded_content

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise UpstreamError(f"{owner}/{repo}:{path} is not valid UTF-8") from e

    def find_first_request_for_commit(self, owner: str, repo: str, sha: str) -> ChangeRequest:
        """Return the earliest-created pull request containing ``sha``, or an empty one."""
        query = f"SHA:{sha} repo:{owner}/{repo} type:pr"
        with _upstream(f"pull request search for {sha}"):
            for issue in self._gh.search_issues(query, sort="created", order="asc"):
                return ChangeRequest(title=issue.title or "", body=issue.body or "")
        return ChangeRequest.empty()
