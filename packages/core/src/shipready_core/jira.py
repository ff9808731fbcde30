"""Ticket-tracker collaborator and the readiness resolver built on top of it."""

from __future__ import annotations

import logging
from typing import Iterable

import requests

from shipready_core.errors import EmptyInputError, UpstreamError
from shipready_core.models import TicketKey, TicketStatus

logger = logging.getLogger(__name__)

DEFAULT_READY_FIELD = "customfield_19899"
DEFAULT_READY_VALUE = "Go"
_TIMEOUT = 30


class JiraClient:
    """Queries the Jira REST search endpoint for a batch of issue keys.

    One request per call, capped at ``max_results`` issues. Callers with more
    keys than that must split the batch themselves.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        ready_field: str = DEFAULT_READY_FIELD,
        max_results: int = 100,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.ready_field = ready_field
        self.max_results = max_results
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            }
        )

    def query_tickets(self, keys: Iterable[TicketKey]) -> list[dict]:
        """Return ``{key, status_label, ready_marker_value}`` for each matching issue."""
        keys = list(keys)
        params = {"jql": f"key in ({','.join(keys)})", "maxResults": str(self.max_results)}

        try:
            response = self._session.get(f"{self.base_url}/rest/api/2/search", params=params, timeout=_TIMEOUT)
        except requests.RequestException as e:
            raise UpstreamError(f"Error fetching Jira issues: {e}") from e

        if not response.ok:
            logger.debug("Jira search failed with %s: %s", response.status_code, response.text[:200])
            raise UpstreamError(f"Error fetching Jira issues: HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError("Jira search returned a non-JSON payload") from e

        issues = payload.get("issues") if isinstance(payload, dict) else None
        if not isinstance(issues, list):
            raise UpstreamError("Jira search payload has no 'issues' list")

        return [self._to_item(issue) for issue in issues]

    def _to_item(self, issue) -> dict:
        key = issue.get("key") if isinstance(issue, dict) else None
        if not isinstance(key, str):
            raise UpstreamError(f"Jira issue without a key: {issue!r:.200}")

        fields = issue.get("fields")
        if not isinstance(fields, dict):
            fields = {}
        status = fields.get("status") or {}
        status_name = status.get("name") if isinstance(status, dict) else None
        marker = fields.get(self.ready_field) or {}
        marker_value = marker.get("value") if isinstance(marker, dict) else None

        return {
            "key": key,
            "status_label": status_name if isinstance(status_name, str) else "",
            "ready_marker_value": marker_value if isinstance(marker_value, str) else None,
        }


class TicketStatusResolver:
    def __init__(self, client: JiraClient, ready_value: str = DEFAULT_READY_VALUE):
        self.client = client
        self.ready_value = ready_value

    def resolve(self, keys: Iterable[TicketKey]) -> list[TicketStatus]:
        """Look up status and readiness for ``keys`` in a single tracker query.

        Raises EmptyInputError without touching the network when ``keys`` is
        empty, and UpstreamError when the query fails. Unknown keys are simply
        absent from the result.
        """
        keys = list(keys)
        if not keys:
            raise EmptyInputError("No issue keys provided")

        return [
            TicketStatus(
                key=item["key"],
                status=item["status_label"],
                ready=item["ready_marker_value"] == self.ready_value,
            )
            for item in self.client.query_tickets(keys)
        ]
