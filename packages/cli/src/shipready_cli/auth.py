"""GitHub token resolution with gh CLI fallback.

Resolution order (stops at first success):
  1. GITHUB_TOKEN environment variable
  2. `gh auth token --hostname <host>` (GitHub CLI session)
"""

from __future__ import annotations

import logging
import os
import subprocess
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def resolve_github_token(server: str = "https://github.com") -> str | None:
    """Return a GitHub token for ``server`` or None if no source is available.

    Never raises; callers should check for None and emit a UsageError.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    hostname = urlparse(server).hostname or "github.com"
    try:
        result = subprocess.run(
            ["gh", "auth", "token", "--hostname", hostname],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            gh_token = result.stdout.strip()
            if gh_token:
                logger.debug("Resolved GitHub token for %s via gh CLI session.", hostname)
                return gh_token
    except (FileNotFoundError, subprocess.TimeoutExpired):
        # gh is not installed or timed out
        pass

    return None
