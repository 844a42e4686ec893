"""
Tokenlog Collaborators

Issue list fetcher and balance sampler. Both return plain record lists
that the payload pipeline merges verbatim next to the reward batch.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from core.config.runtime import HttpConfig, TokenlogConfig
from core.http.client import HttpClient, HttpError
from core.schemas.canonical import format_datetime_canonical


logger = logging.getLogger(__name__)


GITHUB_ACCEPT = "application/vnd.github+json"


def _map_issue(issue: dict[str, Any]) -> dict[str, Any]:
    user = issue.get("user")
    return {
        "id": issue.get("id"),
        "title": issue.get("title"),
        "url": issue.get("html_url"),
        "createdAt": issue.get("created_at"),
        "author": user.get("login") if isinstance(user, dict) else None,
        "comments": issue.get("comments"),
    }


def fetch_github_issues(
    config: TokenlogConfig,
    http: Optional[HttpConfig] = None,
    *,
    client: Optional[HttpClient] = None,
) -> list[dict[str, Any]]:
    """
    Fetch open issues for the configured repository.

    Pull requests are dropped. Any failure (transport error, non-2xx status,
    malformed body, no issues) falls back to the configured mock issues.

    Args:
        config: Tokenlog configuration (repo, max_issues, mock_issues)
        http: HTTP settings used when no client is supplied
        client: Optional pre-built client

    Returns:
        List of {id, title, url, createdAt, author, comments} records
    """
    if not config.repo:
        return list(config.mock_issues)

    http = http or HttpConfig()
    url = f"{config.api_base.rstrip('/')}/repos/{config.repo}/issues"
    params = {"state": "open", "per_page": config.max_issues or 4}
    owns_client = client is None
    if client is None:
        client = HttpClient(
            timeout=http.timeout,
            max_retries=http.max_retries,
            retry_backoff=http.retry_backoff,
            default_headers={"Accept": GITHUB_ACCEPT, "User-Agent": http.user_agent},
        )

    try:
        response = client.get(url, params=params)
        if response.status_code == 403 and response.rate_limit_remaining == 0:
            raise HttpError("GitHub rate limit exhausted", status_code=403, response=response)
        if not response.ok:
            raise HttpError(f"GitHub returned {response.status_code}", status_code=response.status_code)
        data = response.json()
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise ValueError("unexpected issues payload")
        issues = [_map_issue(issue) for issue in data if not issue.get("pull_request")]
        if not issues:
            raise ValueError("no issues returned")
        return issues
    except (HttpError, ValueError) as e:
        logger.warning(f"tokenlog: falling back to mock issues: {e}")
        return list(config.mock_issues)
    finally:
        if owns_client:
            client.close()


def sample_balances(
    config: TokenlogConfig,
    *,
    now: Optional[datetime] = None,
) -> list[dict[str, Any]]:
    """
    Return the configured balance records stamped with one snapshot date.
    """
    snapshot_date = format_datetime_canonical(now or datetime.now(timezone.utc))
    return [{**entry, "snapshotDate": snapshot_date} for entry in config.mock_balances]


__all__ = [
    "fetch_github_issues",
    "sample_balances",
]
