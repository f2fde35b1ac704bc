"""
GitHub client — fetches pull request review comments, the raw input the
suggestion parser works on.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from . import git_utils

logger = logging.getLogger(__name__)

_PER_PAGE = 100


class CommentFetchError(Exception):
    """Raised when review comments cannot be fetched or decoded."""


def resolve_repo(explicit: str | None = None, cwd: str | None = None) -> str:
    """Return ``owner/name`` for the repository to query.

    Order: explicit value, the ``gh`` CLI, then the ``origin`` remote.
    """
    if explicit:
        slug = explicit.strip().strip("/")
        if slug.count("/") != 1 or not all(slug.split("/")):
            raise CommentFetchError(
                f"Repository must look like owner/name, got {explicit!r}")
        return slug

    slug = git_utils.gh_repo_slug(cwd=cwd)
    if slug:
        return slug

    url = git_utils.get_remote_url(cwd=cwd)
    slug = git_utils.parse_repo_slug(url) if url else None
    if slug:
        return slug

    raise CommentFetchError(
        "Could not determine the GitHub repository; pass --repo owner/name "
        "or set GITHUB_REPOSITORY")


def load_comments_file(path: str) -> list[dict[str, Any]]:
    """Load review comments from a JSON file (a list of comment objects)."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        raise CommentFetchError(f"Cannot read comments from {path}: {exc}") from exc

    if not isinstance(data, list):
        raise CommentFetchError(
            f"Expected a JSON list of comments in {path}, "
            f"got {type(data).__name__}")
    return data


class GitHubClient:
    """Minimal REST client for pull request review comments."""

    def __init__(self, repo: str, token: str = "",
                 api_url: str = "https://api.github.com",
                 timeout: float = 30, session: requests.Session | None = None):
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.token = token
        self._session = session or requests.Session()

    def _headers(self) -> dict:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def fetch_review_comments(self, pr: int) -> list[dict[str, Any]]:
        """Return every review comment on pull request *pr*, all pages."""
        url: str | None = f"{self.api_url}/repos/{self.repo}/pulls/{pr}/comments"
        params: dict | None = {"per_page": _PER_PAGE}
        comments: list[dict[str, Any]] = []

        while url:
            logger.debug("[GitHub] GET %s", url)
            try:
                response = self._session.get(
                    url, headers=self._headers(), params=params,
                    timeout=self.timeout)
                response.raise_for_status()
                page = response.json()
            except requests.RequestException as exc:
                raise CommentFetchError(
                    f"Failed to fetch comments for PR #{pr}: {exc}") from exc
            except ValueError as exc:
                raise CommentFetchError(
                    f"Malformed JSON in comments for PR #{pr}: {exc}") from exc

            if not isinstance(page, list):
                raise CommentFetchError(
                    f"Unexpected comments payload for PR #{pr}: "
                    f"{type(page).__name__}")
            comments.extend(page)

            # "next" URL already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None

        return comments
