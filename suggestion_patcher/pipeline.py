"""
Pipeline — fetch review comments, extract suggestions, apply them, summarize.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from .config import Config
from .editing.patch_applier import PatchApplier
from .editing.suggestion_parser import SuggestionParser, group_by_file
from .github_client import GitHubClient, load_comments_file, resolve_repo
from .report import RunSummary, write_json_report

logger = logging.getLogger(__name__)


def fetch_comments(cfg: Config, pr: int, root: str = ".") -> tuple[str, list[dict]]:
    """Fetch the PR's review comments from GitHub. Returns (repo, comments)."""
    repo = resolve_repo(cfg.REPO, cwd=root)
    logger.info("Fetching suggestions from %s for PR #%d...", cfg.BOT, pr)
    logger.info("Repository: %s", repo)

    client = GitHubClient(
        repo,
        token=cfg.GITHUB_TOKEN,
        api_url=cfg.GITHUB_API_URL,
        timeout=cfg.REQUEST_TIMEOUT,
    )
    return repo, client.fetch_review_comments(pr)


def run_pipeline(
    cfg: Config,
    *,
    comments: Iterable[Mapping[str, Any]] | None = None,
    comments_file: str | None = None,
    root: str = ".",
) -> RunSummary:
    """Apply a pull request's review suggestions to the checkout at *root*.

    Comments come from *comments*, else *comments_file*, else the GitHub
    API. Raises :class:`~suggestion_patcher.config.ConfigError` when the PR
    number is missing and
    :class:`~suggestion_patcher.github_client.CommentFetchError` when the
    comments cannot be loaded; every other problem is counted as a skip.
    """
    pr = cfg.require_pr()
    repo = cfg.REPO or ""

    if comments is not None:
        records = list(comments)
    elif comments_file:
        logger.info("Loading comments for PR #%d from %s", pr, comments_file)
        records = load_comments_file(comments_file)
    else:
        repo, records = fetch_comments(cfg, pr, root=root)

    logger.info("Found %d total comments", len(records))

    suggestions = SuggestionParser(bot=cfg.BOT).parse_all(records)
    if not suggestions:
        logger.info("No suggestions found")
        summary = RunSummary(pr=pr, repo=repo)
        _maybe_write_report(cfg, summary)
        return summary

    logger.info("Found %d suggestions to apply:", len(suggestions))
    for s in suggestions:
        logger.info("   %s:%s (ID: %s)", s.path, s.span, s.id)

    batch = group_by_file(suggestions)
    result = PatchApplier(root=root).apply(batch)

    summary = RunSummary.from_result(len(suggestions), result, pr=pr, repo=repo)
    _maybe_write_report(cfg, summary)
    return summary


def _maybe_write_report(cfg: Config, summary: RunSummary) -> None:
    if not cfg.REPORT_FILE:
        return
    try:
        path = write_json_report(summary, cfg.REPORT_FILE)
        logger.info("Report written to %s", path)
    except OSError as exc:
        logger.warning("Failed to write report %s: %s", cfg.REPORT_FILE, exc)
