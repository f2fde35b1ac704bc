"""
Programmatic API — use the suggestion applier as a library.

Example usage::

    from suggestion_patcher import apply_suggestions

    result = apply_suggestions(pr=123, bot="coderabbitai[bot]")
    print(result.success)
    print(result.summary.applied)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from .config import Config, ConfigError
from .github_client import CommentFetchError
from .pipeline import run_pipeline
from .report import RunSummary

_logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Structured result returned by :func:`apply_suggestions`."""
    success: bool
    summary: RunSummary = field(default_factory=RunSummary)
    error: str = ""

    @property
    def applied_count(self) -> int:
        return self.summary.applied if self.success else 0


def apply_suggestions(
    pr: int | str | None = None,
    *,
    bot: str | None = None,
    repo: str | None = None,
    comments: Iterable[Mapping[str, Any]] | None = None,
    comments_file: str | None = None,
    root: str = ".",
    config_path: str | None = None,
) -> RunResult:
    """Apply a pull request's review suggestions and return the outcome.

    Arguments left as ``None`` fall back to the environment, the YAML
    config and the defaults, as for the CLI. Configuration and fetch
    failures are reported through :attr:`RunResult.error`, not raised.
    """
    try:
        cfg = Config.load(config_path).override(pr=pr, bot=bot, repo=repo)
        summary = run_pipeline(cfg, comments=comments,
                               comments_file=comments_file, root=root)
    except (ConfigError, CommentFetchError) as exc:
        _logger.error("Suggestion run failed: %s", exc)
        return RunResult(success=False, error=str(exc))

    return RunResult(success=True, summary=summary)
