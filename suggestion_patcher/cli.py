"""
CLI entry point — argument parsing, run, exit status.

Usage::

    export PR=123 BOT=coderabbitai[bot]
    suggestion-patcher

The last line on stdout is always ``APPLIED_COUNT=<n>`` so callers can parse
it, including after a failure (pinned to 0).
"""

import argparse
import logging
import sys

from .cli_display import setup_logger
from .config import Config, ConfigError
from .github_client import CommentFetchError
from .pipeline import run_pipeline
from .report import count_line, format_summary

logger = logging.getLogger("suggestion_patcher.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="suggestion-patcher",
        description="Apply review bot 'suggested change' blocks from a pull "
                    "request to the local checkout.",
    )
    parser.add_argument("--pr", default=None,
                        help="Pull request number (default: $PR)")
    parser.add_argument("--bot", default=None,
                        help="Login of the reviewer whose suggestions to apply "
                             "(default: $BOT or coderabbitai[bot])")
    parser.add_argument("--repo", default=None,
                        help="GitHub repository as owner/name "
                             "(default: detected via gh or the origin remote)")
    parser.add_argument("--comments-file", default=None,
                        help="Read review comments from a JSON file instead "
                             "of the GitHub API")
    parser.add_argument("--root", default=".",
                        help="Checkout the comment paths are relative to")
    parser.add_argument("--config", default=None,
                        help="Path to .suggestion_patcher.yaml config file")
    parser.add_argument("--report", default=None,
                        help="Write a JSON run summary to this path")
    parser.add_argument("--log-dir", default=None,
                        help="Directory for the run log file")
    parser.add_argument("--no-log-file", action="store_true",
                        help="Log to the console only")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show debug output on the console")
    return parser


def _attach_log_file(log_dir: str, verbose: bool) -> None:
    try:
        _, log_file = setup_logger(log_dir, verbose=verbose)
    except OSError as exc:
        setup_logger(None, verbose=verbose)
        logger.warning("Cannot write log file to %s: %s", log_dir, exc)
        return
    logger.debug("Logging to %s", log_file)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # Console only until the run parameters are known to be valid
    setup_logger(None, verbose=args.verbose)

    try:
        cfg = Config.load(args.config)
        cfg.override(pr=args.pr, bot=args.bot, repo=args.repo,
                     report_file=args.report, log_dir=args.log_dir)
        cfg.require_pr()
    except ConfigError as exc:
        logger.error("%s", exc)
        logger.error("   Usage: export PR=123 && suggestion-patcher "
                     "(or pass --pr 123)")
        print(count_line(0))
        return 1

    if not args.no_log_file and cfg.LOG_DIR:
        _attach_log_file(cfg.LOG_DIR, args.verbose)

    try:
        summary = run_pipeline(cfg, comments_file=args.comments_file,
                               root=args.root)
    except ConfigError as exc:
        logger.error("%s", exc)
        print(count_line(0))
        return 1
    except CommentFetchError as exc:
        logger.error("Failed to fetch review comments: %s", exc)
        print(count_line(0))
        return 1
    except Exception as exc:
        logger.error("Script error: %s", exc)
        logger.debug("Stack trace:", exc_info=True)
        print(count_line(0))
        return 1

    if summary.total == 0:
        print(count_line(0))
        return 0

    logger.info(format_summary(summary))
    print(count_line(summary.applied))
    return 0


if __name__ == "__main__":
    sys.exit(main())
