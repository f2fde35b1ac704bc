"""
Suggestion parser — turns raw review comments into line-range edit requests.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)

# First ```suggestion fenced block in a comment body
_SUGGESTION_PATTERN = re.compile(r"```suggestion\s*\n(.*?)```", re.DOTALL)

# Ordered fallbacks for the line fields GitHub may populate
START_LINE_FIELDS = ("start_line", "original_start_line", "line", "original_line")
END_LINE_FIELDS = ("line", "original_line")


@dataclass
class EditRequest:
    """A single suggested change: replace lines start..end of *path*."""
    path: str
    start_line: int            # 1-indexed, inclusive, original coordinates
    end_line: int              # 1-indexed, inclusive, original coordinates
    text: str = ""
    id: Any = None
    url: str = ""

    @property
    def replacement_lines(self) -> list[str]:
        """Replacement split into lines; one trailing newline is ignored."""
        text = self.text[:-1] if self.text.endswith("\n") else self.text
        if not text:
            return []
        return text.split("\n")

    @property
    def is_deletion(self) -> bool:
        return not self.replacement_lines

    @property
    def span(self) -> str:
        return f"{self.start_line}-{self.end_line}"


FileEditBatch = dict[str, list[EditRequest]]


def _coerce_line(value: Any) -> int | None:
    """Return *value* as a line number, or None when it is unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value or None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value else None
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.lstrip("-").isdigit():
            return int(stripped) or None
    return None


def _first_line(record: Mapping[str, Any], fields: Iterable[str]) -> int | None:
    for name in fields:
        line = _coerce_line(record.get(name))
        if line is not None:
            return line
    return None


def extract_suggestion(body: str | None) -> str | None:
    """Return the text inside the first suggestion block of *body*.

    Carriage returns are removed. Returns None when the body carries no
    suggestion block at all; an empty block yields ``""``.
    """
    if not isinstance(body, str) or not body:
        return None
    match = _SUGGESTION_PATTERN.search(body)
    if not match:
        return None
    return match.group(1).replace("\r", "")


class SuggestionParser:
    """Extract :class:`EditRequest` objects from review-comment records.

    Parameters
    ----------
    bot:
        Only comments authored by this login are considered. An empty
        value disables the author filter.
    """

    def __init__(self, bot: str = "") -> None:
        self._bot = bot

    def parse_all(self, records: Iterable[Mapping[str, Any]]) -> list[EditRequest]:
        """Parse every record, dropping the ones that yield no request."""
        requests: list[EditRequest] = []
        for record in records:
            if not isinstance(record, Mapping):
                logger.warning(
                    "[Suggestions] Skipping malformed comment record: %r",
                    record,
                )
                continue
            if not self._is_from_bot(record):
                continue
            request = self.parse(record)
            if request is not None:
                requests.append(request)
        return requests

    def parse(self, record: Mapping[str, Any]) -> EditRequest | None:
        """Build an edit request from one comment record.

        Returns None (and logs why) when the record has no suggestion
        block, no path, or no usable line number.
        """
        text = extract_suggestion(record.get("body"))
        if text is None:
            logger.debug(
                "[Suggestions] Comment %s has no suggestion block",
                record.get("id"),
            )
            return None

        path = record.get("path")
        start = _first_line(record, START_LINE_FIELDS)
        end = _first_line(record, END_LINE_FIELDS)
        if end is None:
            end = start

        if not path or start is None or end is None:
            logger.warning(
                "[Suggestions] Skipping suggestion %s: missing path/line info",
                record.get("id"),
            )
            logger.warning(
                "[Suggestions]     Path: %s, Start: %s, End: %s (fields: %s)",
                path, start, end,
                {name: record.get(name) for name in START_LINE_FIELDS},
            )
            return None

        return EditRequest(
            path=str(path),
            start_line=start,
            end_line=end,
            text=text,
            id=record.get("id"),
            url=record.get("html_url") or "",
        )

    def _is_from_bot(self, record: Mapping[str, Any]) -> bool:
        if not self._bot:
            return True
        user = record.get("user")
        if not isinstance(user, Mapping):
            return False
        return user.get("login") == self._bot


def group_by_file(requests: Iterable[EditRequest]) -> FileEditBatch:
    """Group edit requests by target path, keeping first-seen path order."""
    batch: FileEditBatch = {}
    for request in requests:
        batch.setdefault(request.path, []).append(request)
    return batch
