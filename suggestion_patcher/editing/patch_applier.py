"""
Patch applier — applies suggestion line ranges to files bottom-up so that
every edit's original line numbers stay valid while earlier edits change the
line count below it.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field, replace
from typing import Iterable

from .suggestion_parser import EditRequest, FileEditBatch

logger = logging.getLogger(__name__)

STATUS_APPLIED = "applied"
STATUS_SKIPPED = "skipped"


@dataclass
class AppliedEdit:
    """Log entry for one edit request."""
    id: object
    path: str
    start_line: int
    end_line: int
    status: str = STATUS_SKIPPED
    old_count: int = 0
    new_count: int = 0
    reason: str = ""

    @property
    def applied(self) -> bool:
        return self.status == STATUS_APPLIED


@dataclass
class ApplyResult:
    """Result of applying a batch of edit requests."""
    applied: int = 0
    skipped: int = 0
    entries: list[AppliedEdit] = field(default_factory=list)
    files_modified: list[str] = field(default_factory=list)

    def add(self, entry: AppliedEdit) -> None:
        self.entries.append(entry)
        if entry.applied:
            self.applied += 1
        else:
            self.skipped += 1


def _skip(edit: EditRequest, reason: str) -> AppliedEdit:
    return AppliedEdit(
        id=edit.id, path=edit.path,
        start_line=edit.start_line, end_line=edit.end_line,
        status=STATUS_SKIPPED, reason=reason,
    )


class PatchApplier:
    """Apply grouped edit requests to files under *root*."""

    def __init__(self, root: str = ".") -> None:
        self._root = root

    def apply(self, batch: FileEditBatch) -> ApplyResult:
        """Apply every file's edits, one file at a time.

        Failures are contained: a missing file skips that file's edits,
        a bad edit skips only itself. Nothing here raises for a single
        file or edit.

        Parameters
        ----------
        batch:
            Mapping of relative file path → edit requests for that file.

        Returns
        -------
        ApplyResult
            Applied/skipped counts and one log entry per edit request.
        """
        result = ApplyResult()
        logger.info("[Patch] Processing %d files...", len(batch))

        for file_path, edits in batch.items():
            logger.info(
                "[Patch] Processing %s (%d suggestions)...",
                file_path, len(edits),
            )
            entries, modified = self._apply_file(file_path, edits)
            for entry in entries:
                result.add(entry)
            if modified:
                result.files_modified.append(file_path)

        return result

    # ------------------------------------------------------------------
    # Single-file application
    # ------------------------------------------------------------------

    def _apply_file(
        self,
        file_path: str,
        edits: list[EditRequest],
    ) -> tuple[list[AppliedEdit], bool]:
        """Apply one file's edits. Returns (entries, file_was_written)."""
        abs_path = os.path.join(self._root, file_path)

        if not os.path.isfile(abs_path):
            logger.warning("[Patch] Skip missing file: %s", file_path)
            return [_skip(e, "file not found") for e in edits], False

        try:
            with open(abs_path, "r", encoding="utf-8", newline="") as f:
                original = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("[Patch] Cannot read %s: %s", file_path, exc)
            return [_skip(e, f"read failed: {exc}") for e in edits], False

        lines = original.split("\n")
        logger.info("[Patch]   File has %d lines", len(lines))

        lines, entries = self.apply_to_lines(lines, edits)
        new_content = "\n".join(lines)

        if new_content == original:
            logger.info("[Patch]   No changes made to %s", file_path)
            return entries, False

        try:
            self._safe_write(abs_path, new_content)
        except OSError as exc:
            logger.error("[Patch] Write failed for %s: %s", file_path, exc)
            return [
                replace(e, status=STATUS_SKIPPED, reason=f"write failed: {exc}")
                if e.applied else e
                for e in entries
            ], False

        logger.info("[Patch]   Updated %s", file_path)
        return entries, True

    def apply_to_lines(
        self,
        lines: list[str],
        edits: Iterable[EditRequest],
    ) -> tuple[list[str], list[AppliedEdit]]:
        """Apply edits to a working buffer of lines, bottom-up.

        *lines* is mutated in place and returned. Edits are sorted by
        (start_line, end_line) descending, so a splice never shifts the
        lines an edit still to be applied refers to, as long as ranges do
        not overlap. Overlapping ranges are not detected: the lower edit
        runs against the already-changed buffer.
        """
        ordered = sorted(
            edits, key=lambda e: (e.start_line, e.end_line), reverse=True,
        )
        logger.info("[Patch]   Applying suggestions from bottom to top...")

        entries: list[AppliedEdit] = []
        for edit in ordered:
            try:
                entries.append(self._splice(lines, edit))
            except Exception as exc:
                logger.warning(
                    "[Patch]   Failed to apply suggestion %s at %s: %s",
                    edit.id, edit.span, exc,
                )
                entries.append(_skip(edit, f"error: {exc}"))
        return lines, entries

    @staticmethod
    def _splice(lines: list[str], edit: EditRequest) -> AppliedEdit:
        """Replace the edit's inclusive range in *lines* with its text."""
        start_idx = max(1, edit.start_line) - 1
        end_idx = max(1, edit.end_line) - 1

        if start_idx >= len(lines) or end_idx >= len(lines):
            logger.warning(
                "[Patch]   Skip suggestion %s: line range %s exceeds "
                "file length (%d)",
                edit.id, edit.span, len(lines),
            )
            return _skip(edit, f"range exceeds file length ({len(lines)})")

        new_lines = edit.replacement_lines
        old_count = end_idx - start_idx + 1
        lines[start_idx:start_idx + old_count] = new_lines

        logger.info(
            "[Patch]   Applied suggestion %s at lines %s (%d -> %d lines)",
            edit.id, edit.span, old_count, len(new_lines),
        )
        return AppliedEdit(
            id=edit.id, path=edit.path,
            start_line=edit.start_line, end_line=edit.end_line,
            status=STATUS_APPLIED,
            old_count=old_count, new_count=len(new_lines),
        )

    # ------------------------------------------------------------------
    # File write
    # ------------------------------------------------------------------

    @staticmethod
    def _safe_write(abs_path: str, content: str) -> None:
        """Write content via temp file + rename."""
        tmp_path = abs_path + ".suggestion_patcher_tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            shutil.copymode(abs_path, tmp_path)
            shutil.move(tmp_path, abs_path)
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
