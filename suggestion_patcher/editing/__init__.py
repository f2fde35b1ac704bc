"""Suggestion editing — extract review suggestions and apply them by line range."""

from .suggestion_parser import (
    EditRequest, FileEditBatch, SuggestionParser, extract_suggestion, group_by_file,
)
from .patch_applier import PatchApplier, ApplyResult, AppliedEdit

__all__ = [
    "EditRequest", "FileEditBatch", "SuggestionParser",
    "extract_suggestion", "group_by_file",
    "PatchApplier", "ApplyResult", "AppliedEdit",
]
