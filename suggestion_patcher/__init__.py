"""
suggestion_patcher — apply pull request review suggestions to a checkout.

Public API for library usage::

    from suggestion_patcher import apply_suggestions, RunResult

    result = apply_suggestions(pr=123)
"""

from .api import apply_suggestions, RunResult

__all__ = ["apply_suggestions", "RunResult"]
