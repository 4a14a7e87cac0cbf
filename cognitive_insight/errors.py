"""
Error taxonomy.

Input problems are rejected before the pipeline runs and surface as
InputValidationError with a machine-readable kind. Knowledge-table
problems can only occur at load time. Nothing inside an analysis raises
for missing lexicon/pattern/driver data; those contributions are skipped.
"""

from __future__ import annotations


class CognitiveInsightError(Exception):
    """Base class for all package errors."""


class InputValidationError(CognitiveInsightError):
    """Text, options or batch rejected before analysis."""

    KINDS = (
        "invalid_type",
        "empty_text",
        "text_too_short",
        "text_too_long",
        "invalid_options",
        "invalid_batch",
    )

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class KnowledgeBaseError(CognitiveInsightError):
    """Knowledge tables are malformed."""
