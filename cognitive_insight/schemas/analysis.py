"""
Analysis Schemas — Per-Call Options

Pydantic model for the options accepted by CognitiveEngine.analyze().
Field names are snake_case; the camelCase names used by JSON callers
(contextWindow, temporalSegments, minConfidence, useCache) are accepted
as aliases.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cognitive_insight.config import settings


class AnalysisOptions(BaseModel):
    """Options for one analysis. Defaults come from settings."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        frozen=True,
        json_schema_extra={"examples": [
            {"contextWindow": 5, "temporalSegments": 3, "minConfidence": 0.3, "useCache": True},
        ]},
    )

    context_window: int = Field(
        default_factory=lambda: settings.CONTEXT_WINDOW, alias="contextWindow", ge=1, le=50,
        description="Tokens on each side of a marker considered its context.",
    )
    temporal_segments: int = Field(
        default_factory=lambda: settings.TEMPORAL_SEGMENTS, alias="temporalSegments", ge=3, le=3,
        description="Number of temporal segments. Only thirds are supported.",
    )
    min_confidence: float = Field(
        default_factory=lambda: settings.MIN_CONFIDENCE, alias="minConfidence", ge=0.0,
        description="Hits at or below this adjusted weight are dropped.",
    )
    use_cache: bool = Field(
        default_factory=lambda: settings.CACHE_ENABLED, alias="useCache",
        description="Serve and store results through the engine's cache.",
    )

    def cache_fingerprint(self) -> str:
        """Serialized options that affect the result (cache key component)."""
        return self.model_dump_json(include={"context_window", "temporal_segments", "min_confidence"})
