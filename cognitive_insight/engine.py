"""
Cognitive Engine — Analysis Orchestrator

Runs the full pipeline over one text:

  tokenize -> detect markers -> aggregate patterns -> infer drivers
           -> temporal shift -> conflicts -> confidence

and wraps the stages in input validation, result caching and batch
processing with per-item error isolation. The knowledge base is passed
in (or loaded once at construction) and never modified.
"""

from __future__ import annotations

import json
import time
import unicodedata
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Optional, Union

from pydantic import ValidationError

from cognitive_insight.aggregator import Cluster, PatternScore, SubpatternScore, aggregate_patterns
from cognitive_insight.cache import AnalysisCache
from cognitive_insight.confidence import ConfidenceReport, ConfidenceScorer
from cognitive_insight.config import Settings, settings
from cognitive_insight.conflicts import Conflict, detect_conflicts
from cognitive_insight.drivers import DriverScore, infer_drivers
from cognitive_insight.errors import InputValidationError
from cognitive_insight.knowledge import KnowledgeBase, default_knowledge_base, load_knowledge_base
from cognitive_insight.logging import get_logger
from cognitive_insight.schemas.analysis import AnalysisOptions
from cognitive_insight.temporal import TemporalShift, analyze_temporal_shift
from cognitive_insight.tokenizer import tokenize
from cognitive_insight.weighting import Hit, detect_markers

logger = get_logger("engine")

OptionsInput = Union[AnalysisOptions, dict, None]


# ============================================================
# RESULT TYPES
# ============================================================

@dataclass(frozen=True)
class AnalysisMetadata:
    word_count: int
    token_count: int
    marker_count: int
    marker_density: float
    avg_confidence: float
    coverage: float
    processing_ms: float
    cache_key: str
    engine_version: str
    cached: bool = False


@dataclass(frozen=True)
class AnalysisResult:
    """Everything one analysis produces. Serialize with to_dict() / to_json()."""
    hits: list[Hit]
    patterns: dict[str, PatternScore]
    drivers: dict[str, DriverScore]
    conflicts: list[Conflict]
    temporal_shift: TemporalShift
    coherence: float
    coherence_level: str
    conflict_density: float
    conflict_types: dict[str, int]
    confidence: ConfidenceReport
    clusters: list[Cluster]
    subpattern_distribution: dict[str, SubpatternScore]
    temporal_distribution: dict[str, dict[str, float]]
    metadata: AnalysisMetadata

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)


@dataclass(frozen=True)
class BatchItemResult:
    index: int
    success: bool
    result: Optional[AnalysisResult] = None
    error: Optional[dict] = None


@dataclass(frozen=True)
class BatchReport:
    results: list[BatchItemResult] = field(default_factory=list)
    total: int = 0
    successful: int = 0
    failed: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


# ============================================================
# ENGINE
# ============================================================

class CognitiveEngine:
    """
    Deterministic cognitive-pattern analysis.

    One engine holds one knowledge base, one confidence scorer and one
    result cache. Analyses share nothing else, so an engine can serve
    any number of sequential calls.
    """

    def __init__(
        self,
        kb: Optional[KnowledgeBase] = None,
        cache: Optional[AnalysisCache] = None,
        config: Settings = settings,
    ):
        if kb is None:
            kb = (
                load_knowledge_base(config.KNOWLEDGE_BASE_PATH)
                if config.KNOWLEDGE_BASE_PATH
                else default_knowledge_base()
            )
        self.kb = kb
        self.settings = config
        self.scorer = ConfidenceScorer(kb)
        self.cache = cache if cache is not None else AnalysisCache(config.CACHE_MAX_ENTRIES)

    # ----- validation -----

    def validate_text(self, text: Any) -> str:
        """Return the normalized text, or raise InputValidationError."""
        if not isinstance(text, str):
            raise InputValidationError(
                "invalid_type", f"Text must be a string, got {type(text).__name__}",
            )
        if not text.strip():
            raise InputValidationError("empty_text", "Text must not be empty")

        length = len(text.strip())
        if length < self.settings.MIN_TEXT_LENGTH:
            raise InputValidationError(
                "text_too_short",
                f"Text must be at least {self.settings.MIN_TEXT_LENGTH} characters",
            )
        if length > self.settings.MAX_TEXT_LENGTH:
            raise InputValidationError(
                "text_too_long",
                f"Text must be at most {self.settings.MAX_TEXT_LENGTH} characters",
            )
        return unicodedata.normalize("NFC", text)

    def parse_options(self, options: OptionsInput) -> AnalysisOptions:
        """Validate options; fields the caller left unset come from this engine's settings."""
        if options is None:
            opts = AnalysisOptions()
        elif isinstance(options, AnalysisOptions):
            opts = options
        elif isinstance(options, dict):
            try:
                opts = AnalysisOptions.model_validate(options)
            except ValidationError as e:
                raise InputValidationError("invalid_options", str(e)) from e
        else:
            raise InputValidationError(
                "invalid_options", f"Options must be an object, got {type(options).__name__}",
            )

        defaults = {
            "context_window": self.settings.CONTEXT_WINDOW,
            "min_confidence": self.settings.MIN_CONFIDENCE,
            "use_cache": self.settings.CACHE_ENABLED,
        }
        unset = {k: v for k, v in defaults.items() if k not in opts.model_fields_set}
        return opts.model_copy(update=unset) if unset else opts

    # ----- analysis -----

    def analyze(self, text: Any, options: OptionsInput = None) -> AnalysisResult:
        """
        Analyze one text.

        Raises InputValidationError for non-string, empty, too short or too
        long text and for malformed options. Everything past validation is
        total: missing knowledge entries are skipped, and a text without
        markers yields empty collections with neutral scores.
        """
        text = self.validate_text(text)
        opts = self.parse_options(options)
        key = AnalysisCache.make_key(text, opts.cache_fingerprint())

        if opts.use_cache:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Cache hit", extra={"cache_key": key[:16], "cache_hit": True})
                return replace(cached, metadata=replace(cached.metadata, cached=True))

        result = self._run(text, opts, key)
        if opts.use_cache:
            self.cache.put(key, result)
        return result

    def _run(self, text: str, opts: AnalysisOptions, key: str) -> AnalysisResult:
        start = time.perf_counter()
        kb = self.kb

        tokens = tokenize(text)
        token_count = len(tokens)
        hits = detect_markers(
            tokens, kb,
            window_size=opts.context_window,
            min_weight=opts.min_confidence,
            text=text,
        )
        logger.debug("Markers detected", extra={"marker_count": len(hits)})

        aggregation = aggregate_patterns(hits, token_count, kb, self.scorer)
        patterns = aggregation.patterns
        logger.debug("Patterns aggregated", extra={"pattern_count": len(patterns)})

        drivers = infer_drivers(patterns, kb, self.scorer)
        logger.debug("Drivers inferred", extra={"driver_count": len(drivers)})

        temporal = analyze_temporal_shift(hits, token_count)

        report = detect_conflicts(hits, patterns, drivers, temporal, kb, self.scorer)
        logger.debug("Conflicts detected", extra={"conflict_count": len(report.conflicts)})

        pattern_confidences = [p.confidence for p in patterns.values()]
        confidence = self.scorer.overall(
            pattern_confidences,
            [d.calibrated_confidence for d in drivers.values()],
            [c.confidence for c in report.conflicts],
            report.coherence,
        )

        word_count = len(text.split())
        elapsed_ms = (time.perf_counter() - start) * 1000
        metadata = AnalysisMetadata(
            word_count=word_count,
            token_count=token_count,
            marker_count=len(hits),
            marker_density=len(hits) / word_count if word_count else 0.0,
            avg_confidence=(
                sum(pattern_confidences) / len(pattern_confidences)
                if pattern_confidences else 0.0
            ),
            coverage=self._coverage(hits),
            processing_ms=elapsed_ms,
            cache_key=key,
            engine_version=self.settings.ENGINE_VERSION,
        )

        logger.info(
            "Analysis complete",
            extra={
                "cache_key": key[:16],
                "text_length": len(text),
                "marker_count": len(hits),
                "pattern_count": len(patterns),
                "driver_count": len(drivers),
                "conflict_count": len(report.conflicts),
                "duration_ms": round(elapsed_ms, 2),
            },
        )

        return AnalysisResult(
            hits=hits,
            patterns=patterns,
            drivers=drivers,
            conflicts=report.conflicts,
            temporal_shift=temporal,
            coherence=report.coherence,
            coherence_level=report.coherence_level,
            conflict_density=report.density,
            conflict_types=report.type_counts,
            confidence=confidence,
            clusters=aggregation.clusters,
            subpattern_distribution=aggregation.subpattern_distribution,
            temporal_distribution=aggregation.temporal_distribution,
            metadata=metadata,
        )

    def _coverage(self, hits: list[Hit]) -> float:
        """0.6 * marker variety + 0.4 * share of known patterns touched."""
        if not hits:
            return 0.0
        unique_markers = len({h.word for h in hits})
        unique_categories = len({h.category for h in hits})
        pattern_total = len(self.kb.patterns) or 1
        return 0.6 * (unique_markers / len(hits)) + 0.4 * min(1.0, unique_categories / pattern_total)

    # ----- batch -----

    def analyze_batch(self, texts: Any, options: OptionsInput = None) -> BatchReport:
        """
        Analyze texts in order. A failing item becomes an error entry at its
        index; the rest of the batch still runs.
        """
        if not isinstance(texts, (list, tuple)) or not texts:
            raise InputValidationError("invalid_batch", "Texts must be a non-empty list")
        if len(texts) > self.settings.BATCH_MAX_ITEMS:
            raise InputValidationError(
                "invalid_batch",
                f"Batch must contain at most {self.settings.BATCH_MAX_ITEMS} texts",
            )
        opts = self.parse_options(options)

        results: list[BatchItemResult] = []
        for index, text in enumerate(texts):
            try:
                result = self.analyze(text, opts)
            except InputValidationError as e:
                logger.warning(
                    "Batch item rejected: %s", e.message,
                    extra={"batch_index": index, "error": e.kind},
                )
                results.append(BatchItemResult(index=index, success=False, error=e.to_dict()))
            except Exception as e:
                logger.warning(
                    "Batch item failed: %s", e,
                    extra={"batch_index": index, "error": "analysis_failed",
                           "error_type": type(e).__name__},
                    exc_info=True,
                )
                results.append(BatchItemResult(
                    index=index, success=False,
                    error={"error": "analysis_failed", "message": str(e)},
                ))
            else:
                results.append(BatchItemResult(index=index, success=True, result=result))

        successful = sum(1 for r in results if r.success)
        return BatchReport(
            results=results,
            total=len(results),
            successful=successful,
            failed=len(results) - successful,
        )


# ============================================================
# MODULE-LEVEL CONVENIENCE
# ============================================================

_default_engine: Optional[CognitiveEngine] = None


def get_engine() -> CognitiveEngine:
    """Process-wide engine over the configured knowledge base, built on first use."""
    global _default_engine
    if _default_engine is None:
        _default_engine = CognitiveEngine()
    return _default_engine


def analyze(text: Any, options: OptionsInput = None) -> AnalysisResult:
    return get_engine().analyze(text, options)


def analyze_batch(texts: Any, options: OptionsInput = None) -> BatchReport:
    return get_engine().analyze_batch(texts, options)
