"""
Cognitive Insight — Cognitive Pattern Analysis Engine

Deterministic, lexicon-driven analysis of free-form text: markers,
negation and modifier resolution, pattern aggregation, driver inference,
conflict detection, temporal shifts and calibrated confidence.

Public API:
  - CognitiveEngine:   analyze / analyze_batch over one knowledge base
  - analyze:           analyze with the process-wide default engine
  - analyze_batch:     batch analyze with the default engine
  - KnowledgeBase:     immutable lexicon / pattern / driver tables
  - default_knowledge_base, load_knowledge_base
  - AnalysisOptions:   per-call options (pydantic)
  - InputValidationError, KnowledgeBaseError

Usage:
    from cognitive_insight import CognitiveEngine
    engine = CognitiveEngine()
    result = engine.analyze("I should always be perfect.")
"""

__version__ = "3.0.0"

from cognitive_insight.engine import (
    CognitiveEngine,
    AnalysisResult,
    AnalysisMetadata,
    BatchItemResult,
    BatchReport,
    analyze,
    analyze_batch,
    get_engine,
)
from cognitive_insight.knowledge import (
    KnowledgeBase,
    default_knowledge_base,
    load_knowledge_base,
)
from cognitive_insight.cache import AnalysisCache
from cognitive_insight.schemas import AnalysisOptions
from cognitive_insight.errors import (
    CognitiveInsightError,
    InputValidationError,
    KnowledgeBaseError,
)

__all__ = [
    "CognitiveEngine",
    "AnalysisResult",
    "AnalysisMetadata",
    "BatchItemResult",
    "BatchReport",
    "analyze",
    "analyze_batch",
    "get_engine",
    "KnowledgeBase",
    "default_knowledge_base",
    "load_knowledge_base",
    "AnalysisCache",
    "AnalysisOptions",
    "CognitiveInsightError",
    "InputValidationError",
    "KnowledgeBaseError",
]
