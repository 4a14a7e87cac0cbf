"""
Driver Inference

Maps each detected pattern onto the psychological driver its definition
names and accumulates weighted contributions per driver. A pattern whose
definition or driver is missing from the knowledge base contributes
nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from cognitive_insight.aggregator import PatternScore
from cognitive_insight.confidence import ConfidenceScorer, resolve_scorer
from cognitive_insight.knowledge import KnowledgeBase
from cognitive_insight.logging import get_logger

logger = get_logger("drivers")

NORMALIZED_MAX = 10.0
NORMALIZATION_DIVISOR = 5.0
PRIMARY_THRESHOLD = 5.0


@dataclass(frozen=True)
class PatternContribution:
    pattern: str
    name: str
    weight: float
    contribution: float
    confidence: float


@dataclass
class DriverScore:
    driver: str
    name: str
    score: float
    weighted_score: float
    normalized_score: float
    primary: bool
    confidence: float
    calibrated_confidence: float
    intensity: float
    contributing_patterns: list[PatternContribution] = field(default_factory=list)
    conflicts_with: tuple[str, ...] = ()
    insight: str = ""
    therapeutic_direction: str = ""


def infer_drivers(
    patterns: dict[str, PatternScore],
    kb: KnowledgeBase,
    scorer: Optional[ConfidenceScorer] = None,
) -> dict[str, DriverScore]:
    """
    Build DriverScores from the pattern map.

    contribution = pattern.weighted_score * pattern weight_multiplier
    normalized   = min(10, weighted_score / 5); primary when >= 5
    intensity    = 0.6 * normalized / 10 + 0.4 * mean pattern intensity

    Contributing patterns are listed by contribution, largest first.
    """
    scorer = resolve_scorer(kb, scorer)
    grouped: dict[str, list[tuple[PatternScore, float]]] = {}

    for category, pattern in patterns.items():
        definition = kb.patterns.get(category)
        if definition is None or not definition.driver:
            continue
        if definition.driver not in kb.drivers:
            logger.debug("Pattern %s names unknown driver %s", category, definition.driver)
            continue
        contribution = pattern.weighted_score * definition.weight_multiplier
        grouped.setdefault(definition.driver, []).append((pattern, contribution))

    drivers: dict[str, DriverScore] = {}
    for driver_id, contributions in grouped.items():
        info = kb.drivers[driver_id]
        weighted = sum(c for _, c in contributions)
        normalized = min(NORMALIZED_MAX, weighted / NORMALIZATION_DIVISOR)
        confidences = [p.confidence for p, _ in contributions]

        ordered = sorted(contributions, key=lambda pc: pc[1], reverse=True)
        contributing = [
            PatternContribution(
                pattern=p.category,
                name=p.name,
                weight=p.weighted_score,
                contribution=c,
                confidence=p.confidence,
            )
            for p, c in ordered
        ]
        mean_intensity = sum(p.intensity for p, _ in contributions) / len(contributions)

        drivers[driver_id] = DriverScore(
            driver=driver_id,
            name=info.name,
            score=sum(p.score for p, _ in contributions),
            weighted_score=weighted,
            normalized_score=normalized,
            primary=normalized >= PRIMARY_THRESHOLD,
            confidence=max(confidences),
            calibrated_confidence=scorer.driver_confidence(driver_id, weighted, confidences),
            intensity=0.6 * (normalized / NORMALIZED_MAX) + 0.4 * mean_intensity,
            contributing_patterns=contributing,
            conflicts_with=info.conflicts_with,
            insight=info.insight,
            therapeutic_direction=info.therapeutic_direction,
        )

    return drivers
