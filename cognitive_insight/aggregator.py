"""
Pattern Aggregator

Folds the hit list into one PatternScore per category: raw and
negation-discounted totals, positions, valence, sub-category and
temporal breakdowns, cluster membership, and confidence.

Clusters are runs of hits (any category) whose consecutive positions are
at most CLUSTER_GAP tokens apart; only runs of two or more are kept.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from cognitive_insight.confidence import ConfidenceScorer, resolve_scorer
from cognitive_insight.knowledge import KnowledgeBase
from cognitive_insight.logging import get_logger
from cognitive_insight.temporal import SEGMENTS, temporal_distribution
from cognitive_insight.weighting import Hit

logger = get_logger("aggregator")

CLUSTER_GAP = 5
MIN_CLUSTER_SIZE = 2
NEGATED_HIT_FACTOR = 0.5
DEFAULT_SEVERITY_THRESHOLD = 2.0

INTENSITY_SCORE = {"low": 1 / 3, "moderate": 2 / 3, "high": 1.0}


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class MarkerRef:
    word: str
    position: int
    weight: float
    negated: bool


@dataclass(frozen=True)
class SubpatternScore:
    score: float
    count: int


@dataclass(frozen=True)
class Cluster:
    id: int
    start: int
    end: int
    positions: tuple[int, ...]
    words: tuple[str, ...]
    categories: tuple[str, ...]


@dataclass
class PatternScore:
    category: str
    name: str
    score: float
    count: int
    weighted_score: float
    positions: list[int]
    subpatterns: dict[str, SubpatternScore]
    emotional_valence: list[float]
    avg_valence: float
    temporal_distribution: dict[str, float]
    clusters: list[int]
    markers: list[MarkerRef]
    negated_count: int
    intensity: float
    severity: bool
    raw_confidence: float
    confidence: float


@dataclass
class PatternAggregation:
    patterns: dict[str, PatternScore]
    clusters: list[Cluster] = field(default_factory=list)
    temporal_distribution: dict[str, dict[str, float]] = field(default_factory=dict)
    subpattern_distribution: dict[str, SubpatternScore] = field(default_factory=dict)


# ============================================================
# CLUSTERING & DISTRIBUTION
# ============================================================

def find_clusters(hits: list[Hit], max_gap: int = CLUSTER_GAP) -> list[Cluster]:
    """Group position-sorted hits into runs with gaps <= max_gap."""
    ordered = sorted(hits, key=lambda h: h.position)
    runs: list[list[Hit]] = []
    for hit in ordered:
        if runs and hit.position - runs[-1][-1].position <= max_gap:
            runs[-1].append(hit)
        else:
            runs.append([hit])

    clusters = []
    for run in runs:
        if len(run) < MIN_CLUSTER_SIZE:
            continue
        categories: dict[str, None] = {}
        for h in run:
            categories.setdefault(h.category, None)
        clusters.append(Cluster(
            id=len(clusters),
            start=run[0].position,
            end=run[-1].position,
            positions=tuple(h.position for h in run),
            words=tuple(h.word for h in run),
            categories=tuple(categories),
        ))
    return clusters


def distribution_score(positions: list[int], total_length: int) -> float:
    """
    How evenly a pattern's markers are spread.

    Compares the variance of the gaps between consecutive markers with the
    ideal gap for an even spread over total_length tokens; tight, irregular
    bunching scores low. Fewer than two markers score a neutral 0.5.
    """
    if len(positions) < 2:
        return 0.5

    gaps = [b - a for a, b in zip(positions, positions[1:])]
    avg_gap = sum(gaps) / len(gaps)
    ideal_gap = total_length / len(positions)
    if ideal_gap <= 0:
        return 0.1

    variance = sum((gap - avg_gap) ** 2 for gap in gaps) / len(gaps)
    normalized = variance / ideal_gap ** 2
    return max(0.1, 1 - min(1.0, normalized))


# ============================================================
# AGGREGATION
# ============================================================

def aggregate_patterns(
    hits: list[Hit],
    token_count: int,
    kb: KnowledgeBase,
    scorer: Optional[ConfidenceScorer] = None,
) -> PatternAggregation:
    """
    Build the per-category PatternScore map.

    Negated hits count half toward weighted_score. A category missing
    from the pattern table is still aggregated, with default multiplier
    and severity threshold.

    raw_confidence = (0.25*count + 0.25*weight + 0.2*distribution
                      + 0.2*cluster + 0.1*negation) * weight_multiplier,
    clipped to [0, 1]. confidence is the calibrated value from the scorer.
    """
    scorer = resolve_scorer(kb, scorer)
    clusters = find_clusters(hits)

    grouped: dict[str, list[Hit]] = {}
    for hit in hits:
        grouped.setdefault(hit.category, []).append(hit)

    subpattern_distribution: dict[str, SubpatternScore] = {}
    patterns: dict[str, PatternScore] = {}

    for category, cat_hits in grouped.items():
        definition = kb.patterns.get(category)
        if definition is None:
            logger.debug("Category %s has no pattern definition", category)

        score = sum(h.adjusted_weight for h in cat_hits)
        weighted = sum(
            h.adjusted_weight * (NEGATED_HIT_FACTOR if h.is_negated else 1.0)
            for h in cat_hits
        )
        count = len(cat_hits)
        positions = [h.position for h in cat_hits]
        valence = [h.emotional_valence for h in cat_hits]
        negated = sum(1 for h in cat_hits if h.is_negated)

        segments = {seg: 0.0 for seg in SEGMENTS}
        subpatterns: dict[str, list[float]] = {}
        for h in cat_hits:
            segments[h.temporal_segment] += h.adjusted_weight
            if h.subcategory:
                subpatterns.setdefault(h.subcategory, []).append(h.adjusted_weight)

        sub_scores = {
            name: SubpatternScore(score=sum(ws), count=len(ws))
            for name, ws in subpatterns.items()
        }
        for name, sub in sub_scores.items():
            subpattern_distribution[f"{category}.{name}"] = sub

        membership = [c.id for c in clusters if category in c.categories]
        markers = [
            MarkerRef(h.word, h.position, h.adjusted_weight, h.is_negated)
            for h in cat_hits
        ]

        multiplier = definition.weight_multiplier if definition else 1.0
        threshold = definition.severity_threshold if definition else DEFAULT_SEVERITY_THRESHOLD

        count_factor = min(count / 5, 1.0)
        weight_factor = min(weighted / (count * 5), 1.0)
        spread_factor = distribution_score(positions, token_count)
        cluster_factor = min(len(membership) / 3, 1.0)
        negation_factor = 1 - 0.5 * (negated / count)
        raw = (
            0.25 * count_factor
            + 0.25 * weight_factor
            + 0.2 * spread_factor
            + 0.2 * cluster_factor
            + 0.1 * negation_factor
        ) * multiplier

        patterns[category] = PatternScore(
            category=category,
            name=definition.name if definition else category,
            score=score,
            count=count,
            weighted_score=weighted,
            positions=positions,
            subpatterns=sub_scores,
            emotional_valence=valence,
            avg_valence=sum(valence) / count,
            temporal_distribution=segments,
            clusters=membership,
            markers=markers,
            negated_count=negated,
            intensity=sum(INTENSITY_SCORE.get(h.intensity, 2 / 3) for h in cat_hits) / count,
            severity=weighted >= threshold,
            raw_confidence=max(0.0, min(1.0, raw)),
            confidence=scorer.pattern_confidence(
                category=category,
                count=count,
                weighted_score=weighted,
                positions=positions,
                markers=markers,
                token_count=token_count,
            ),
        )

    return PatternAggregation(
        patterns=patterns,
        clusters=clusters,
        temporal_distribution=temporal_distribution(hits),
        subpattern_distribution=subpattern_distribution,
    )
