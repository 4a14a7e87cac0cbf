"""
Conflict Detector

Independent scans over one analysis state, each a pure function:

  lexical_contradictions: contradicting markers close together
  self_negations:         strong markers that are nonetheless negated
  modifier_conflicts:     markers flanked by both amplifiers and diminishers
  driver_conflicts:       two strong drivers declared in opposition
  pattern_conflicts:      conflicting (or reinforcing but driver-opposed) patterns
  temporal_conflicts:     same-driver patterns moving in opposite arcs

Results are merged and ranked by severity, largest first. Ties keep scan
order, so the ranking is deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from itertools import combinations
from typing import Optional

from cognitive_insight.aggregator import PatternScore
from cognitive_insight.confidence import ConfidenceScorer, resolve_scorer
from cognitive_insight.drivers import DriverScore
from cognitive_insight.knowledge import KnowledgeBase
from cognitive_insight.temporal import TemporalShift
from cognitive_insight.weighting import Hit

# ============================================================
# THRESHOLDS
# ============================================================

CONTRADICTION_DISTANCE_SPAN = 20
CONTRADICTION_MIN_FACTOR = 0.3
CONTRADICTION_SEVERITY = 0.5

SELF_NEGATION_MIN_WEIGHT = 1.5
SELF_NEGATION_SEVERITY = 0.3

MODIFIER_CONFLICT_SEVERITY = 0.2

DRIVER_CONFLICT_MIN_SCORE = 4.0
PATTERN_CONFLICT_MIN_CONFIDENCE = 0.5
TEMPORAL_CONFLICT_SEVERITY = 0.6

NO_CONFLICT_COHERENCE = 0.9
MIN_COHERENCE = 0.1

CONFLICT_TYPES = (
    "lexical_contradiction",
    "self_negation",
    "modifier_conflict",
    "driver_conflict",
    "pattern_conflict",
    "temporal_conflict",
)


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class Conflict:
    """
    One detected tension. ``type`` selects which optional fields apply:

      lexical_contradiction: items, positions, scores, distance, distance_factor
      self_negation:         items, positions, weight, negation_type
      modifier_conflict:     items, positions, weight, modifiers
      driver_conflict:       items (= drivers), scores, drivers
      pattern_conflict:      items (= patterns), scores, relation, drivers
      temporal_conflict:     items (= patterns), arcs, drivers
    """
    type: str
    items: tuple[str, ...]
    severity: float
    interpretation: str
    positions: tuple[int, ...] = ()
    scores: tuple[float, ...] = ()
    distance: Optional[int] = None
    distance_factor: Optional[float] = None
    weight: Optional[float] = None
    negation_type: Optional[str] = None
    modifiers: tuple[str, ...] = ()
    drivers: tuple[str, ...] = ()
    relation: Optional[str] = None
    arcs: tuple[str, ...] = ()
    recommendation: Optional[str] = None
    confidence: float = 0.0


@dataclass(frozen=True)
class ConflictReport:
    conflicts: list[Conflict]
    coherence: float
    coherence_level: str
    density: float
    type_counts: dict[str, int]


# ============================================================
# SCANS
# ============================================================

def lexical_contradictions(hits: list[Hit], kb: KnowledgeBase) -> list[Conflict]:
    conflicts = []
    for first, second in combinations(hits, 2):
        entry = kb.lexicon.get(first.word)
        if entry is None or second.word not in entry.contradicts:
            continue
        distance = abs(second.position - first.position)
        factor = max(0.0, 1 - distance / CONTRADICTION_DISTANCE_SPAN)
        if factor <= CONTRADICTION_MIN_FACTOR:
            continue
        conflicts.append(Conflict(
            type="lexical_contradiction",
            items=(first.word, second.word),
            positions=(first.position, second.position),
            scores=(first.adjusted_weight, second.adjusted_weight),
            distance=distance,
            distance_factor=factor,
            severity=(first.adjusted_weight + second.adjusted_weight) * factor * CONTRADICTION_SEVERITY,
            interpretation=(
                f'Simultaneous use of "{first.word}" and "{second.word}" '
                f"suggests internal tension or ambivalence"
            ),
        ))
    return conflicts


def self_negations(hits: list[Hit]) -> list[Conflict]:
    return [
        Conflict(
            type="self_negation",
            items=(hit.word,),
            positions=(hit.position,),
            weight=hit.adjusted_weight,
            negation_type=hit.negation_type,
            severity=hit.adjusted_weight * SELF_NEGATION_SEVERITY,
            interpretation=f'Negating a strong "{hit.word}" may signal ambivalence about it',
            recommendation="Explore the ambivalence around this statement",
        )
        for hit in hits
        if hit.is_negated and hit.adjusted_weight > SELF_NEGATION_MIN_WEIGHT
    ]


def modifier_conflicts(hits: list[Hit]) -> list[Conflict]:
    return [
        Conflict(
            type="modifier_conflict",
            items=(hit.word,),
            positions=(hit.position,),
            weight=hit.adjusted_weight,
            modifiers=tuple(hit.modifiers.words),
            severity=hit.adjusted_weight * MODIFIER_CONFLICT_SEVERITY,
            interpretation=f'Mixed intensifying and softening language around "{hit.word}"',
        )
        for hit in hits
        if hit.modifiers.has_conflict
    ]


def driver_conflicts(drivers: dict[str, DriverScore], kb: KnowledgeBase) -> list[Conflict]:
    conflicts = []
    for first, second in combinations(drivers.values(), 2):
        if not kb.drivers_conflict(first.driver, second.driver):
            continue
        s1, s2 = first.normalized_score, second.normalized_score
        if s1 <= DRIVER_CONFLICT_MIN_SCORE or s2 <= DRIVER_CONFLICT_MIN_SCORE:
            continue
        conflicts.append(Conflict(
            type="driver_conflict",
            items=(first.driver, second.driver),
            drivers=(first.driver, second.driver),
            scores=(s1, s2),
            severity=(s1 + s2) / 20,
            interpretation=(
                f"Core tension between {first.name} and {second.name}"
            ),
            recommendation=(
                f"Explore how {first.name.lower()} and {second.name.lower()} "
                f"needs can coexist"
            ),
        ))
    return conflicts


def _patterns_conflict(first: str, second: str, kb: KnowledgeBase) -> bool:
    a = kb.relationships.get(first)
    b = kb.relationships.get(second)
    return bool((a and second in a.conflicts_with) or (b and first in b.conflicts_with))


def _patterns_reinforce(first: str, second: str, kb: KnowledgeBase) -> bool:
    a = kb.relationships.get(first)
    b = kb.relationships.get(second)
    return bool((a and second in a.reinforces) or (b and first in b.reinforces))


def pattern_conflicts(patterns: dict[str, PatternScore], kb: KnowledgeBase) -> list[Conflict]:
    conflicts = []
    for first, second in combinations(patterns.values(), 2):
        c1, c2 = first.confidence, second.confidence
        if c1 <= PATTERN_CONFLICT_MIN_CONFIDENCE or c2 <= PATTERN_CONFLICT_MIN_CONFIDENCE:
            continue

        if _patterns_conflict(first.category, second.category, kb):
            conflicts.append(Conflict(
                type="pattern_conflict",
                items=(first.category, second.category),
                scores=(c1, c2),
                relation="conflicts",
                severity=(c1 + c2) / 2,
                interpretation=f"{first.name} and {second.name} pull in opposite directions",
            ))

        def1 = kb.patterns.get(first.category)
        def2 = kb.patterns.get(second.category)
        if not (def1 and def2 and def1.driver and def2.driver):
            continue
        if (
            _patterns_reinforce(first.category, second.category, kb)
            and def1.driver != def2.driver
            and kb.drivers_conflict(def1.driver, def2.driver)
        ):
            conflicts.append(Conflict(
                type="pattern_conflict",
                items=(first.category, second.category),
                scores=(c1, c2),
                relation="reinforced",
                drivers=(def1.driver, def2.driver),
                severity=max(c1, c2),
                interpretation=(
                    f"{first.name} and {second.name} reinforce each other "
                    f"but serve opposing drivers"
                ),
            ))
    return conflicts


def temporal_conflicts(temporal: TemporalShift, kb: KnowledgeBase) -> list[Conflict]:
    conflicts = []
    for first, second in combinations(temporal.arc, 2):
        arcs = (temporal.arc[first], temporal.arc[second])
        if set(arcs) != {"resolving", "escalating"}:
            continue
        def1 = kb.patterns.get(first)
        def2 = kb.patterns.get(second)
        if not (def1 and def2 and def1.driver) or def1.driver != def2.driver:
            continue
        conflicts.append(Conflict(
            type="temporal_conflict",
            items=(first, second),
            arcs=arcs,
            drivers=(def1.driver,),
            severity=TEMPORAL_CONFLICT_SEVERITY,
            interpretation=(
                f"{first} is {arcs[0]} while {second} is {arcs[1]} "
                f"under the same driver"
            ),
        ))
    return conflicts


# ============================================================
# COHERENCE & REPORT
# ============================================================

def calculate_coherence(conflicts: list[Conflict]) -> float:
    """max(0.1, 1 - total severity / (2 * count)); 0.9 with no conflicts."""
    if not conflicts:
        return NO_CONFLICT_COHERENCE
    total = sum(c.severity for c in conflicts)
    return min(1.0, max(MIN_COHERENCE, 1 - total / (2 * len(conflicts))))


def coherence_level(coherence: float) -> str:
    if coherence > 0.7:
        return "high"
    if coherence > 0.4:
        return "moderate"
    return "low"


def detect_conflicts(
    hits: list[Hit],
    patterns: dict[str, PatternScore],
    drivers: dict[str, DriverScore],
    temporal: TemporalShift,
    kb: KnowledgeBase,
    scorer: Optional[ConfidenceScorer] = None,
) -> ConflictReport:
    """Run every scan, score each conflict, rank by severity."""
    scorer = resolve_scorer(kb, scorer)
    found = (
        lexical_contradictions(hits, kb)
        + self_negations(hits)
        + modifier_conflicts(hits)
        + driver_conflicts(drivers, kb)
        + pattern_conflicts(patterns, kb)
        + temporal_conflicts(temporal, kb)
    )
    scored = [replace(c, confidence=scorer.conflict_confidence(c)) for c in found]
    scored.sort(key=lambda c: c.severity, reverse=True)

    type_counts: dict[str, int] = {}
    for conflict in scored:
        type_counts[conflict.type] = type_counts.get(conflict.type, 0) + 1

    coherence = calculate_coherence(scored)
    return ConflictReport(
        conflicts=scored,
        coherence=coherence,
        coherence_level=coherence_level(coherence),
        density=len(scored) / max(1, len(hits)),
        type_counts=type_counts,
    )
