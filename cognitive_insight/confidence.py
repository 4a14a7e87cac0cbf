"""
Confidence Scorer — Bayesian-Style Calibration

Every pattern, driver and conflict gets a calibrated confidence in
[0.05, 0.95]. Evidence factors in [0, 1] are turned into likelihood
ratios (2 * factor, so 0.5 is neutral) and folded into prior odds:

    odds  = prior / (1 - prior) * prod(2 * f)
    p     = odds / (1 + odds)

Patterns and drivers pass p through a sigmoid to spread the mid-range.
The overall report blends the component averages with coherence.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

from cognitive_insight.knowledge import KnowledgeBase

if TYPE_CHECKING:
    from cognitive_insight.aggregator import MarkerRef
    from cognitive_insight.conflicts import Conflict

CONFIDENCE_FLOOR = 0.05
CONFIDENCE_CEILING = 0.95

DEFAULT_PATTERN_PRIOR = 0.1
DEFAULT_DRIVER_PRIOR = 0.2
CONFLICT_PRIOR = 0.5

# Occurrence count -> evidence factor; 5+ caps at 0.95.
COUNT_FACTORS = {0: 0.1, 1: 0.3, 2: 0.6, 3: 0.8, 4: 0.9}
COUNT_FACTOR_MAX = 0.95

LEVELS = (
    (0.8, "high", "Strong evidence for identified patterns",
     "Results are reliable for clinical consideration"),
    (0.6, "moderate", "Moderate evidence with some uncertainty",
     "Consider as preliminary indicators requiring validation"),
    (0.4, "low", "Limited evidence, interpret with caution",
     "Gather additional data before drawing conclusions"),
    (0.0, "very_low", "Insufficient evidence for reliable conclusions",
     "Results are speculative and require substantial validation"),
)


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class ConfidenceBand:
    lower: float
    upper: float
    margin: float


@dataclass(frozen=True)
class ConfidenceReport:
    overall: float
    patterns: float
    drivers: float
    conflicts: float
    coherence: float
    level: str
    description: str
    recommendation: str
    band: ConfidenceBand


# ============================================================
# HELPERS
# ============================================================

def clamp(value: float, low: float = CONFIDENCE_FLOOR, high: float = CONFIDENCE_CEILING) -> float:
    return max(low, min(high, value))


def sigmoid(x: float) -> float:
    return 1 / (1 + math.exp(-x))


def bayesian_update(prior: float, factors: Sequence[float]) -> float:
    """Fold evidence factors into a prior, odds form."""
    prior = clamp(prior, 0.01, 0.99)
    odds = prior / (1 - prior)
    for factor in factors:
        odds *= 2 * factor
    return odds / (1 + odds)


def confidence_band(confidence: float) -> ConfidenceBand:
    """Interval around a confidence; width shrinks as confidence grows."""
    margin = (1 - confidence) * 0.5
    return ConfidenceBand(
        lower=max(0.0, confidence - margin),
        upper=min(1.0, confidence + margin),
        margin=margin,
    )


def interpret(confidence: float) -> tuple[str, str, str]:
    """(level, description, recommendation) for an overall confidence."""
    for threshold, level, description, recommendation in LEVELS:
        if confidence >= threshold:
            return level, description, recommendation
    return LEVELS[-1][1:]


def _mean(values: Sequence[float], default: float) -> float:
    return sum(values) / len(values) if values else default


# ============================================================
# SCORER
# ============================================================

class ConfidenceScorer:
    """Calibrated confidence for patterns, drivers, conflicts and the whole result."""

    def __init__(self, kb: KnowledgeBase):
        self.kb = kb

    # ----- evidence factors -----

    @staticmethod
    def count_factor(count: int) -> float:
        return COUNT_FACTORS.get(count, COUNT_FACTOR_MAX)

    @staticmethod
    def weight_factor(weighted_score: float) -> float:
        return 0.3 + 0.7 * min(1.0, weighted_score / 15)

    @staticmethod
    def distribution_factor(positions: Sequence[int], token_count: int) -> float:
        """Moderate positional spread scores best; extremes score lower."""
        if len(positions) < 2 or token_count <= 0:
            return 0.5
        mean = sum(positions) / len(positions)
        variance = sum((p - mean) ** 2 for p in positions) / len(positions)
        max_variance = (token_count / 2) ** 2
        normalized = min(1.0, variance / max_variance)
        if normalized < 0.1:
            return 0.4
        if normalized > 0.9:
            return 0.7
        return 0.6

    @staticmethod
    def consistency_factor(markers: Sequence["MarkerRef"]) -> float:
        if len(markers) < 2:
            return 0.5
        weights = [m.weight for m in markers]
        avg = sum(weights) / len(weights)
        variance = sum((w - avg) ** 2 for w in weights) / len(weights)
        weight_consistency = max(0.3, 1 - variance / avg) if avg > 0 else 0.3

        negated = sum(1 for m in markers if m.negated) / len(markers)
        negation_consistency = 0.7 if abs(negated - 0.5) > 0.4 else 0.5
        return weight_consistency * 0.7 + negation_consistency * 0.3

    def context_factor(self, markers: Sequence["MarkerRef"]) -> float:
        """Context-gated markers are slightly weaker evidence than context-free ones."""
        if not markers:
            return 0.5
        scores = []
        for marker in markers:
            entry = self.kb.lexicon.get(marker.word)
            scores.append(0.6 if entry and entry.context_required else 0.8)
        return sum(scores) / len(scores)

    # ----- per-item confidence -----

    def pattern_confidence(
        self,
        category: str,
        count: int,
        weighted_score: float,
        positions: Sequence[int],
        markers: Sequence["MarkerRef"],
        token_count: int,
    ) -> float:
        prior = self.kb.pattern_priors.get(category, DEFAULT_PATTERN_PRIOR)
        posterior = bayesian_update(prior, [
            self.count_factor(count),
            self.weight_factor(weighted_score),
            self.distribution_factor(positions, token_count),
            self.consistency_factor(markers),
            self.context_factor(markers),
        ])
        return clamp(sigmoid(posterior * 10 - 5))

    def driver_confidence(
        self,
        driver: str,
        weighted_score: float,
        pattern_confidences: Sequence[float],
    ) -> float:
        prior = self.kb.driver_priors.get(driver, DEFAULT_DRIVER_PRIOR)
        avg = _mean(pattern_confidences, 0.0)
        count = min(1.0, len(pattern_confidences) / 3)
        weight = min(1.0, weighted_score / 20)
        posterior = bayesian_update(prior, [
            0.3 + 0.7 * avg,
            0.5 + 0.5 * count,
            0.4 + 0.6 * weight,
        ])
        return clamp(sigmoid(posterior * 8 - 4))

    def conflict_confidence(self, conflict: "Conflict") -> float:
        severity = min(1.0, conflict.severity / 10)

        if conflict.type == "lexical_contradiction":
            clarity = 0.8 if conflict.distance is not None and conflict.distance < 10 else 0.5
        elif conflict.type == "driver_conflict":
            clarity = 0.7
        elif conflict.type == "pattern_conflict":
            clarity = 0.6
        elif conflict.type == "self_negation":
            clarity = 0.8 if (conflict.weight or 0.0) > 2 else 0.4
        else:
            clarity = 0.5

        evidence = 0.0
        if len(conflict.drivers) == 2:
            evidence += 0.4
        if len(conflict.interpretation) > 20:
            evidence += 0.3
        if conflict.severity > 3:
            evidence += 0.3

        posterior = bayesian_update(CONFLICT_PRIOR, [
            0.3 + 0.7 * severity,
            0.4 + 0.6 * clarity,
            0.5 + 0.5 * min(1.0, evidence),
        ])
        return clamp(posterior)

    # ----- aggregate -----

    def overall(
        self,
        pattern_confidences: Sequence[float],
        driver_confidences: Sequence[float],
        conflict_confidences: Sequence[float],
        coherence: float,
    ) -> ConfidenceReport:
        """
        Weighted blend: patterns 0.4, drivers 0.3, conflicts 0.2, coherence 0.1.

        Missing patterns or drivers average to 0; missing conflicts to 0.5.
        """
        patterns = _mean(pattern_confidences, 0.0)
        drivers = _mean(driver_confidences, 0.0)
        conflicts = _mean(conflict_confidences, 0.5)
        value = clamp(patterns * 0.4 + drivers * 0.3 + conflicts * 0.2 + coherence * 0.1)
        level, description, recommendation = interpret(value)
        return ConfidenceReport(
            overall=value,
            patterns=patterns,
            drivers=drivers,
            conflicts=conflicts,
            coherence=coherence,
            level=level,
            description=description,
            recommendation=recommendation,
            band=confidence_band(value),
        )

    def calibrate_with_evidence(
        self, pattern: str, evidence_count: int, total_observations: int,
    ) -> float:
        """
        Bayes' rule with an observed hit rate as the likelihood.

        The prior is the pattern's prior from the knowledge base (0.1 when
        the pattern has none). No observations returns the clamped prior.
        """
        prior = self.kb.pattern_priors.get(pattern, DEFAULT_PATTERN_PRIOR)
        if total_observations <= 0:
            return clamp(prior)
        likelihood = evidence_count / total_observations
        numerator = prior * likelihood
        denominator = numerator + (1 - prior) * (1 - likelihood)
        if denominator <= 0:
            return clamp(prior)
        return clamp(numerator / denominator)


def resolve_scorer(kb: KnowledgeBase, scorer: Optional[ConfidenceScorer]) -> ConfidenceScorer:
    return scorer if scorer is not None else ConfidenceScorer(kb)
