"""
Tests for calibrated confidence scoring.
"""

import itertools

import pytest

from cognitive_insight.aggregator import MarkerRef
from cognitive_insight.confidence import (
    ConfidenceScorer,
    bayesian_update,
    clamp,
    confidence_band,
    interpret,
)
from cognitive_insight.conflicts import Conflict
from cognitive_insight.knowledge import default_knowledge_base

KB = default_knowledge_base()
scorer = ConfidenceScorer(KB)


def markers(*weights, negated=False, word="always"):
    return [MarkerRef(word, i * 3, w, negated) for i, w in enumerate(weights)]


class TestHelpers:
    def test_clamp(self):
        assert clamp(0.0) == 0.05
        assert clamp(1.0) == 0.95
        assert clamp(0.5) == 0.5

    def test_neutral_factors_keep_prior(self):
        assert bayesian_update(0.5, [0.5, 0.5]) == pytest.approx(0.5)
        assert bayesian_update(0.2, [0.5]) == pytest.approx(0.2)

    def test_strong_evidence_raises_posterior(self):
        assert bayesian_update(0.2, [0.9, 0.9]) > 0.2
        assert bayesian_update(0.2, [0.1]) < 0.2

    def test_band(self):
        band = confidence_band(0.8)
        assert band.margin == pytest.approx(0.1)
        assert band.lower == pytest.approx(0.7)
        assert band.upper == pytest.approx(0.9)

    def test_band_clipped(self):
        band = confidence_band(0.05)
        assert band.lower == 0.0

    @pytest.mark.parametrize("value, level", [
        (0.85, "high"), (0.8, "high"), (0.65, "moderate"), (0.45, "low"), (0.2, "very_low"),
    ])
    def test_interpret(self, value, level):
        assert interpret(value)[0] == level


class TestFactors:
    def test_count_factor(self):
        assert [ConfidenceScorer.count_factor(n) for n in range(7)] == [0.1, 0.3, 0.6, 0.8, 0.9, 0.95, 0.95]

    def test_weight_factor_saturates(self):
        assert ConfidenceScorer.weight_factor(0) == pytest.approx(0.3)
        assert ConfidenceScorer.weight_factor(15) == pytest.approx(1.0)
        assert ConfidenceScorer.weight_factor(40) == pytest.approx(1.0)

    def test_distribution_factor(self):
        assert ConfidenceScorer.distribution_factor([4], 10) == 0.5
        assert ConfidenceScorer.distribution_factor([4, 5], 100) == 0.4
        assert ConfidenceScorer.distribution_factor([0, 60], 100) == 0.6

    def test_consistency_factor(self):
        assert ConfidenceScorer.consistency_factor(markers(2.5)) == 0.5
        same = ConfidenceScorer.consistency_factor(markers(2.5, 2.5))
        assert same == pytest.approx(1.0 * 0.7 + 0.7 * 0.3)

    def test_context_factor(self):
        assert scorer.context_factor([]) == 0.5
        assert scorer.context_factor(markers(2.5)) == 0.8
        assert scorer.context_factor(markers(4.0, word="should")) == 0.6


class TestItemConfidence:
    def test_pattern_confidence_bounds(self):
        for count, weight in itertools.product([1, 2, 5, 20], [0.3, 5.0, 50.0]):
            value = scorer.pattern_confidence(
                category="absolutist", count=count, weighted_score=weight,
                positions=list(range(0, count * 3, 3)), markers=markers(*([weight / count] * count)),
                token_count=count * 3 + 1,
            )
            assert 0.05 <= value <= 0.95

    def test_more_evidence_is_more_confident(self):
        weak = scorer.pattern_confidence("absolutist", 1, 1.0, [0], markers(1.0), 20)
        strong = scorer.pattern_confidence("absolutist", 4, 12.0, [0, 5, 10, 15], markers(3, 3, 3, 3), 20)
        assert strong > weak

    def test_driver_confidence_bounds(self):
        assert 0.05 <= scorer.driver_confidence("control", 0.0, []) <= 0.95
        assert 0.05 <= scorer.driver_confidence("control", 100.0, [0.95, 0.95, 0.95]) <= 0.95

    def test_unknown_ids_use_default_priors(self):
        value = scorer.driver_confidence("nonexistent", 10.0, [0.6])
        assert 0.05 <= value <= 0.95

    def test_conflict_confidence(self):
        close = Conflict(
            type="lexical_contradiction", items=("always", "sometimes"), severity=1.8,
            interpretation='Simultaneous use of "always" and "sometimes"', distance=2,
        )
        far = Conflict(
            type="lexical_contradiction", items=("always", "sometimes"), severity=1.8,
            interpretation='Simultaneous use of "always" and "sometimes"', distance=12,
        )
        assert scorer.conflict_confidence(close) > scorer.conflict_confidence(far)
        assert 0.05 <= scorer.conflict_confidence(far) <= 0.95


class TestOverall:
    def test_empty_analysis(self):
        report = scorer.overall([], [], [], 0.9)
        assert report.patterns == 0.0
        assert report.drivers == 0.0
        assert report.conflicts == 0.5
        assert report.overall == pytest.approx(0.19)
        assert report.level == "very_low"
        assert report.band.margin == pytest.approx((1 - 0.19) * 0.5)

    def test_weighted_blend(self):
        report = scorer.overall([0.8, 0.6], [0.7], [0.5, 0.9], 0.8)
        assert report.overall == pytest.approx(0.7 * 0.4 + 0.7 * 0.3 + 0.7 * 0.2 + 0.8 * 0.1)
        assert report.level == "moderate"


class TestCalibrateWithEvidence:
    def test_posterior_uses_pattern_prior(self):
        # imperative prior 0.25, hit rate 0.75
        assert scorer.calibrate_with_evidence("imperative", 3, 4) == pytest.approx(0.5)

    def test_no_observations_returns_prior(self):
        assert scorer.calibrate_with_evidence("self_critic", 0, 0) == pytest.approx(0.2)

    def test_unknown_pattern_uses_default_prior(self):
        assert scorer.calibrate_with_evidence("rumination", 0, 0) == pytest.approx(0.1)

    def test_clamped(self):
        assert scorer.calibrate_with_evidence("absolutist", 10, 10) == 0.95
        assert scorer.calibrate_with_evidence("absolutist", 0, 10) == 0.05
