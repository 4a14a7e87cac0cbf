"""
End-to-end tests for the analysis engine.
"""

import json

import pytest

from cognitive_insight import CognitiveEngine, InputValidationError
from cognitive_insight.config import Settings
from cognitive_insight.schemas import AnalysisOptions

SCENARIO = "I should always be perfect, but sometimes I feel like a failure."
NO_CACHE = {"useCache": False}


def make_engine(**overrides) -> CognitiveEngine:
    return CognitiveEngine(config=Settings(**overrides))


def categories(result) -> set:
    return {h.category for h in result.hits}


class TestScenarios:
    def test_perfectionism_sentence(self):
        result = make_engine().analyze(SCENARIO)
        words = {(h.word, h.category) for h in result.hits}
        assert ("always", "absolutist") in words
        assert ("should", "imperative") in words
        assert ("failure", "self_critic") in words
        types = {c.type for c in result.conflicts}
        assert types & {"pattern_conflict", "lexical_contradiction"}

    def test_double_negative(self):
        result = make_engine().analyze("I am not never going to fail.")
        never = [h for h in result.hits if h.word == "never"]
        assert len(never) == 1
        assert never[0].is_negated is False
        assert never[0].negation_type == "double_negative"

    def test_equal_thirds_have_no_shifts(self):
        result = make_engine().analyze("always la la always la la always la la")
        assert result.temporal_shift.shifts == []

    def test_missing_driver_is_skipped(self):
        result = make_engine().analyze("Today I feel like giving up on this.")
        assert "emotional_reasoning" in result.patterns
        assert "certainty" not in result.drivers


class TestInvariants:
    TEXTS = [
        SCENARIO,
        "Nothing ever works. Everyone thinks I am useless and it is my fault.",
        "I must not fail, I must not fail, it would be a total disaster.",
        "Sometimes things go fine and I feel okay about it.",
        "The weather is mild today.",
    ]

    @pytest.mark.parametrize("text", TEXTS)
    def test_hits_clear_min_confidence(self, text):
        for hit in make_engine().analyze(text).hits:
            assert hit.adjusted_weight >= 0.3

    @pytest.mark.parametrize("text", TEXTS)
    def test_confidence_bounds(self, text):
        result = make_engine().analyze(text)
        values = (
            [p.confidence for p in result.patterns.values()]
            + [d.confidence for d in result.drivers.values()]
            + [d.calibrated_confidence for d in result.drivers.values()]
            + [c.confidence for c in result.conflicts]
        )
        for value in values:
            assert 0.05 <= value <= 0.95

    @pytest.mark.parametrize("text", TEXTS)
    def test_coherence_bounds(self, text):
        assert 0.1 <= make_engine().analyze(text).coherence <= 1.0

    @pytest.mark.parametrize("text", TEXTS)
    def test_modifier_multiplier_bounds(self, text):
        for hit in make_engine().analyze(text).hits:
            assert 0.1 <= hit.modifier_multiplier <= 3.0

    def test_deterministic_without_cache(self):
        engine = make_engine()
        first = engine.analyze(SCENARIO, NO_CACHE).to_dict()
        second = engine.analyze(SCENARIO, NO_CACHE).to_dict()
        first["metadata"].pop("processing_ms")
        second["metadata"].pop("processing_ms")
        assert first == second


class TestDegenerateInput:
    def test_no_markers(self):
        result = make_engine().analyze("The weather is mild today.")
        assert result.hits == []
        assert result.patterns == {}
        assert result.drivers == {}
        assert result.conflicts == []
        assert result.coherence == 0.9
        assert result.metadata.marker_count == 0
        assert result.metadata.coverage == 0.0
        assert result.metadata.avg_confidence == 0.0
        assert result.confidence.level == "very_low"


class TestCache:
    def test_second_call_hits_cache(self):
        engine = make_engine()
        first = engine.analyze(SCENARIO)
        assert engine.cache.stats["hits"] == 0
        second = engine.analyze(SCENARIO)
        assert engine.cache.stats["hits"] == 1
        assert second.metadata.cached is True
        assert first.metadata.cached is False
        assert second.hits == first.hits
        assert second.patterns == first.patterns
        assert second.drivers == first.drivers
        assert second.conflicts == first.conflicts

    def test_mutating_a_result_leaves_cache_intact(self):
        engine = make_engine()
        first = engine.analyze(SCENARIO)
        category = next(iter(first.patterns))
        expected = first.patterns[category].confidence
        hit_count = len(first.hits)

        first.patterns[category].confidence = 123.0
        first.hits.clear()
        second = engine.analyze(SCENARIO)
        assert second.metadata.cached is True
        assert second.patterns[category].confidence == expected
        assert len(second.hits) == hit_count

        second.drivers.clear()
        third = engine.analyze(SCENARIO)
        assert third.drivers

    def test_options_change_the_key(self):
        engine = make_engine()
        engine.analyze(SCENARIO)
        engine.analyze(SCENARIO, {"contextWindow": 3})
        assert engine.cache.stats["hits"] == 0
        assert engine.cache.stats["entries"] == 2

    def test_cache_disabled(self):
        engine = make_engine()
        engine.analyze(SCENARIO, NO_CACHE)
        engine.analyze(SCENARIO, NO_CACHE)
        assert engine.cache.stats["entries"] == 0

    def test_cache_disabled_by_setting(self):
        engine = make_engine(CACHE_ENABLED=False)
        engine.analyze(SCENARIO)
        engine.analyze(SCENARIO)
        assert len(engine.cache) == 0

    def test_options_model_accepted(self):
        engine = make_engine()
        result = engine.analyze(SCENARIO, AnalysisOptions(use_cache=False, context_window=3))
        assert result.metadata.cached is False
        assert len(engine.cache) == 0


class TestMetadata:
    def test_counts(self):
        result = make_engine().analyze(SCENARIO)
        meta = result.metadata
        assert meta.word_count == 12
        assert meta.marker_count == len(result.hits)
        assert meta.marker_density == pytest.approx(len(result.hits) / 12)
        assert meta.engine_version == "3.0.0"
        assert len(meta.cache_key) == 64
        assert meta.processing_ms >= 0

    def test_coverage(self):
        result = make_engine().analyze("I always lose and everyone leaves and nothing works.")
        # three distinct markers, one of eight patterns
        assert result.metadata.coverage == pytest.approx(0.6 * 1.0 + 0.4 * (1 / 8))

    def test_json_round_trip(self):
        result = make_engine().analyze(SCENARIO)
        data = json.loads(result.to_json())
        assert data["metadata"]["marker_count"] == result.metadata.marker_count
        assert data["coherence"] == result.coherence
        for category, pattern in result.patterns.items():
            assert data["patterns"][category]["confidence"] == pattern.confidence
            assert data["patterns"][category]["weighted_score"] == pattern.weighted_score


class TestOptions:
    def test_min_confidence(self):
        result = make_engine().analyze("I always lose these games", {"minConfidence": 3.0})
        assert result.hits == []

    def test_snake_case_names(self):
        result = make_engine().analyze("I always lose these games", {"min_confidence": 3.0})
        assert result.hits == []

    @pytest.mark.parametrize("options", [
        {"temporalSegments": 4},
        {"contextWindow": 0},
        {"unknown": True},
        "fast",
    ])
    def test_invalid_options(self, options):
        with pytest.raises(InputValidationError) as exc_info:
            make_engine().analyze(SCENARIO, options)
        assert exc_info.value.kind == "invalid_options"


class TestValidation:
    @pytest.mark.parametrize("text, kind", [
        (None, "invalid_type"),
        (123, "invalid_type"),
        ("", "empty_text"),
        ("   \n ", "empty_text"),
        ("too short", "text_too_short"),
        ("x" * 10_001, "text_too_long"),
    ])
    def test_rejected(self, text, kind):
        with pytest.raises(InputValidationError) as exc_info:
            make_engine().analyze(text)
        assert exc_info.value.kind == kind
        assert exc_info.value.to_dict()["error"] == kind

    def test_bounds_from_settings(self):
        engine = make_engine(MIN_TEXT_LENGTH=3)
        assert engine.analyze("I must").metadata.marker_count == 1


class TestBatch:
    def test_per_item_isolation(self):
        report = make_engine().analyze_batch([SCENARIO, "", 42, "Nothing ever works out for me."])
        assert report.total == 4
        assert report.successful == 2
        assert report.failed == 2
        assert [r.index for r in report.results] == [0, 1, 2, 3]
        assert [r.success for r in report.results] == [True, False, False, True]
        assert report.results[1].error["error"] == "empty_text"
        assert report.results[2].error["error"] == "invalid_type"
        assert report.results[0].result is not None

    def test_unexpected_failure_is_recorded(self, monkeypatch):
        engine = make_engine()
        original = engine._run

        def flaky(text, opts, key):
            if "boom" in text:
                raise RuntimeError("stage exploded")
            return original(text, opts, key)

        monkeypatch.setattr(engine, "_run", flaky)
        report = engine.analyze_batch(["this will go boom", SCENARIO])
        assert report.results[0].error == {"error": "analysis_failed", "message": "stage exploded"}
        assert report.results[1].success is True

    def test_too_many_items(self):
        engine = make_engine(BATCH_MAX_ITEMS=2)
        with pytest.raises(InputValidationError) as exc_info:
            engine.analyze_batch([SCENARIO] * 3)
        assert exc_info.value.kind == "invalid_batch"

    @pytest.mark.parametrize("texts", [[], SCENARIO, None])
    def test_not_a_list(self, texts):
        with pytest.raises(InputValidationError) as exc_info:
            make_engine().analyze_batch(texts)
        assert exc_info.value.kind == "invalid_batch"

    def test_to_dict(self):
        data = make_engine().analyze_batch([SCENARIO]).to_dict()
        assert data["total"] == 1
        assert data["results"][0]["success"] is True
