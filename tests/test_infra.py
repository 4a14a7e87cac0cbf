"""
Tests for cache, logging, configuration, errors and knowledge-base loading.
"""

import json
import logging
from dataclasses import FrozenInstanceError

import pytest

from cognitive_insight.cache import AnalysisCache
from cognitive_insight.config import Settings, settings
from cognitive_insight.errors import CognitiveInsightError, InputValidationError, KnowledgeBaseError
from cognitive_insight.knowledge import KnowledgeBase, default_knowledge_base, load_knowledge_base
from cognitive_insight.lexicon import DEFAULT_KNOWLEDGE


class TestAnalysisCache:
    def test_miss_then_hit(self):
        cache = AnalysisCache()
        key = cache.make_key("some text", '{"context_window":5}')
        assert cache.get(key) is None
        cache.put(key, {"result": 1})
        assert cache.get(key) == {"result": 1}
        assert cache.stats["hits"] == 1
        assert cache.stats["misses"] == 1
        assert cache.stats["hit_rate"] == 0.5

    def test_key_depends_on_text_and_options(self):
        key = AnalysisCache.make_key("text", "a")
        assert key == AnalysisCache.make_key("text", "a")
        assert key != AnalysisCache.make_key("text", "b")
        assert key != AnalysisCache.make_key("other", "a")

    def test_fifo_eviction(self):
        cache = AnalysisCache(max_entries=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("c", 3)
        assert "a" not in cache
        assert "b" in cache
        assert "c" in cache

    def test_overwrite_does_not_evict(self):
        cache = AnalysisCache(max_entries=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.put("a", 10)
        assert len(cache) == 2
        assert cache.get("a") == 10

    def test_invalidate_and_clear(self):
        cache = AnalysisCache()
        cache.put("a", 1)
        cache.put("b", 2)
        cache.invalidate("a")
        assert "a" not in cache
        cache.clear()
        assert len(cache) == 0
        assert cache.stats["hits"] == 0

    def test_callers_get_private_copies(self):
        cache = AnalysisCache()
        stored = {"hits": [1, 2]}
        cache.put("a", stored)
        stored["hits"].clear()
        fetched = cache.get("a")
        fetched["hits"].append(3)
        assert cache.get("a") == {"hits": [1, 2]}

    def test_zero_capacity_stores_nothing(self):
        cache = AnalysisCache(max_entries=0)
        cache.put("a", 1)
        assert len(cache) == 0


class TestLogging:
    """Structured logging tests."""

    def test_json_formatter(self):
        from cognitive_insight.logging import JSONFormatter

        formatter = JSONFormatter()
        record = logging.LogRecord(
            name="cognitive_insight.test",
            level=logging.INFO,
            pathname="test.py",
            lineno=1,
            msg="Test message",
            args=(),
            exc_info=None,
        )
        parsed = json.loads(formatter.format(record))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Test message"
        assert parsed["logger"] == "cognitive_insight.test"
        assert "timestamp" in parsed

    def test_json_formatter_extra_fields(self):
        from cognitive_insight.logging import JSONFormatter

        formatter = JSONFormatter()
        record = logging.LogRecord(
            name="cognitive_insight.test",
            level=logging.INFO,
            pathname="test.py",
            lineno=1,
            msg="Analysis complete",
            args=(),
            exc_info=None,
        )
        record.marker_count = 5
        record.duration_ms = 1.5
        record.not_whitelisted = "hidden"
        parsed = json.loads(formatter.format(record))
        assert parsed["marker_count"] == 5
        assert parsed["duration_ms"] == 1.5
        assert "not_whitelisted" not in parsed

    def test_json_formatter_exception(self):
        from cognitive_insight.logging import JSONFormatter

        try:
            raise ValueError("bad")
        except ValueError:
            import sys
            exc_info = sys.exc_info()
        record = logging.LogRecord(
            name="cognitive_insight.test", level=logging.ERROR, pathname="test.py",
            lineno=1, msg="Failed", args=(), exc_info=exc_info,
        )
        parsed = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad" in parsed["exception"]

    def test_get_logger(self):
        from cognitive_insight.logging import get_logger
        log = get_logger("engine")
        assert log.name == "cognitive_insight.engine"

    def test_setup_logging(self):
        from cognitive_insight.logging import JSONFormatter, TextFormatter, setup_logging

        root = setup_logging(level="debug", fmt="text")
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, TextFormatter)

        root = setup_logging(level="warning", fmt="json")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        root.handlers.clear()


class TestSettings:
    def test_defaults(self):
        fresh = Settings()
        assert fresh.ENGINE_VERSION == "3.0.0"
        assert settings.TEMPORAL_SEGMENTS == 3

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            settings.CONTEXT_WINDOW = 10

    def test_override(self):
        custom = Settings(MAX_TEXT_LENGTH=50)
        assert custom.MAX_TEXT_LENGTH == 50


class TestErrors:
    def test_hierarchy(self):
        assert issubclass(InputValidationError, CognitiveInsightError)
        assert issubclass(KnowledgeBaseError, CognitiveInsightError)

    def test_to_dict(self):
        error = InputValidationError("empty_text", "Text must not be empty")
        assert error.to_dict() == {"error": "empty_text", "message": "Text must not be empty"}
        assert str(error) == "Text must not be empty"
        assert error.kind in InputValidationError.KINDS


class TestKnowledgeBase:
    def test_default_tables(self):
        kb = default_knowledge_base()
        assert kb.lexicon["always"].category == "absolutist"
        assert kb.patterns["absolutist"].driver == "control"
        assert kb.negation.tier_of("not") == "hard"
        assert kb.negation.tier_of("but") == "conditional"
        assert kb.negation.tier_of("table") is None
        assert kb.max_phrase_length == 3

    def test_valid_contexts_keep_declaration_order(self):
        rules = default_knowledge_base().lexicon["should"].valid_contexts
        assert [r.pattern for r in rules] == ["i_should", "you_should", "should_have", "should_not"]

    def test_immutable(self):
        kb = default_knowledge_base()
        with pytest.raises(TypeError):
            kb.lexicon["new"] = None

    def test_drivers_conflict_either_side(self):
        kb = default_knowledge_base()
        assert kb.drivers_conflict("control", "flexibility")
        assert kb.drivers_conflict("flexibility", "control")
        assert not kb.drivers_conflict("control", "safety")

    def test_stats(self):
        stats = default_knowledge_base().stats()
        assert stats["markers"] == len(DEFAULT_KNOWLEDGE["lexicon"])
        assert stats["patterns"] == 8
        assert stats["drivers"] == 6
        assert stats["amplifiers"] > 0
        assert stats["diminishers"] > 0

    def test_load_from_json(self, tmp_path):
        path = tmp_path / "kb.json"
        path.write_text(json.dumps(DEFAULT_KNOWLEDGE))
        kb = load_knowledge_base(path)
        assert kb.lexicon["failure"].weight == 3.8
        assert kb.pattern_priors["absolutist"] == 0.15

    def test_missing_file(self, tmp_path):
        with pytest.raises(KnowledgeBaseError):
            load_knowledge_base(tmp_path / "missing.json")

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "kb.json"
        path.write_text("[1, 2]")
        with pytest.raises(KnowledgeBaseError):
            load_knowledge_base(path)

    @pytest.mark.parametrize("entry", [
        {"weight": 2.0},
        {"category": "absolutist", "weight": 0},
        {"category": "absolutist", "weight": 2.0, "emotional_valence": 3},
        {"category": "absolutist", "weight": 2.0, "intensity": "extreme"},
    ])
    def test_invalid_lexicon_entry(self, entry):
        with pytest.raises(KnowledgeBaseError):
            KnowledgeBase.from_dict({"lexicon": {"bad": entry}})

    def test_malformed_tables(self):
        with pytest.raises(KnowledgeBaseError):
            KnowledgeBase.from_dict({"lexicon": {"bad": "not a dict"}})
