"""
Tests for marker detection and weight adjustment.
"""

import pytest

from cognitive_insight.context import extract_context
from cognitive_insight.knowledge import KnowledgeBase, default_knowledge_base
from cognitive_insight.lexicon import DEFAULT_KNOWLEDGE
from cognitive_insight.modifiers import NEUTRAL
from cognitive_insight.negation import NOT_NEGATED, NegationState
from cognitive_insight.tokenizer import tokenize
from cognitive_insight.weighting import (
    SemanticMatch,
    adjust_weight,
    detect_markers,
    match_semantic_context,
)

KB = default_knowledge_base()


def hits_for(text: str, **kwargs):
    return detect_markers(tokenize(text), KB, text=text, **kwargs)


class TestSemanticContext:
    def test_context_free_entry_matches(self):
        tokens = tokenize("I always lose")
        match = match_semantic_context(KB.lexicon["always"], extract_context(tokens, 1, 5))
        assert match.match is True
        assert match.context == "general"
        assert match.weight == 2.5

    def test_required_context_substitutes_weight(self):
        tokens = tokenize("I should have known")
        match = match_semantic_context(KB.lexicon["should"], extract_context(tokens, 1, 5))
        # "i_should" is declared before "should_have"
        assert match.context == "i_should"
        assert match.weight == 4.0
        assert match.subcategory == "self_directed"

    def test_required_context_missing(self):
        tokens = tokenize("The plan should work")
        match = match_semantic_context(KB.lexicon["should"], extract_context(tokens, 2, 5))
        assert match.match is False


class TestAdjustWeight:
    def test_negation_then_modifier(self):
        entry = KB.lexicon["failure"]
        negation = NegationState(is_negated=True, type="hard", strength=0.5)
        semantic = SemanticMatch(match=True, weight=entry.weight)
        assert adjust_weight(entry, negation, NEUTRAL, semantic) == pytest.approx(1.9)

    def test_floor(self):
        entry = KB.lexicon["failure"]
        negation = NegationState(is_negated=True, type="hard", strength=1.0)
        semantic = SemanticMatch(match=True, weight=entry.weight)
        assert adjust_weight(entry, negation, NEUTRAL, semantic) == 0.1

    def test_unmatched_context_is_zero(self):
        entry = KB.lexicon["should"]
        assert adjust_weight(entry, NOT_NEGATED, NEUTRAL, SemanticMatch(match=False)) == 0.0


class TestDetectMarkers:
    def test_context_required_hit(self):
        hits = hits_for("I should do it today")
        assert len(hits) == 1
        hit = hits[0]
        assert hit.category == "imperative"
        assert hit.adjusted_weight == 4.0
        assert hit.semantic_context == "i_should"
        assert hit.subcategory == "self_directed"

    def test_context_required_without_context(self):
        assert hits_for("The plan should work fine") == []

    def test_phrase_marker(self):
        hits = hits_for("It was my fault again")
        assert len(hits) == 1
        assert hits[0].word == "my_fault"
        assert hits[0].span == 2
        assert hits[0].original == "my fault"
        assert hits[0].position == 2

    def test_rejected_phrase_still_scans_inner_words(self):
        data = dict(DEFAULT_KNOWLEDGE)
        data["lexicon"] = {
            **DEFAULT_KNOWLEDGE["lexicon"],
            "total_disaster": {
                "category": "catastrophizing",
                "weight": 4.5,
                "context_required": True,
                "valid_contexts": {"a_total_disaster": {"weight": 5.0}},
            },
        }
        kb = KnowledgeBase.from_dict(data)
        text = "It was total disaster again"
        hits = detect_markers(tokenize(text), kb, text=text)
        assert [(h.word, h.position) for h in hits] == [("disaster", 3)]

    def test_phrase_does_not_cross_punctuation(self):
        assert all(h.word != "my_fault" for h in hits_for("It was my. Fault again"))

    def test_negated_hit_is_kept_with_lower_weight(self):
        hits = hits_for("I am not a failure")
        assert len(hits) == 1
        assert hits[0].is_negated is True
        assert hits[0].negation_type == "hard"
        assert hits[0].adjusted_weight == pytest.approx(3.8 * (1 - 4 / 6))

    def test_min_weight_threshold(self):
        assert hits_for("I always lose", min_weight=3.0) == []
        assert len(hits_for("I always lose", min_weight=2.0)) == 1

    def test_all_hits_clear_threshold(self):
        text = "Nothing ever works, I am not really useless but nobody cares and it is my fault."
        for hit in hits_for(text):
            assert hit.adjusted_weight >= 0.3

    def test_hit_carries_context(self):
        hits = hits_for("Honestly I always lose these games")
        hit = hits[0]
        assert hit.preceding == ("honestly", "i")
        assert hit.following[:2] == ("lose", "these")
        assert hit.clinical_note == "Rigid temporal generalization"
        assert hit.intensity == "high"

    def test_temporal_segment_assigned(self):
        hits = hits_for("always a b c d e f g h never")
        assert [h.temporal_segment for h in hits] == ["early", "late"]
