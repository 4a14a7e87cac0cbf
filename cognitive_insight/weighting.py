"""
Marker Weight Calculator

Turns lexicon matches into Hits. For each marker found in the token
stream:
  1. Resolve required context (may substitute the weight / subcategory)
  2. Apply negation:   weight * (1 - strength)
  3. Apply modifiers:  weight * multiplier
  4. Floor at 0.1, then keep the hit only if it clears the threshold

Sub-threshold markers are dropped, not recorded with a zero weight.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from cognitive_insight.config import settings
from cognitive_insight.context import TokenContext, extract_context
from cognitive_insight.knowledge import KnowledgeBase, LexiconEntry
from cognitive_insight.modifiers import ModifierEffect, analyze_modifiers
from cognitive_insight.negation import NegationState, detect_negation
from cognitive_insight.temporal import segment_for
from cognitive_insight.tokenizer import Token

WEIGHT_FLOOR = 0.1


@dataclass(frozen=True)
class SemanticMatch:
    match: bool
    context: str = "general"         # matched required-context label
    weight: float = 0.0
    subcategory: Optional[str] = None


NO_MATCH = SemanticMatch(match=False)


@dataclass(frozen=True)
class Hit:
    """A single marker detection."""
    word: str                        # lexicon key ("my_fault" for phrases)
    original: str                    # surface text
    position: int
    category: str
    subcategory: Optional[str]
    base_weight: float
    adjusted_weight: float
    negation: NegationState
    modifiers: ModifierEffect
    semantic_context: str
    temporal_segment: str
    emotional_valence: float
    intensity: str
    token: Token
    span: int = 1
    preceding: tuple[str, ...] = ()
    following: tuple[str, ...] = ()
    clinical_note: Optional[str] = None

    @property
    def is_negated(self) -> bool:
        return self.negation.is_negated

    @property
    def negation_type(self) -> str:
        return self.negation.type

    @property
    def negation_strength(self) -> float:
        return self.negation.strength

    @property
    def modifier_multiplier(self) -> float:
        return self.modifiers.multiplier


def match_semantic_context(entry: LexiconEntry, context: TokenContext) -> SemanticMatch:
    """
    Check an entry's required context against the window.

    Context-free entries always match at their base weight. Entries that
    require context match only when one of their context substrings occurs
    in the preceding text or the full window text (declaration order, first
    match wins), and then use that context's weight.
    """
    if not entry.context_required:
        return SemanticMatch(
            match=True, context="general",
            weight=entry.weight, subcategory=entry.subcategory,
        )

    preceding = context.preceding_text
    window = context.window_text
    for rule in entry.valid_contexts:
        if rule.pattern in preceding or rule.pattern in window:
            return SemanticMatch(
                match=True,
                context=rule.pattern,
                weight=rule.weight,
                subcategory=rule.subcategory or entry.subcategory,
            )
    return NO_MATCH


def adjust_weight(
    entry: LexiconEntry,
    negation: NegationState,
    modifiers: ModifierEffect,
    semantic: SemanticMatch,
) -> float:
    """Combined weight for one marker occurrence; 0 when context did not match."""
    if not semantic.match:
        return 0.0

    weight = semantic.weight or entry.weight
    if negation.is_negated:
        weight *= 1 - negation.strength
    weight *= modifiers.multiplier
    return max(WEIGHT_FLOOR, weight)


def _match_marker(
    tokens: list[Token], index: int, kb: KnowledgeBase, max_span: int,
) -> tuple[Optional[str], int]:
    """Longest lexicon key starting at index (phrases before single words)."""
    for span in range(min(max_span, len(tokens) - index), 0, -1):
        run = tokens[index:index + span]
        if any(t.is_punctuation for t in run):
            continue
        key = "_".join(t.word for t in run)
        if key in kb.lexicon:
            return key, span
    return None, 0


def detect_markers(
    tokens: list[Token],
    kb: KnowledgeBase,
    window_size: Optional[int] = None,
    min_weight: Optional[float] = None,
    text: Optional[str] = None,
) -> list[Hit]:
    """
    Scan tokens for lexicon markers and return the hits that clear
    min_weight, in position order.
    """
    if window_size is None:
        window_size = settings.CONTEXT_WINDOW
    if min_weight is None:
        min_weight = settings.MIN_CONFIDENCE

    hits: list[Hit] = []
    total = len(tokens)
    max_span = kb.max_phrase_length
    i = 0

    while i < total:
        key, span = _match_marker(tokens, i, kb, max_span)
        if key is None:
            i += 1
            continue

        entry = kb.lexicon[key]
        context = extract_context(tokens, i, window_size, text)
        negation = detect_negation(tokens, i, kb.negation)
        modifiers = analyze_modifiers(tokens, i, kb.amplifiers, kb.diminishers)
        semantic = match_semantic_context(entry, context)
        weight = adjust_weight(entry, negation, modifiers, semantic)

        if semantic.match and weight > min_weight:
            first, last = tokens[i], tokens[i + span - 1]
            if text is not None:
                original = text[first.offset:last.offset + len(last.original)]
            else:
                original = " ".join(t.original for t in tokens[i:i + span])

            hits.append(Hit(
                word=key,
                original=original,
                position=i,
                category=entry.category,
                subcategory=semantic.subcategory,
                base_weight=entry.weight,
                adjusted_weight=weight,
                negation=negation,
                modifiers=modifiers,
                semantic_context=semantic.context,
                temporal_segment=segment_for(i, total),
                emotional_valence=entry.emotional_valence,
                intensity=entry.intensity,
                token=first,
                span=span,
                preceding=tuple(t.word for t in context.preceding),
                following=tuple(t.word for t in context.following),
                clinical_note=entry.clinical_note,
            ))

        # A phrase rejected by its context check still exposes its inner tokens.
        i += span if semantic.match else 1

    return hits
