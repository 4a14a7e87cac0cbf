"""
Knowledge Base — Immutable Lexicon, Pattern and Driver Tables

Typed records for the static knowledge the pipeline reads. A
KnowledgeBase is built once (from the default tables in lexicon.py or a
JSON document) and handed to the engine. Nothing in the pipeline writes
to it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from cognitive_insight.errors import KnowledgeBaseError


INTENSITY_LEVELS = ("low", "moderate", "high")


# ============================================================
# RECORDS
# ============================================================

@dataclass(frozen=True)
class ContextRule:
    """A required-context substring and the weight it substitutes."""
    pattern: str
    weight: float
    subcategory: Optional[str] = None


@dataclass(frozen=True)
class LexiconEntry:
    word: str
    category: str
    weight: float
    intensity: str = "moderate"
    subcategory: Optional[str] = None
    contradicts: tuple[str, ...] = ()
    reinforces: tuple[str, ...] = ()
    emotional_valence: float = 0.0
    context_required: bool = False
    valid_contexts: tuple[ContextRule, ...] = ()  # declaration order
    clinical_note: Optional[str] = None


@dataclass(frozen=True)
class PatternDefinition:
    id: str
    name: str
    driver: Optional[str] = None
    severity_threshold: float = 2.0
    weight_multiplier: float = 1.0
    markers: tuple[str, ...] = ()
    sub_patterns: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    contradicts: Optional[str] = None
    clinical_correlation: Optional[str] = None
    mitigation_strategy: Optional[str] = None


@dataclass(frozen=True)
class DriverDefinition:
    id: str
    name: str
    conflicts_with: tuple[str, ...] = ()
    root: str = ""
    insight: str = ""
    healthy_expression: str = ""
    unhealthy_expression: str = ""
    therapeutic_direction: str = ""


@dataclass(frozen=True)
class PatternRelationship:
    pattern: str
    reinforces: tuple[str, ...] = ()
    conflicts_with: tuple[str, ...] = ()


@dataclass(frozen=True)
class NegationLexicon:
    hard: frozenset[str] = frozenset()
    soft: frozenset[str] = frozenset()
    conditional: frozenset[str] = frozenset()

    def tier_of(self, word: str) -> Optional[str]:
        if word in self.hard:
            return "hard"
        if word in self.soft:
            return "soft"
        if word in self.conditional:
            return "conditional"
        return None


@dataclass(frozen=True)
class KnowledgeBase:
    """All static tables the pipeline consults."""
    lexicon: Mapping[str, LexiconEntry]
    patterns: Mapping[str, PatternDefinition]
    drivers: Mapping[str, DriverDefinition]
    relationships: Mapping[str, PatternRelationship]
    negation: NegationLexicon
    amplifiers: Mapping[str, frozenset[str]]
    diminishers: Mapping[str, frozenset[str]]
    pattern_priors: Mapping[str, float] = field(default_factory=dict)
    driver_priors: Mapping[str, float] = field(default_factory=dict)

    @property
    def max_phrase_length(self) -> int:
        """Longest underscore-joined marker, in tokens."""
        if not self.lexicon:
            return 1
        return max(len(word.split("_")) for word in self.lexicon)

    def drivers_conflict(self, first: str, second: str) -> bool:
        """True when either driver declares a conflict with the other."""
        a = self.drivers.get(first)
        b = self.drivers.get(second)
        return bool(
            (a and second in a.conflicts_with)
            or (b and first in b.conflicts_with)
        )

    def stats(self) -> dict:
        return {
            "markers": len(self.lexicon),
            "patterns": len(self.patterns),
            "drivers": len(self.drivers),
            "amplifiers": sum(len(words) for words in self.amplifiers.values()),
            "diminishers": sum(len(words) for words in self.diminishers.values()),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "KnowledgeBase":
        """Build from the plain-dict layout used by lexicon.DEFAULT_KNOWLEDGE."""
        try:
            lexicon = {
                word: _lexicon_entry(word, raw)
                for word, raw in data.get("lexicon", {}).items()
            }
            patterns = {
                pid: _pattern_definition(pid, raw)
                for pid, raw in data.get("patterns", {}).items()
            }
            drivers = {
                did: DriverDefinition(
                    id=did,
                    name=raw.get("name", did),
                    conflicts_with=tuple(raw.get("conflicts_with", ())),
                    root=raw.get("root", ""),
                    insight=raw.get("insight", ""),
                    healthy_expression=raw.get("healthy_expression", ""),
                    unhealthy_expression=raw.get("unhealthy_expression", ""),
                    therapeutic_direction=raw.get("therapeutic_direction", ""),
                )
                for did, raw in data.get("drivers", {}).items()
            }
            relationships = {
                pid: PatternRelationship(
                    pattern=pid,
                    reinforces=tuple(raw.get("reinforces", ())),
                    conflicts_with=tuple(raw.get("conflicts_with", ())),
                )
                for pid, raw in data.get("pattern_relationships", {}).items()
            }
            neg = data.get("negation_patterns", {})
            negation = NegationLexicon(
                hard=frozenset(neg.get("hard_negation", ())),
                soft=frozenset(neg.get("soft_negation", ())),
                conditional=frozenset(neg.get("conditional_negation", ())),
            )
            amplifiers = {
                tier: frozenset(words)
                for tier, words in data.get("amplifiers", {}).items()
            }
            diminishers = {
                tier: frozenset(words)
                for tier, words in data.get("diminishers", {}).items()
            }
            priors = data.get("priors", {})
        except (AttributeError, TypeError, ValueError) as e:
            raise KnowledgeBaseError(f"Malformed knowledge tables: {e}") from e

        return cls(
            lexicon=MappingProxyType(lexicon),
            patterns=MappingProxyType(patterns),
            drivers=MappingProxyType(drivers),
            relationships=MappingProxyType(relationships),
            negation=negation,
            amplifiers=MappingProxyType(amplifiers),
            diminishers=MappingProxyType(diminishers),
            pattern_priors=MappingProxyType(dict(priors.get("patterns", {}))),
            driver_priors=MappingProxyType(dict(priors.get("drivers", {}))),
        )


# ============================================================
# BUILDERS
# ============================================================

def _lexicon_entry(word: str, raw: dict) -> LexiconEntry:
    if "category" not in raw:
        raise KnowledgeBaseError(f"Lexicon entry '{word}' has no category")
    weight = float(raw.get("weight", 0))
    if weight <= 0:
        raise KnowledgeBaseError(f"Lexicon entry '{word}' must have a positive weight")
    valence = float(raw.get("emotional_valence", 0.0))
    if not -1.0 <= valence <= 1.0:
        raise KnowledgeBaseError(f"Lexicon entry '{word}' valence out of [-1, 1]")
    intensity = raw.get("intensity", "moderate")
    if intensity not in INTENSITY_LEVELS:
        raise KnowledgeBaseError(f"Lexicon entry '{word}' has unknown intensity '{intensity}'")

    rules = tuple(
        ContextRule(
            pattern=pattern,
            weight=float(cfg.get("weight", weight)),
            subcategory=cfg.get("subcategory"),
        )
        for pattern, cfg in raw.get("valid_contexts", {}).items()
    )

    return LexiconEntry(
        word=word,
        category=raw["category"],
        weight=weight,
        intensity=intensity,
        subcategory=raw.get("subcategory"),
        contradicts=tuple(raw.get("contradicts", ())),
        reinforces=tuple(raw.get("reinforces", ())),
        emotional_valence=valence,
        context_required=bool(raw.get("context_required", False)),
        valid_contexts=rules,
        clinical_note=raw.get("clinical_note"),
    )


def _pattern_definition(pid: str, raw: dict) -> PatternDefinition:
    return PatternDefinition(
        id=pid,
        name=raw.get("name", pid),
        driver=raw.get("driver"),
        severity_threshold=float(raw.get("severity_threshold", 2)),
        weight_multiplier=float(raw.get("weight_multiplier", 1.0)),
        markers=tuple(raw.get("markers", ())),
        sub_patterns=MappingProxyType({
            name: tuple(words) for name, words in raw.get("sub_patterns", {}).items()
        }),
        contradicts=raw.get("contradicts"),
        clinical_correlation=raw.get("clinical_correlation"),
        mitigation_strategy=raw.get("mitigation_strategy"),
    )


def load_knowledge_base(path: str | Path) -> KnowledgeBase:
    """Load a knowledge base from a JSON document."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise KnowledgeBaseError(f"Cannot read knowledge base at {path}: {e}") from e
    if not isinstance(data, dict):
        raise KnowledgeBaseError("Knowledge base document must be a JSON object")
    return KnowledgeBase.from_dict(data)


def default_knowledge_base() -> KnowledgeBase:
    """The built-in tables from lexicon.py."""
    from cognitive_insight.lexicon import DEFAULT_KNOWLEDGE
    return KnowledgeBase.from_dict(DEFAULT_KNOWLEDGE)
