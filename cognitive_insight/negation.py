"""
Negation Resolver

Looks back from a marker for negation cues and reports how strongly the
marker is negated. Three tiers: hard (not, never, don't...), soft
(hardly, rarely...) and conditional (but, unless...). A cue's effect
decays with distance; two hard negators close together cancel out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from cognitive_insight.knowledge import NegationLexicon
from cognitive_insight.tokenizer import Token

TIER_STRENGTH = {"hard": 1.0, "soft": 0.6, "conditional": 0.3}

SCAN_WINDOW = 5
DOUBLE_NEGATIVE_WINDOW = 3
DECAY_SPAN = 6


@dataclass(frozen=True)
class NegationState:
    is_negated: bool = False
    type: str = "none"                 # hard | soft | conditional | double_negative | none
    strength: float = 0.0
    negator: Optional[str] = None
    distance: Optional[int] = None


NOT_NEGATED = NegationState()


def detect_negation(
    tokens: list[Token], index: int, negation: NegationLexicon,
) -> NegationState:
    """
    Resolve negation for tokens[index].

    Every negator in the SCAN_WINDOW preceding tokens is scored
    tier strength * (1 - distance / DECAY_SPAN); the strongest wins, and on
    a tie the one met first (farthest back) is kept. A hard winner is
    re-checked for a double negative: an even run (>= 2) of hard negators
    in the nearest DOUBLE_NEGATIVE_WINDOW tokens cancels it. The marker
    itself counts toward that run when it is a hard negator ("not never").
    """
    best: Optional[NegationState] = None

    for j in range(max(0, index - SCAN_WINDOW), index):
        word = tokens[j].word
        tier = negation.tier_of(word)
        if tier is None:
            continue
        distance = index - j
        effectiveness = TIER_STRENGTH[tier] * (1 - distance / DECAY_SPAN)
        if best is None or effectiveness > best.strength:
            best = NegationState(
                is_negated=True,
                type=tier,
                strength=effectiveness,
                negator=word,
                distance=distance,
            )

    if best is None:
        return NOT_NEGATED

    if best.type == "hard":
        run = sum(
            1 for t in tokens[max(0, index - DOUBLE_NEGATIVE_WINDOW):index]
            if t.word in negation.hard
        )
        if tokens[index].word in negation.hard:
            run += 1
        if run >= 2 and run % 2 == 0:
            return NegationState(
                is_negated=False,
                type="double_negative",
                strength=0.0,
                negator=best.negator,
                distance=best.distance,
            )

    return best
