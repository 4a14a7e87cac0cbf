"""
Modifier Resolver

Amplifiers ("very", "terribly") and diminishers ("somewhat", "just") in
the few tokens before a marker scale its weight. Finding both kinds at
once is treated as mixed signalling and damps the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from cognitive_insight.tokenizer import Token

AMPLIFIER_BONUS = {"extreme": 0.5, "emotional": 0.4, "moderate": 0.3}
DIMINISHER_PENALTY = {"uncertainty": 0.4, "qualification": 0.3, "minimization": 0.2}

SCAN_WINDOW = 3
MIN_MULTIPLIER = 0.1
MAX_MULTIPLIER = 3.0


@dataclass(frozen=True)
class Modifier:
    word: str
    tier: str
    distance: int
    effect: float   # signed contribution to the multiplier


@dataclass(frozen=True)
class ModifierEffect:
    multiplier: float = 1.0
    intensifiers: tuple[Modifier, ...] = ()
    diminishers: tuple[Modifier, ...] = ()
    has_conflict: bool = False

    @property
    def words(self) -> list[str]:
        return [m.word for m in sorted(
            self.intensifiers + self.diminishers, key=lambda m: -m.distance,
        )]


NEUTRAL = ModifierEffect()


def distance_weight(distance: int) -> float:
    return max(0.5, 1.0 - 0.2 * distance)


def _tier(word: str, tiers: Mapping[str, frozenset[str]], order) -> Optional[str]:
    for tier in order:
        if word in tiers.get(tier, ()):
            return tier
    return None


def analyze_modifiers(
    tokens: list[Token],
    index: int,
    amplifiers: Mapping[str, frozenset[str]],
    diminishers: Mapping[str, frozenset[str]],
) -> ModifierEffect:
    """
    Compute the modifier multiplier for tokens[index].

    Starts at 1.0; each amplifier in the SCAN_WINDOW preceding tokens adds
    its tier bonus, each diminisher subtracts its tier penalty, both scaled
    by max(0.5, 1 - 0.2 * distance). Two-word modifiers ("kind of") are
    matched on consecutive tokens inside the window and measured from their
    last word. Mixed amplifiers and diminishers damp the multiplier by
    0.2 per matched pair; the result is clamped to [0.1, 3.0].
    """
    start = max(0, index - SCAN_WINDOW)
    multiplier = 1.0
    intensifiers: list[Modifier] = []
    lowered: list[Modifier] = []

    j = start
    while j < index:
        word = tokens[j].word
        span = 1
        amp = _tier(word, amplifiers, AMPLIFIER_BONUS)
        dim = None if amp else _tier(word, diminishers, DIMINISHER_PENALTY)
        if amp is None and dim is None and j + 1 < index:
            phrase = f"{word}_{tokens[j + 1].word}"
            amp = _tier(phrase, amplifiers, AMPLIFIER_BONUS)
            dim = None if amp else _tier(phrase, diminishers, DIMINISHER_PENALTY)
            if amp or dim:
                word, span = phrase, 2

        distance = index - (j + span - 1)
        if amp:
            effect = AMPLIFIER_BONUS[amp] * distance_weight(distance)
            multiplier += effect
            intensifiers.append(Modifier(word, amp, distance, effect))
        elif dim:
            effect = DIMINISHER_PENALTY[dim] * distance_weight(distance)
            multiplier -= effect
            lowered.append(Modifier(word, dim, distance, -effect))
        j += span

    has_conflict = bool(intensifiers) and bool(lowered)
    if has_conflict:
        multiplier *= 1 - 0.2 * min(len(intensifiers), len(lowered))

    return ModifierEffect(
        multiplier=max(MIN_MULTIPLIER, min(MAX_MULTIPLIER, multiplier)),
        intensifiers=tuple(intensifiers),
        diminishers=tuple(lowered),
        has_conflict=has_conflict,
    )
