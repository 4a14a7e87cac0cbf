"""
Temporal Shift Analyzer

Splits the token range into equal thirds (early / middle / late), sums
each pattern's hit weight per third, and reports:
  - shifts:       large segment-to-segment changes per pattern
  - arc:          the shape of each pattern across the three thirds
  - trends:       late vs early direction per pattern
  - trajectories: peak segment and stability per pattern
  - coherence:    how consistently patterns persist across thirds
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from cognitive_insight.weighting import Hit

SEGMENTS = ("early", "middle", "late")

MIN_ABSOLUTE_CHANGE = 1.0
MIN_PERCENT_CHANGE = 50.0


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class SegmentProfile:
    segment: str
    token_count: int
    marker_count: int
    marker_density: float
    avg_valence: float
    pattern_weights: dict[str, float] = field(default_factory=dict)
    dominant_pattern: Optional[str] = None


@dataclass(frozen=True)
class PatternShift:
    pattern: str
    from_segment: str
    to_segment: str
    change: float
    percent_change: float
    type: str                # emerging | disappearing | escalating | diminishing
    intensity: float


@dataclass(frozen=True)
class Trajectory:
    pattern: str
    weights: tuple[float, float, float]
    peak_segment: str
    stability: float


@dataclass(frozen=True)
class TemporalShift:
    segments: dict[str, SegmentProfile]
    shifts: list[PatternShift]
    arc: dict[str, str]
    trends: dict[str, str]
    trajectories: dict[str, Trajectory]
    coherence: float
    summary: str


# ============================================================
# SEGMENTATION
# ============================================================

def segment_for(position: int, total: int) -> str:
    """Which third of a total-token document a position falls in."""
    size = total / len(SEGMENTS)
    if position < size:
        return "early"
    if position < size * 2:
        return "middle"
    return "late"


def temporal_distribution(hits: list["Hit"]) -> dict[str, dict[str, float]]:
    """segment -> category -> summed adjusted weight."""
    distribution: dict[str, dict[str, float]] = {seg: {} for seg in SEGMENTS}
    for hit in hits:
        bucket = distribution[hit.temporal_segment]
        bucket[hit.category] = bucket.get(hit.category, 0.0) + hit.adjusted_weight
    return distribution


def _pattern_order(hits: list["Hit"]) -> list[str]:
    seen: dict[str, None] = {}
    for hit in hits:
        seen.setdefault(hit.category, None)
    return list(seen)


# ============================================================
# ANALYSIS
# ============================================================

def classify_arc(early: float, middle: float, late: float) -> str:
    """Arc type for one pattern's three segment weights (strict comparisons)."""
    if early > middle and middle > late:
        return "resolving"
    if early < middle and middle < late:
        return "escalating"
    if middle > early and middle > late:
        return "peaking_middle"
    if middle < early and middle < late:
        return "dip_recovery"
    if early == middle == late:
        return "plateau"
    return "fluctuating"


def detect_shifts(
    distribution: dict[str, dict[str, float]], patterns: list[str],
) -> list[PatternShift]:
    shifts: list[PatternShift] = []
    for prev_seg, curr_seg in zip(SEGMENTS, SEGMENTS[1:]):
        for pattern in patterns:
            prev = distribution[prev_seg].get(pattern, 0.0)
            curr = distribution[curr_seg].get(pattern, 0.0)
            change = curr - prev
            percent = (change / prev) * 100 if prev > 0 else 100.0

            if abs(change) <= MIN_ABSOLUTE_CHANGE or abs(percent) <= MIN_PERCENT_CHANGE:
                continue

            if prev == 0:
                kind = "emerging"
            elif curr == 0:
                kind = "disappearing"
            elif change > 0:
                kind = "escalating"
            else:
                kind = "diminishing"

            shifts.append(PatternShift(
                pattern=pattern,
                from_segment=prev_seg,
                to_segment=curr_seg,
                change=change,
                percent_change=percent,
                type=kind,
                intensity=abs(percent) / 100,
            ))
    return shifts


def _trajectory(pattern: str, weights: tuple[float, float, float]) -> Trajectory:
    peak = SEGMENTS[weights.index(max(weights))]
    steps = [abs(b - a) for a, b in zip(weights, weights[1:])]
    spread = max(weights) - min(weights)
    stability = 1 - (sum(steps) / len(steps)) / spread if spread > 0 else 1.0
    return Trajectory(pattern=pattern, weights=weights, peak_segment=peak, stability=stability)


def _temporal_coherence(distribution: dict[str, dict[str, float]], patterns: list[str]) -> float:
    if not patterns:
        return 1.0
    score = 0.0
    for pattern in patterns:
        present = sum(1 for seg in SEGMENTS if pattern in distribution[seg])
        score += 1.0 if present == len(SEGMENTS) else 0.3
    return score / len(patterns)


def _segment_profiles(
    hits: list["Hit"],
    token_count: int,
    distribution: dict[str, dict[str, float]],
) -> dict[str, SegmentProfile]:
    token_counts = {seg: 0 for seg in SEGMENTS}
    for position in range(token_count):
        token_counts[segment_for(position, token_count)] += 1

    profiles = {}
    for seg in SEGMENTS:
        seg_hits = [h for h in hits if h.temporal_segment == seg]
        weights = dict(distribution[seg])
        dominant = max(weights, key=weights.get) if weights else None
        profiles[seg] = SegmentProfile(
            segment=seg,
            token_count=token_counts[seg],
            marker_count=len(seg_hits),
            marker_density=len(seg_hits) / token_counts[seg] if token_counts[seg] else 0.0,
            avg_valence=(
                sum(h.emotional_valence for h in seg_hits) / len(seg_hits)
                if seg_hits else 0.0
            ),
            pattern_weights=weights,
            dominant_pattern=dominant,
        )
    return profiles


def summarize(shifts: list[PatternShift]) -> str:
    if not shifts:
        return "Language patterns remain relatively stable throughout."

    rising = [s for s in shifts if s.type in ("escalating", "emerging")]
    falling = [s for s in shifts if s.type in ("diminishing", "disappearing")]

    summary = "Language shows notable shifts: "
    if rising:
        detail = ", ".join(f"{s.pattern} from {s.from_segment} to {s.to_segment}" for s in rising)
        summary += f"{len(rising)} pattern(s) escalate ({detail}). "
    if falling:
        summary += f"{len(falling)} pattern(s) diminish. "
    return summary.strip()


def analyze_temporal_shift(hits: list["Hit"], token_count: int) -> TemporalShift:
    """Temporal profile of the hits over a token_count-long document."""
    distribution = temporal_distribution(hits)
    patterns = _pattern_order(hits)

    arc: dict[str, str] = {}
    trends: dict[str, str] = {}
    trajectories: dict[str, Trajectory] = {}
    for pattern in patterns:
        weights = tuple(distribution[seg].get(pattern, 0.0) for seg in SEGMENTS)
        arc[pattern] = classify_arc(*weights)
        delta = weights[2] - weights[0]
        trends[pattern] = "increasing" if delta > 0 else "decreasing" if delta < 0 else "stable"
        trajectories[pattern] = _trajectory(pattern, weights)

    shifts = detect_shifts(distribution, patterns)

    return TemporalShift(
        segments=_segment_profiles(hits, token_count, distribution),
        shifts=shifts,
        arc=arc,
        trends=trends,
        trajectories=trajectories,
        coherence=_temporal_coherence(distribution, patterns),
        summary=summarize(shifts),
    )
