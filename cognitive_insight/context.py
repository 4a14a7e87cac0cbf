"""
Context Extractor — bounded windows around a token.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from cognitive_insight.config import settings
from cognitive_insight.tokenizer import Token


@dataclass(frozen=True)
class SentenceContext:
    tokens: tuple[Token, ...]
    position: int           # target's position within the sentence
    text: str               # original-text sentence


@dataclass(frozen=True)
class TokenContext:
    preceding: tuple[Token, ...]
    following: tuple[Token, ...]
    full_window: tuple[Token, ...]
    position_in_window: int
    sentence: Optional[SentenceContext] = None

    @property
    def preceding_text(self) -> str:
        return "_".join(t.word for t in self.preceding)

    @property
    def window_text(self) -> str:
        return "_".join(t.word for t in self.full_window)


def extract_context(
    tokens: list[Token],
    index: int,
    window_size: Optional[int] = None,
    text: Optional[str] = None,
) -> TokenContext:
    """
    Build the window around tokens[index].

    Preceding tokens are clipped to [0, index), following to
    (index, len(tokens)). When sentence metadata is present, the target's
    whole sentence is attached; passing the source text lets the sentence
    be reconstructed from the original characters.
    """
    if window_size is None:
        window_size = settings.CONTEXT_WINDOW

    start = max(0, index - window_size)
    end = min(len(tokens), index + window_size + 1)

    return TokenContext(
        preceding=tuple(tokens[start:index]),
        following=tuple(tokens[index + 1:end]),
        full_window=tuple(tokens[start:end]),
        position_in_window=index - start,
        sentence=_sentence_context(tokens, index, text),
    )


def _sentence_context(
    tokens: list[Token], index: int, text: Optional[str],
) -> Optional[SentenceContext]:
    target = tokens[index]
    if target.sentence_index is None:
        return None

    members = tuple(t for t in tokens if t.sentence_index == target.sentence_index)
    if text is not None:
        first, last = members[0], members[-1]
        sentence_text = text[first.offset:last.offset + len(last.original)]
    else:
        sentence_text = " ".join(t.original for t in members)

    return SentenceContext(
        tokens=members,
        position=target.sentence_position,
        text=sentence_text,
    )
