"""
Tokenizer — words, punctuation, positions, sentences.

Lower-cases the input, treats each punctuation mark as its own token and
splits everything else on whitespace. Apostrophes stay inside words so
contractions ("don't", "can't") survive as single tokens. Every token
keeps its character offset and surface form from the original text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional

PUNCTUATION = '.,!?;:"()'
SENTENCE_END = re.compile(r"^[.!?]$")

_TOKEN_RE = re.compile(r'[.,!?;:"()]|[^\s.,!?;:"()]+')


@dataclass(frozen=True)
class Token:
    word: str                      # normalized (lower-cased)
    original: str                  # surface form
    position: int                  # index in the token sequence
    offset: int                    # character offset in the source text
    is_punctuation: bool = False
    sentence_index: Optional[int] = None
    sentence_position: Optional[int] = None


def tokenize(text, sentences: bool = True) -> list[Token]:
    """
    Split text into Tokens.

    Empty or non-string input yields an empty list. With sentences=True,
    each token also carries its sentence index and position within it.
    """
    if not isinstance(text, str) or not text:
        return []

    tokens = [
        Token(
            word=match.group().lower(),
            original=match.group(),
            position=position,
            offset=match.start(),
            is_punctuation=match.group() in PUNCTUATION,
        )
        for position, match in enumerate(_TOKEN_RE.finditer(text))
    ]

    if sentences:
        tokens = segment_sentences(tokens)
    return tokens


def segment_sentences(tokens: list[Token]) -> list[Token]:
    """
    Assign sentence metadata.

    A sentence ends at a token matching [.!?]; the boundary token belongs to
    the sentence it closes. An unterminated trailing run still gets an index.
    """
    result: list[Token] = []
    sentence_index = 0
    sentence_start = 0

    for i, token in enumerate(tokens):
        result.append(replace(
            token,
            sentence_index=sentence_index,
            sentence_position=i - sentence_start,
        ))
        if SENTENCE_END.match(token.word):
            sentence_index += 1
            sentence_start = i + 1

    return result
