"""Sentence and word utilities for script segmentation."""

from __future__ import annotations

import re
from typing import Sequence

# A sentence runs up to one or more terminators; trailing text without a
# terminator is kept as a final sentence.
_SENTENCE_RE = re.compile(r"[^.!?]+(?:[.!?]+|$)")


def count_words(text: str) -> int:
    return len(text.split())


def split_sentences(script_text: str) -> list[str]:
    sentences = [s.strip() for s in _SENTENCE_RE.findall(script_text)]
    sentences = [s for s in sentences if s]
    if not sentences:
        stripped = script_text.strip()
        return [stripped] if stripped else []
    return sentences


def total_words(sentences: Sequence[str]) -> int:
    return sum(count_words(s) for s in sentences)


def join_sentences(sentences: Sequence[str]) -> str:
    return " ".join(sentences)
