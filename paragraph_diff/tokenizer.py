"""
Paragraph Tokenizer v1.0.0
==========================
Paragraph segmentation, word tokenization with exact whitespace
preservation, content fingerprints and word counting.
"""

import re
import unicodedata
from typing import List

from .models import Token

PARAGRAPH_BREAK = re.compile(r'\n\s*\n')
WORD_WITH_SEPARATOR = re.compile(r'(\S+)(\s*)')
WHITESPACE_RUN = re.compile(r'\s+')

DJB2_SEED = 5381
UINT32_MASK = 0xFFFFFFFF


def _is_word_char(ch: str) -> bool:
    """True for Unicode letters and numbers."""
    return unicodedata.category(ch)[0] in ('L', 'N')


def split_paragraphs(text: str) -> List[str]:
    """
    Split text into trimmed, non-empty paragraphs.

    Paragraphs are separated by one or more blank lines (lines holding
    only whitespace count as blank). Order is preserved.

    Args:
        text: Raw input text

    Returns:
        List of paragraph strings
    """
    if not text:
        return []
    normalized = text.replace('\r\n', '\n')
    pieces = (p.strip() for p in PARAGRAPH_BREAK.split(normalized))
    return [p for p in pieces if p]


def tokenize_words(paragraph: str) -> List[Token]:
    """
    Tokenize a paragraph into words carrying their trailing whitespace.

    A word at the very end of the paragraph gets a single space as its
    separator.

    Args:
        paragraph: Paragraph text

    Returns:
        List of Token objects with sequential indices
    """
    return [
        Token(text=match.group(1), index=index, trailing_separator=match.group(2) or ' ')
        for index, match in enumerate(WORD_WITH_SEPARATOR.finditer(paragraph or ''))
    ]


def normalize_for_fingerprint(text: str) -> str:
    """Lowercase, drop everything but letters, numbers and whitespace, collapse spaces."""
    kept = ''.join(ch for ch in text.lower() if _is_word_char(ch) or ch.isspace())
    return WHITESPACE_RUN.sub(' ', kept).strip()


def fingerprint(text: str) -> int:
    """
    Content fingerprint of a paragraph (djb2 over normalized text).

    Case-only and punctuation-only differences produce the same value.
    Collisions are possible.

    Args:
        text: Paragraph text

    Returns:
        32-bit unsigned integer
    """
    h = DJB2_SEED
    for ch in normalize_for_fingerprint(text):
        h = ((h << 5) + h + ord(ch)) & UINT32_MASK
    return h


def count_words(text: str) -> int:
    """Count whitespace-separated tokens holding at least one letter or digit."""
    return sum(1 for token in text.split() if any(_is_word_char(ch) for ch in token))
