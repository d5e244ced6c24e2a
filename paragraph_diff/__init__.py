"""
Paragraph Diff Module v1.0.0
============================
Word-level comparison of two multi-paragraph texts with detection of
paragraphs that were moved rather than edited.

Features:
- Paragraph segmentation and content fingerprints
- Myers shortest edit script over word tokens
- Move detection by fingerprint
- Paragraph alignment (unchanged, modified, added, deleted, moved)
- Aggregate word and move statistics
"""

from .differ import ParagraphDiffer, compare, SIMILARITY_THRESHOLD
from .tokenizer import split_paragraphs, tokenize_words, fingerprint, count_words
from .models import (
    Token,
    Move,
    Alignment,
    Operation,
    ParagraphDiff,
    DiffStats,
    DiffResult
)

__version__ = "1.0.0"
__all__ = [
    'ParagraphDiffer',
    'compare',
    'SIMILARITY_THRESHOLD',
    'split_paragraphs',
    'tokenize_words',
    'fingerprint',
    'count_words',
    'Token',
    'Move',
    'Alignment',
    'Operation',
    'ParagraphDiff',
    'DiffStats',
    'DiffResult'
]
