"""
Paragraph Diff Models v1.0.0
============================
Immutable data classes for paragraph comparison results.
"""

from dataclasses import dataclass, field
from typing import Tuple, Dict, Optional, Any

# Operation types
EQUAL = 'equal'
INSERT = 'insert'
DELETE = 'delete'
OPERATION_TYPES = (EQUAL, INSERT, DELETE)

# Alignment types
UNCHANGED = 'unchanged'
MODIFIED = 'modified'
ADDED = 'added'
DELETED = 'deleted'
MOVED = 'moved'
ALIGNMENT_TYPES = (UNCHANGED, MODIFIED, ADDED, DELETED, MOVED)


@dataclass(frozen=True)
class Token:
    """
    One word of a paragraph plus the whitespace that follows it.

    Attributes:
        text: Maximal run of non-whitespace characters
        index: 0-based position within the paragraph's token sequence
        trailing_separator: Whitespace after the word, verbatim
                            (a single space at the end of a paragraph)
    """
    text: str
    index: int
    trailing_separator: str = ' '

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'text': self.text,
            'index': self.index,
            'trailing_separator': self.trailing_separator
        }


@dataclass(frozen=True)
class Move:
    """
    Claim that an original paragraph reappears, unedited, elsewhere.

    Attributes:
        from_index: Paragraph index in the original text
        to_index: Paragraph index in the revised text
        fingerprint: Shared content fingerprint
        text: Original paragraph text
    """
    from_index: int
    to_index: int
    fingerprint: int
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'from_index': self.from_index,
            'to_index': self.to_index,
            'fingerprint': self.fingerprint,
            'text': self.text
        }


@dataclass(frozen=True)
class Alignment:
    """
    Pairing of an original paragraph position with a revised one (or neither).

    Attributes:
        type: One of ALIGNMENT_TYPES
        original: Original paragraph text (None for additions)
        revised: Revised paragraph text (None for deletions)
        original_index: Original paragraph index, if any
        revised_index: Revised paragraph index, if any
        moved_from: Source index for moved paragraphs
        moved_to: Destination index for moved paragraphs
    """
    type: str
    original: Optional[str]
    revised: Optional[str]
    original_index: Optional[int]
    revised_index: Optional[int]
    moved_from: Optional[int] = None
    moved_to: Optional[int] = None

    @property
    def is_move(self) -> bool:
        return self.moved_from is not None or self.moved_to is not None


@dataclass(frozen=True)
class Operation:
    """
    Atomic unit of a word-level edit script.

    Attributes:
        type: 'equal', 'insert' or 'delete'
        token: Original token for equal and delete, revised token for insert
        revised_token: Matching revised token of an equal operation, whose
                       trailing whitespace may differ from the original's
    """
    type: str
    token: Token
    revised_token: Optional[Token] = None

    @property
    def original_side(self) -> Optional[Token]:
        return None if self.type == INSERT else self.token

    @property
    def revised_side(self) -> Optional[Token]:
        if self.type == DELETE:
            return None
        return self.revised_token or self.token

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'token': self.token.to_dict(),
            'revised_token': self.revised_token.to_dict() if self.revised_token else None
        }


def join_tokens(tokens) -> str:
    """Concatenate tokens back into text, separators included."""
    return ''.join(t.text + t.trailing_separator for t in tokens)


@dataclass(frozen=True)
class ParagraphDiff:
    """
    Word-level diff of one aligned paragraph pair.

    Attributes:
        alignment_type: One of ALIGNMENT_TYPES
        original_index: Original paragraph index (None for additions)
        revised_index: Revised paragraph index (None for deletions)
        operations: Ordered edit script for this pair
        moved_from: Source index when the paragraph was moved
        moved_to: Destination index when the paragraph was moved
    """
    alignment_type: str
    original_index: Optional[int]
    revised_index: Optional[int]
    operations: Tuple[Operation, ...] = field(default_factory=tuple)
    moved_from: Optional[int] = None
    moved_to: Optional[int] = None

    @property
    def is_change(self) -> bool:
        """Whether this paragraph differs in any way from its counterpart."""
        return self.alignment_type != UNCHANGED or any(
            op.type != EQUAL for op in self.operations
        )

    def original_text(self) -> str:
        """Rebuild the original side from equal and delete operations."""
        return join_tokens(op.original_side for op in self.operations if op.type != INSERT)

    def revised_text(self) -> str:
        """Rebuild the revised side from equal and insert operations."""
        return join_tokens(op.revised_side for op in self.operations if op.type != DELETE)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'alignment_type': self.alignment_type,
            'original_index': self.original_index,
            'revised_index': self.revised_index,
            'moved_from': self.moved_from,
            'moved_to': self.moved_to,
            'operations': [op.to_dict() for op in self.operations]
        }


@dataclass(frozen=True)
class DiffStats:
    """Aggregate word and paragraph counts for one comparison."""
    words_original: int = 0
    words_revised: int = 0
    words_added: int = 0
    words_deleted: int = 0
    words_unchanged: int = 0
    paragraphs_moved: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'words_original': self.words_original,
            'words_revised': self.words_revised,
            'words_added': self.words_added,
            'words_deleted': self.words_deleted,
            'words_unchanged': self.words_unchanged,
            'paragraphs_moved': self.paragraphs_moved
        }


@dataclass(frozen=True)
class DiffResult:
    """
    Complete result of comparing two texts.

    Attributes:
        paragraphs: Paragraph diffs in alignment order
        stats: Aggregate statistics derived from the paragraph diffs
    """
    paragraphs: Tuple[ParagraphDiff, ...] = field(default_factory=tuple)
    stats: DiffStats = field(default_factory=DiffStats)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'paragraphs': [p.to_dict() for p in self.paragraphs],
            'stats': self.stats.to_dict()
        }
