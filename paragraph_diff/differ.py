"""
Paragraph Differ v1.0.0
=======================
Paragraph alignment with move detection and word-level edit scripts.

Paragraphs are paired by content fingerprint, Jaccard word similarity and a
one-paragraph lookahead; each pair is then diffed word by word with the
Myers shortest-edit-script algorithm.
"""

from typing import List, Optional, Sequence

from config_logging import get_logger

from .models import (
    Token, Move, Alignment, Operation, ParagraphDiff, DiffStats, DiffResult,
    EQUAL, INSERT, DELETE,
    UNCHANGED, MODIFIED, ADDED, DELETED, MOVED,
)
from .tokenizer import split_paragraphs, tokenize_words, fingerprint

logger = get_logger('paragraph_diff.differ')

# Jaccard similarity a pair must exceed to count as the same paragraph edited
SIMILARITY_THRESHOLD = 0.3


class ParagraphDiffer:
    """
    Stateless comparison engine.

    Every call to compare() works from scratch and returns a new immutable
    DiffResult; nothing is kept between calls.
    """

    def compare(self, original_text: str, revised_text: str) -> DiffResult:
        """
        Compare two texts paragraph by paragraph.

        Args:
            original_text: Original document text
            revised_text: Revised document text

        Returns:
            DiffResult with paragraph diffs and statistics
        """
        original_paras = split_paragraphs(original_text)
        revised_paras = split_paragraphs(revised_text)

        with logger.log_operation('compare',
                                  original_paragraphs=len(original_paras),
                                  revised_paragraphs=len(revised_paras)):
            moves = self.detect_moved_paragraphs(original_paras, revised_paras)
            alignments = self.align_paragraphs(original_paras, revised_paras, moves)
            paragraphs = tuple(self._diff_alignment(a) for a in alignments)
            stats = self.calculate_stats(paragraphs)

        logger.debug(
            f"Compare complete: {len(paragraphs)} paragraphs, "
            f"+{stats.words_added} -{stats.words_deleted} words, "
            f"{stats.paragraphs_moved} moved"
        )
        return DiffResult(paragraphs=paragraphs, stats=stats)

    # ------------------------------------------------------------------
    # Word level
    # ------------------------------------------------------------------

    def myers_diff(
        self,
        old_tokens: Sequence[Token],
        new_tokens: Sequence[Token]
    ) -> List[Operation]:
        """
        Shortest edit script between two token sequences (Myers, 1986).

        Tokens match on exact, case-sensitive text. Equal+delete operations
        reproduce old_tokens in order; equal+insert reproduce new_tokens.

        Args:
            old_tokens: Original word tokens
            new_tokens: Revised word tokens

        Returns:
            List of Operation objects, one per token
        """
        n = len(old_tokens)
        m = len(new_tokens)
        max_d = n + m
        if max_d == 0:
            return []

        # Diagonal k lives at frontier[offset + k]; k +/- 1 stays within bounds.
        offset = max_d + 1
        frontier = [0] * (2 * max_d + 3)
        trace = []

        for d in range(max_d + 1):
            trace.append(frontier[:])
            if self._advance_frontier(frontier, offset, d, old_tokens, new_tokens):
                break

        logger.debug(f"Edit distance {len(trace) - 1} for {n} -> {m} tokens")
        return self._backtrack(trace, offset, old_tokens, new_tokens)

    @staticmethod
    def _from_upper_diagonal(frontier: List[int], offset: int, k: int, d: int) -> bool:
        """Whether the path to diagonal k at distance d comes from k + 1."""
        return k == -d or (
            k != d and frontier[offset + k - 1] < frontier[offset + k + 1]
        )

    def _advance_frontier(self, frontier, offset, d, old_tokens, new_tokens) -> bool:
        """Extend every diagonal by one edit; True once (N, M) is reached."""
        n = len(old_tokens)
        m = len(new_tokens)
        for k in range(-d, d + 1, 2):
            if self._from_upper_diagonal(frontier, offset, k, d):
                x = frontier[offset + k + 1]
            else:
                x = frontier[offset + k - 1] + 1
            y = x - k

            while x < n and y < m and old_tokens[x].text == new_tokens[y].text:
                x += 1
                y += 1

            frontier[offset + k] = x
            if x >= n and y >= m:
                return True
        return False

    def _backtrack(self, trace, offset, old_tokens, new_tokens) -> List[Operation]:
        """Walk the frontier snapshots back from (N, M) to (0, 0)."""
        operations = []
        x = len(old_tokens)
        y = len(new_tokens)

        for d in range(len(trace) - 1, -1, -1):
            frontier = trace[d]
            k = x - y

            if self._from_upper_diagonal(frontier, offset, k, d):
                prev_k = k + 1
            else:
                prev_k = k - 1

            prev_x = frontier[offset + prev_k]
            prev_y = prev_x - prev_k

            while x > prev_x and y > prev_y:
                x -= 1
                y -= 1
                operations.append(Operation(EQUAL, old_tokens[x], new_tokens[y]))

            if d > 0:
                if x == prev_x:
                    y -= 1
                    operations.append(Operation(INSERT, new_tokens[y]))
                else:
                    x -= 1
                    operations.append(Operation(DELETE, old_tokens[x]))

        operations.reverse()
        return operations

    # ------------------------------------------------------------------
    # Paragraph level
    # ------------------------------------------------------------------

    def detect_moved_paragraphs(
        self,
        original_paras: Sequence[str],
        revised_paras: Sequence[str]
    ) -> List[Move]:
        """
        Find paragraphs that reappear unedited at a different position.

        Greedy first match: each original paragraph, in order, claims the
        first unclaimed revised paragraph with the same fingerprint at a
        different index. With three or more duplicates the pairing depends
        on order.

        Args:
            original_paras: Original paragraphs
            revised_paras: Revised paragraphs

        Returns:
            List of Move objects in original order
        """
        revised_fps = [fingerprint(p) for p in revised_paras]
        matched_revised = set()
        moves = []

        for orig_idx, orig_text in enumerate(original_paras):
            orig_fp = fingerprint(orig_text)
            for rev_idx, rev_fp in enumerate(revised_fps):
                if rev_fp == orig_fp and rev_idx != orig_idx and rev_idx not in matched_revised:
                    moves.append(Move(
                        from_index=orig_idx,
                        to_index=rev_idx,
                        fingerprint=orig_fp,
                        text=orig_text
                    ))
                    matched_revised.add(rev_idx)
                    break

        if moves:
            logger.debug(f"Detected {len(moves)} moved paragraphs")
        return moves

    def paragraph_similarity(self, para1: str, para2: str) -> float:
        """Jaccard similarity of the two paragraphs' lowercase word sets."""
        words1 = set(para1.lower().split())
        words2 = set(para2.lower().split())
        union = len(words1 | words2)
        if union == 0:
            return 0.0
        return len(words1 & words2) / union

    def align_paragraphs(
        self,
        original_paras: Sequence[str],
        revised_paras: Sequence[str],
        moves: Sequence[Move]
    ) -> List[Alignment]:
        """
        Pair up original and revised paragraphs.

        Two cursors walk both sequences. Move destinations become 'moved'
        rows and move sources are skipped; remaining pairs are 'unchanged'
        (same fingerprint), 'modified' (similar enough, or nothing better
        one paragraph ahead), 'deleted' or 'added'. Every paragraph of both
        sides ends up in exactly one alignment.

        Args:
            original_paras: Original paragraphs
            revised_paras: Revised paragraphs
            moves: Output of detect_moved_paragraphs()

        Returns:
            List of Alignment objects in output order
        """
        moved_from = {m.from_index for m in moves}
        move_by_destination = {m.to_index: m for m in moves}
        n_orig = len(original_paras)
        n_rev = len(revised_paras)

        alignments = []
        orig_idx = 0
        rev_idx = 0

        while orig_idx < n_orig or rev_idx < n_rev:
            if rev_idx < n_rev and rev_idx in move_by_destination:
                move = move_by_destination[rev_idx]
                alignments.append(Alignment(
                    type=MOVED,
                    original=move.text,
                    revised=revised_paras[rev_idx],
                    original_index=move.from_index,
                    revised_index=rev_idx,
                    moved_from=move.from_index,
                    moved_to=rev_idx
                ))
                rev_idx += 1
                continue

            if orig_idx < n_orig and orig_idx in moved_from:
                orig_idx += 1
                continue

            if orig_idx < n_orig and rev_idx < n_rev:
                kind = self._classify_pair(original_paras, revised_paras, orig_idx, rev_idx)
                if kind == DELETED:
                    alignments.append(self._deleted(original_paras, orig_idx))
                    orig_idx += 1
                elif kind == ADDED:
                    alignments.append(self._added(revised_paras, rev_idx))
                    rev_idx += 1
                else:
                    alignments.append(Alignment(
                        type=kind,
                        original=original_paras[orig_idx],
                        revised=revised_paras[rev_idx],
                        original_index=orig_idx,
                        revised_index=rev_idx
                    ))
                    orig_idx += 1
                    rev_idx += 1
            elif orig_idx < n_orig:
                alignments.append(self._deleted(original_paras, orig_idx))
                orig_idx += 1
            else:
                alignments.append(self._added(revised_paras, rev_idx))
                rev_idx += 1

        return alignments

    def _classify_pair(self, original_paras, revised_paras, i: int, j: int) -> str:
        """Decide how original[i] and revised[j] relate."""
        original = original_paras[i]
        revised = revised_paras[j]

        if fingerprint(original) == fingerprint(revised):
            return UNCHANGED

        if self.paragraph_similarity(original, revised) > SIMILARITY_THRESHOLD:
            return MODIFIED

        next_orig_sim = (
            self.paragraph_similarity(original_paras[i + 1], revised)
            if i + 1 < len(original_paras) else 0.0
        )
        next_rev_sim = (
            self.paragraph_similarity(original, revised_paras[j + 1])
            if j + 1 < len(revised_paras) else 0.0
        )

        if next_orig_sim > next_rev_sim and next_orig_sim > SIMILARITY_THRESHOLD:
            return DELETED
        if next_rev_sim > SIMILARITY_THRESHOLD:
            return ADDED
        return MODIFIED

    @staticmethod
    def _deleted(original_paras, index: int) -> Alignment:
        return Alignment(DELETED, original_paras[index], None, index, None)

    @staticmethod
    def _added(revised_paras, index: int) -> Alignment:
        return Alignment(ADDED, None, revised_paras[index], None, index)

    def _diff_alignment(self, alignment: Alignment) -> ParagraphDiff:
        """Run the word-level diff for one alignment."""
        if alignment.type == ADDED:
            operations = [Operation(INSERT, t) for t in tokenize_words(alignment.revised)]
        elif alignment.type == DELETED:
            operations = [Operation(DELETE, t) for t in tokenize_words(alignment.original)]
        else:
            operations = self.myers_diff(
                tokenize_words(alignment.original or ''),
                tokenize_words(alignment.revised or '')
            )

        return ParagraphDiff(
            alignment_type=alignment.type,
            original_index=alignment.original_index,
            revised_index=alignment.revised_index,
            operations=tuple(operations),
            moved_from=alignment.moved_from,
            moved_to=alignment.moved_to
        )

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def calculate_stats(self, paragraphs: Sequence[ParagraphDiff]) -> DiffStats:
        """Reduce paragraph diffs to word and move counts."""
        added = deleted = unchanged = moved = 0

        for para in paragraphs:
            if para.moved_from is not None or para.moved_to is not None:
                moved += 1
            for op in para.operations:
                if op.type == INSERT:
                    added += 1
                elif op.type == DELETE:
                    deleted += 1
                else:
                    unchanged += 1

        return DiffStats(
            words_original=deleted + unchanged,
            words_revised=added + unchanged,
            words_added=added,
            words_deleted=deleted,
            words_unchanged=unchanged,
            paragraphs_moved=moved
        )


# Convenience function
def compare(original_text: str, revised_text: str, differ: Optional[ParagraphDiffer] = None) -> DiffResult:
    """
    Compare two texts.

    Args:
        original_text: Original text
        revised_text: Revised text
        differ: Engine instance to use (a fresh one by default)

    Returns:
        DiffResult with paragraph diffs and statistics
    """
    return (differ or ParagraphDiffer()).compare(original_text, revised_text)
