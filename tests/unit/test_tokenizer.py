"""
Tests for the Tokenizer
=======================
Paragraph splitting, word tokens, fingerprints and word counts.
"""

import pytest

from paragraph_diff.models import join_tokens
from paragraph_diff.tokenizer import (
    split_paragraphs,
    tokenize_words,
    fingerprint,
    count_words,
    normalize_for_fingerprint,
)


class TestSplitParagraphs:
    """Tests for split_paragraphs()."""

    def test_blank_line_separates(self):
        assert split_paragraphs("First.\n\nSecond.") == ["First.", "Second."]

    def test_single_newline_stays_inside_paragraph(self):
        assert split_paragraphs("line one\nline two") == ["line one\nline two"]

    def test_windows_line_endings(self):
        assert split_paragraphs("First.\r\n\r\nSecond.") == ["First.", "Second."]

    def test_runs_of_blank_lines_and_whitespace_lines(self):
        text = "  First.  \n\n \t \n\n\n  Second.\n"
        assert split_paragraphs(text) == ["First.", "Second."]

    def test_order_preserved(self):
        text = "c\n\nb\n\na"
        assert split_paragraphs(text) == ["c", "b", "a"]

    @pytest.mark.parametrize("text", ["", "   ", "\n\n\n", " \r\n \r\n "])
    def test_empty_inputs_have_no_paragraphs(self, text):
        assert split_paragraphs(text) == []


class TestTokenizeWords:
    """Tests for tokenize_words()."""

    def test_separators_are_kept_verbatim(self):
        tokens = tokenize_words("Hello  world\tfoo")
        assert [t.text for t in tokens] == ["Hello", "world", "foo"]
        assert [t.trailing_separator for t in tokens] == ["  ", "\t", " "]

    def test_indices_are_sequential(self):
        tokens = tokenize_words("a b c d")
        assert [t.index for t in tokens] == [0, 1, 2, 3]

    def test_newline_inside_paragraph(self):
        tokens = tokenize_words("line one\nline two")
        assert tokens[1].text == "one"
        assert tokens[1].trailing_separator == "\n"

    def test_empty_paragraph(self):
        assert tokenize_words("") == []

    def test_punctuation_stays_attached(self):
        tokens = tokenize_words("Wait, what?!")
        assert [t.text for t in tokens] == ["Wait,", "what?!"]

    @pytest.mark.parametrize("paragraph", [
        "The quick brown fox.",
        "Spacing   varies\there\nand  there",
        "single",
        "Ünïcödé wörds — and dashes",
    ])
    def test_reconstruction(self, paragraph):
        # The final word always carries the default single space
        assert join_tokens(tokenize_words(paragraph)) == paragraph + " "


class TestFingerprint:
    """Tests for fingerprint()."""

    def test_case_and_punctuation_ignored(self):
        assert fingerprint("Hello, World!") == fingerprint("hello world")

    def test_deterministic(self):
        text = "Some paragraph, with punctuation; and CASE."
        assert fingerprint(text) == fingerprint(text)

    def test_whitespace_collapsed(self):
        assert fingerprint("a   b\n c") == fingerprint("a b c")
        assert fingerprint("  padded  ") == fingerprint("padded")

    def test_djb2_values(self):
        assert fingerprint("") == 5381
        assert fingerprint("a") == 5381 * 33 + ord("a")
        assert fingerprint("ab") == 5863208

    def test_fits_in_32_bits(self):
        value = fingerprint("lorem ipsum dolor sit amet " * 200)
        assert 0 <= value < 2 ** 32

    def test_letters_and_digits_matter(self):
        assert fingerprint("version 2") != fingerprint("version 3")
        assert fingerprint("café") != fingerprint("caf")

    def test_unicode_letters_kept(self):
        assert normalize_for_fingerprint("Ça, c'est ÉTÉ!") == "ça cest été"

    def test_different_words_differ(self):
        assert fingerprint("The quick fox.") != fingerprint("The quick brown fox.")


class TestCountWords:
    """Tests for count_words()."""

    def test_counts_words(self):
        assert count_words("The quick brown fox.") == 4

    def test_pure_punctuation_not_counted(self):
        assert count_words("Hello, world! -- 42") == 3
        assert count_words("— … !!") == 0

    def test_empty(self):
        assert count_words("") == 0
        assert count_words("   \n\t ") == 0

    def test_digits_count(self):
        assert count_words("Section 4.2 of 2024") == 4
