"""
Tests for the command line entry point
======================================
"""

import json

import pytest

from paragraph_diff.__main__ import main


@pytest.fixture
def text_files(tmp_path):
    original = tmp_path / "original.txt"
    revised = tmp_path / "revised.txt"
    original.write_text("The quick fox.\n\nA second paragraph.", encoding="utf-8")
    revised.write_text("The quick brown fox.\n\nA second paragraph.", encoding="utf-8")
    return original, revised


class TestCommandLine:
    """Tests for python -m paragraph_diff."""

    def test_summary_output(self, text_files, capsys):
        original, revised = text_files
        assert main([str(original), str(revised)]) == 0
        out = capsys.readouterr().out
        assert "Words added:     1" in out
        assert "modified" in out

    def test_json_output(self, text_files, capsys):
        original, revised = text_files
        assert main([str(original), str(revised), "--json", "--indent", "0"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['stats']['words_added'] == 1
        assert [p['alignment_type'] for p in data['paragraphs']] == ['modified', 'unchanged']

    def test_missing_file(self, tmp_path, capsys):
        missing = tmp_path / "nope.txt"
        assert main([str(missing), str(missing)]) == 2
        assert "Error" in capsys.readouterr().err
