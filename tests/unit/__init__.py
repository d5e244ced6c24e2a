"""
Paragraph Diff Tests Package
============================
Test suite for the paragraph comparison engine.

Run all tests: python3 -m pytest tests/unit/ -v
Run specific: python3 -m pytest tests/unit/test_tokenizer.py -v
"""

__version__ = "1.0.0"
