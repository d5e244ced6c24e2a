#!/usr/bin/env python3
"""
Paragraph Diff API Test Suite v1.0.0
====================================
Validates the HTTP surface: compare, word-count and health endpoints,
input validation, error envelopes and rate limiting.

Run with: python -m pytest tests.py -v
Or standalone: python tests.py
"""

import sys
import json
import unittest
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from app import create_app, API_PREFIX
from config_logging import AppConfig, VERSION


def _make_client(**overrides):
    """Build an app with a private configuration and return its test client."""
    settings = {'log_to_console': False}
    settings.update(overrides)
    flask_app = create_app(AppConfig(**settings))
    flask_app.config['TESTING'] = True
    return flask_app.test_client()


class TestCompareEndpoint(unittest.TestCase):
    """Test POST /compare."""

    def setUp(self):
        """Set up test client."""
        self.client = _make_client()

    def _post(self, payload):
        return self.client.post(f'{API_PREFIX}/compare', json=payload)

    def test_compare_returns_diff(self):
        """
        Test a simple one-word insertion.

        Expects: 200 with success=true, one modified and one unchanged
        paragraph, words_added=1.
        """
        response = self._post({
            'original': 'The quick fox.\n\nA second paragraph.',
            'revised': 'The quick brown fox.\n\nA second paragraph.'
        })
        self.assertEqual(response.status_code, 200)
        data = json.loads(response.data)
        self.assertTrue(data['success'])

        paragraphs = data['diff']['paragraphs']
        self.assertEqual([p['alignment_type'] for p in paragraphs], ['modified', 'unchanged'])
        inserts = [op['token']['text'] for op in paragraphs[0]['operations'] if op['type'] == 'insert']
        self.assertEqual(inserts, ['brown'])
        self.assertEqual(data['diff']['stats']['words_added'], 1)
        self.assertEqual(data['diff']['stats']['words_deleted'], 0)

    def test_compare_empty_texts(self):
        """
        Test two empty texts.

        Expects: no paragraphs and all-zero statistics.
        """
        response = self._post({'original': '', 'revised': ''})
        self.assertEqual(response.status_code, 200)
        data = json.loads(response.data)
        self.assertEqual(data['diff']['paragraphs'], [])
        self.assertTrue(all(v == 0 for v in data['diff']['stats'].values()))

    def test_compare_reports_moves(self):
        """
        Test swapped paragraphs.

        Expects: paragraphs_moved=2 and moved_from set on both rows.
        """
        response = self._post({
            'original': 'First paragraph here.\n\nSecond paragraph there.',
            'revised': 'Second paragraph there.\n\nFirst paragraph here.'
        })
        data = json.loads(response.data)
        self.assertEqual(data['diff']['stats']['paragraphs_moved'], 2)
        self.assertEqual([p['moved_from'] for p in data['diff']['paragraphs']], [1, 0])

    def test_missing_field_rejected(self):
        """
        Test that both texts are required.

        Expects: 400 with VALIDATION_ERROR code.
        """
        response = self._post({'original': 'only one side'})
        self.assertEqual(response.status_code, 400)
        data = json.loads(response.data)
        self.assertFalse(data['success'])
        self.assertEqual(data['error']['code'], 'VALIDATION_ERROR')

    def test_non_string_rejected(self):
        """
        Test that texts must be strings.

        Expects: 400 with VALIDATION_ERROR code.
        """
        response = self._post({'original': 42, 'revised': 'text'})
        self.assertEqual(response.status_code, 400)

    def test_non_json_body_rejected(self):
        """
        Test that the body must be a JSON object.

        Expects: 400 with VALIDATION_ERROR code.
        """
        response = self.client.post(
            f'{API_PREFIX}/compare', data='not json', content_type='text/plain'
        )
        self.assertEqual(response.status_code, 400)
        data = json.loads(response.data)
        self.assertEqual(data['error']['code'], 'VALIDATION_ERROR')

    def test_correlation_id_header(self):
        """
        Test correlation ids flow through requests.

        Expects: a supplied X-Correlation-ID is echoed back.
        """
        response = self.client.post(
            f'{API_PREFIX}/compare',
            json={'original': 'a', 'revised': 'b'},
            headers={'X-Correlation-ID': 'test-cid-1'}
        )
        self.assertEqual(response.headers.get('X-Correlation-ID'), 'test-cid-1')


class TestInputLimits(unittest.TestCase):
    """Test the per-side size bound."""

    def test_oversized_text_rejected(self):
        """
        Test texts longer than max_text_chars.

        Expects: 400 naming the offending field.
        """
        client = _make_client(max_text_chars=10)
        response = client.post(f'{API_PREFIX}/compare', json={
            'original': 'short',
            'revised': 'this one is far too long'
        })
        self.assertEqual(response.status_code, 400)
        data = json.loads(response.data)
        self.assertIn('revised', data['error']['message'])


class TestRateLimitIntegration(unittest.TestCase):
    """Test rate limiting on the compare endpoint."""

    def test_requests_over_limit_blocked(self):
        """
        Test the limiter blocks excess requests.

        Expects: third request returns 429 with a Retry-After header.
        """
        client = _make_client(rate_limit_requests=2, rate_limit_window=60)
        payload = {'original': 'a', 'revised': 'a'}
        for _ in range(2):
            self.assertEqual(client.post(f'{API_PREFIX}/compare', json=payload).status_code, 200)

        response = client.post(f'{API_PREFIX}/compare', json=payload)
        self.assertEqual(response.status_code, 429)
        self.assertIn('Retry-After', response.headers)
        data = json.loads(response.data)
        self.assertEqual(data['error']['code'], 'RATE_LIMIT')

    def test_rate_limit_disabled(self):
        """
        Test rate limiting can be turned off.

        Expects: all requests succeed.
        """
        client = _make_client(rate_limit_enabled=False, rate_limit_requests=1)
        payload = {'original': 'a', 'revised': 'a'}
        for _ in range(3):
            self.assertEqual(client.post(f'{API_PREFIX}/compare', json=payload).status_code, 200)


class TestWordCountEndpoint(unittest.TestCase):
    """Test POST /word-count."""

    def test_word_count(self):
        """
        Test word and paragraph counting.

        Expects: punctuation-only tokens are not counted.
        """
        client = _make_client()
        response = client.post(f'{API_PREFIX}/word-count', json={
            'text': 'Hello, world! --\n\nSecond paragraph 42.'
        })
        self.assertEqual(response.status_code, 200)
        data = json.loads(response.data)
        self.assertEqual(data['words'], 5)
        self.assertEqual(data['paragraphs'], 2)


class TestHealthAndIndex(unittest.TestCase):
    """Test service metadata endpoints."""

    def setUp(self):
        self.client = _make_client()

    def test_health(self):
        """
        Test health endpoint.

        Expects: 200 with status=healthy.
        """
        response = self.client.get(f'{API_PREFIX}/health')
        self.assertEqual(response.status_code, 200)
        data = json.loads(response.data)
        self.assertEqual(data['status'], 'healthy')
        self.assertEqual(data['module'], 'paragraph_diff')

    def test_index_lists_endpoints(self):
        """
        Test root endpoint.

        Expects: version and the compare endpoint are listed.
        """
        data = json.loads(self.client.get('/').data)
        self.assertEqual(data['version'], VERSION)
        self.assertIn(f'{API_PREFIX}/compare', data['endpoints'])


class TestVersionConsistency(unittest.TestCase):
    """Test version consistency across modules."""

    def test_version_string_format(self):
        """
        Test version string is properly formatted.

        Expects: Three numeric parts separated by dots.
        """
        parts = VERSION.split('.')
        self.assertEqual(len(parts), 3)
        for part in parts:
            self.assertTrue(part.isdigit())

    def test_package_version_matches(self):
        """
        Test package version matches config.

        Expects: paragraph_diff.__version__ equals config_logging VERSION.
        """
        from paragraph_diff import __version__
        self.assertEqual(VERSION, __version__)


if __name__ == '__main__':
    unittest.main(verbosity=2)
