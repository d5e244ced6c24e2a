"""
Tests for configuration, structured logging and error types
===========================================================
"""

import json
import logging

import pytest

from config_logging import (
    AppConfig, JsonFormatter, RateLimiter, StructuredLogger,
    ValidationError, RateLimitError, ParagraphDiffError,
    get_config, reset_config, get_logger, reset_loggers,
)


@pytest.fixture(autouse=True)
def clean_config():
    reset_config()
    yield
    reset_config()


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults_are_valid(self):
        is_valid, errors = AppConfig().validate()
        assert is_valid
        assert errors == []

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('PDIFF_PORT', '8123')
        monkeypatch.setenv('PDIFF_MAX_TEXT_CHARS', '500')
        monkeypatch.setenv('PDIFF_RATE_LIMIT', 'false')
        monkeypatch.setenv('PDIFF_LOG_FORMAT', 'text')
        config = AppConfig.from_env()
        assert config.port == 8123
        assert config.max_text_chars == 500
        assert config.rate_limit_enabled is False
        assert config.log_format == 'text'

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_invalid_values_reported(self):
        config = AppConfig(max_text_chars=0, log_format='xml', log_level='LOUD')
        is_valid, errors = config.validate()
        assert not is_valid
        assert len(errors) == 3

    def test_production_forces_debug_off(self, monkeypatch):
        monkeypatch.setenv('PDIFF_ENV', 'production')
        config = AppConfig(debug=True)
        assert config.debug is False
        assert config.log_level == 'WARNING'

    def test_log_dir_created_only_for_file_logging(self, tmp_path):
        AppConfig(log_dir=tmp_path / 'quiet')
        assert not (tmp_path / 'quiet').exists()
        AppConfig(log_dir=tmp_path / 'logs', log_to_file=True)
        assert (tmp_path / 'logs').is_dir()


class TestStructuredLogging:
    """Tests for StructuredLogger and JsonFormatter."""

    def test_json_formatter_includes_extra_fields(self):
        record = logging.LogRecord('pd.test', logging.INFO, __file__, 1, 'hello %s', ('world',), None)
        record.operation = 'compare'
        data = json.loads(JsonFormatter().format(record))
        assert data['message'] == 'hello world'
        assert data['level'] == 'INFO'
        assert data['operation'] == 'compare'

    def test_get_logger_reuses_instances(self):
        reset_loggers()
        assert get_logger('pd.cache') is get_logger('pd.cache')

    def test_correlation_id(self):
        cid = StructuredLogger.new_correlation_id()
        assert StructuredLogger.get_correlation_id() == cid

    def test_log_operation_reraises(self):
        logger = StructuredLogger('pd.ops', AppConfig(log_to_console=False))
        with pytest.raises(RuntimeError):
            with logger.log_operation('explode'):
                raise RuntimeError('boom')

    def test_file_logging(self, tmp_path):
        config = AppConfig(log_dir=tmp_path, log_to_file=True, log_to_console=False)
        logger = StructuredLogger('pd.file', config)
        logger.info('written to disk', answer=42)
        for handler in logger.logger.handlers:
            handler.flush()
        line = (tmp_path / 'pd.file.log').read_text(encoding='utf-8').strip()
        data = json.loads(line)
        assert data['message'] == 'written to disk'
        assert data['answer'] == 42
        for handler in list(logger.logger.handlers):
            handler.close()
            logger.logger.removeHandler(handler)


class TestErrors:
    """Tests for the error hierarchy."""

    def test_validation_error(self):
        err = ValidationError("bad input", field='original')
        assert isinstance(err, ParagraphDiffError)
        assert err.status_code == 400
        assert err.to_dict()['error']['details']['field'] == 'original'

    def test_rate_limit_error(self):
        err = RateLimitError(retry_after=12)
        assert err.status_code == 429
        assert err.details['retry_after'] == 12


class TestRateLimiter:
    """Tests for RateLimiter."""

    def test_blocks_excess_requests(self):
        limiter = RateLimiter(max_requests=3, window_seconds=60)
        for _ in range(3):
            assert limiter.is_allowed('client')
        assert not limiter.is_allowed('client')
        assert limiter.is_allowed('other')

    def test_retry_after(self):
        limiter = RateLimiter(max_requests=1, window_seconds=60)
        limiter.is_allowed('client')
        limiter.is_allowed('client')
        assert 0 < limiter.get_retry_after('client') <= 60
        assert limiter.get_retry_after('unknown') == 0

    def test_reset(self):
        limiter = RateLimiter(max_requests=1, window_seconds=60)
        limiter.is_allowed('client')
        limiter.reset('client')
        assert limiter.is_allowed('client')
