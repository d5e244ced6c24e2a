#!/usr/bin/env python3
"""
Paragraph Diff Configuration & Logging Module
=============================================
Centralized configuration, structured logging, error types and the
in-memory rate limiter used by the HTTP surface.

Version: module v1.0
"""

import os
import sys
import json
import logging
import uuid
import time
import threading
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from pathlib import Path
from dataclasses import dataclass, field
from contextlib import contextmanager

# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================
DEFAULT_MAX_TEXT_CHARS = 1_000_000    # Per-side input bound for the API
DEFAULT_RATE_LIMIT_REQUESTS = 100     # Default requests per window
DEFAULT_RATE_LIMIT_WINDOW = 60        # Default window in seconds
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024  # 5MB max per log file
LOG_BACKUP_COUNT = 5                  # Number of log backup files to keep
ENV_PREFIX = 'PDIFF_'

__version__ = '1.0.0'
VERSION = __version__
APP_NAME = "ParagraphDiff"


def _env(name: str, default: str) -> str:
    return os.environ.get(ENV_PREFIX + name, default)


def _env_flag(name: str, default: bool) -> bool:
    return _env(name, 'true' if default else 'false').lower() == 'true'


# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================

@dataclass
class AppConfig:
    """Application configuration with safe defaults."""

    # Server settings
    host: str = "127.0.0.1"
    port: int = 5060
    debug: bool = False

    # Input bounds (compare is quadratic in the worst case)
    max_text_chars: int = DEFAULT_MAX_TEXT_CHARS

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_requests: int = DEFAULT_RATE_LIMIT_REQUESTS
    rate_limit_window: int = DEFAULT_RATE_LIMIT_WINDOW  # seconds

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # Options: json, text
    log_to_file: bool = False
    log_to_console: bool = True
    log_dir: Path = field(default_factory=lambda: Path.cwd() / 'logs')

    def __post_init__(self):
        """Prepare the log directory and apply production overrides."""
        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        if os.environ.get(ENV_PREFIX + 'ENV', 'development').lower() == 'production':
            self.debug = False
            self.log_level = "WARNING"

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Load configuration from PDIFF_* environment variables."""
        return cls(
            host=_env('HOST', '127.0.0.1'),
            port=int(_env('PORT', '5060')),
            debug=_env_flag('DEBUG', False),
            max_text_chars=int(_env('MAX_TEXT_CHARS', str(DEFAULT_MAX_TEXT_CHARS))),
            rate_limit_enabled=_env_flag('RATE_LIMIT', True),
            rate_limit_requests=int(_env('RATE_LIMIT_REQUESTS', str(DEFAULT_RATE_LIMIT_REQUESTS))),
            rate_limit_window=int(_env('RATE_LIMIT_WINDOW', str(DEFAULT_RATE_LIMIT_WINDOW))),
            log_level=_env('LOG_LEVEL', 'INFO'),
            log_format=_env('LOG_FORMAT', 'json'),
            log_to_file=_env_flag('LOG_TO_FILE', False),
            log_to_console=_env_flag('LOG_TO_CONSOLE', True),
            log_dir=Path(_env('LOG_DIR', str(Path.cwd() / 'logs'))),
        )

    def validate(self) -> tuple:
        """Validate configuration and return (is_valid, errors)."""
        errors = []

        if self.debug and os.environ.get(ENV_PREFIX + 'ENV') == 'production':
            errors.append("Debug mode cannot be enabled in production")

        if self.max_text_chars <= 0:
            errors.append("max_text_chars must be positive")

        if self.rate_limit_requests <= 0 or self.rate_limit_window <= 0:
            errors.append("Rate limit requests and window must be positive")

        if self.log_format not in ('json', 'text'):
            errors.append(f"Invalid log_format: {self.log_format}. Must be 'json' or 'text'")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            errors.append(f"Invalid log_level: {self.log_level}")

        return (len(errors) == 0, errors)


# Global config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create the global configuration."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config():
    """Reset the global configuration (for testing)."""
    global _config
    _config = None


# =============================================================================
# STRUCTURED LOGGING
# =============================================================================

class StructuredLogger:
    """Thread-safe structured JSON logger with correlation IDs."""

    _local = threading.local()

    def __init__(self, name: str, config: Optional[AppConfig] = None):
        self.name = name
        self.config = config or get_config()
        self._setup_logger()

    def _setup_logger(self):
        """Configure the underlying Python logger."""
        self.logger = logging.getLogger(self.name)
        self.logger.setLevel(getattr(logging, self.config.log_level.upper(), logging.INFO))
        self.logger.handlers.clear()
        # Handlers are attached per logger; parents must not print records twice
        self.logger.propagate = False

        if self.config.log_format == 'json':
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s [%(levelname)s] %(name)s - %(message)s'
            )

        if self.config.log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if self.config.log_to_file:
            from logging.handlers import RotatingFileHandler
            log_file = self.config.log_dir / f"{self.name.lower()}.log"
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    @classmethod
    def set_correlation_id(cls, correlation_id: str):
        """Set correlation ID for current thread."""
        cls._local.correlation_id = correlation_id

    @classmethod
    def get_correlation_id(cls) -> str:
        """Get correlation ID for current thread."""
        return getattr(cls._local, 'correlation_id', None) or str(uuid.uuid4())[:8]

    @classmethod
    def new_correlation_id(cls) -> str:
        """Generate and set a new correlation ID."""
        correlation_id = str(uuid.uuid4())[:12]
        cls.set_correlation_id(correlation_id)
        return correlation_id

    def _emit(self, level: int, message: str, exc_info: bool = False, **kwargs):
        """Send one record to the underlying logger.

        In json mode the structured fields travel as ``extra`` so the
        JsonFormatter can lift them into the output object.
        """
        if not self.logger.isEnabledFor(level):
            return
        extra = {'correlation_id': self.get_correlation_id(), **kwargs}
        self.logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self._emit(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self._emit(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self._emit(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log error message with optional exception info."""
        self._emit(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log exception with full traceback."""
        self.error(message, exc_info=True, **kwargs)

    @contextmanager
    def log_operation(self, operation: str, **context):
        """Context manager for logging operation start/end with timing."""
        start_time = time.perf_counter()
        self.debug(f"{operation} started", operation=operation, status='started', **context)
        try:
            yield
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self.error(f"{operation} failed: {e}", operation=operation, status='failed',
                       duration_ms=round(duration_ms, 2), exc_info=True, **context)
            raise
        duration_ms = (time.perf_counter() - start_time) * 1000
        self.debug(f"{operation} completed", operation=operation, status='completed',
                   duration_ms=round(duration_ms, 2), **context)


_RESERVED_RECORD_KEYS = frozenset((
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'thread', 'threadName', 'exc_info', 'exc_text',
    'message', 'taskName',
))


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc)
                                 .isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            log_data['traceback'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


_loggers: Dict[str, StructuredLogger] = {}
_loggers_lock = threading.Lock()


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance, one per name."""
    with _loggers_lock:
        logger = _loggers.get(name)
        if logger is None:
            logger = StructuredLogger(name, get_config())
            _loggers[name] = logger
        return logger


def reset_loggers():
    """Drop cached loggers so they pick up a fresh configuration (for testing)."""
    with _loggers_lock:
        _loggers.clear()


# =============================================================================
# ERROR HANDLING
# =============================================================================

class ParagraphDiffError(Exception):
    """Base exception for the paragraph diff service."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR",
                 status_code: int = 500, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response dict."""
        return {
            'success': False,
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details
            }
        }


class ValidationError(ParagraphDiffError):
    """Input validation error."""
    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400,
                         details={'field': field, **kwargs})


class ProcessingError(ParagraphDiffError):
    """Comparison processing error."""
    def __init__(self, message: str, stage: Optional[str] = None, **kwargs):
        super().__init__(message, code="PROCESSING_ERROR", status_code=500,
                         details={'stage': stage, **kwargs})


class RateLimitError(ParagraphDiffError):
    """Rate limit exceeded."""
    def __init__(self, retry_after: int = 60, **kwargs):
        super().__init__("Rate limit exceeded", code="RATE_LIMIT", status_code=429,
                         details={'retry_after': retry_after, **kwargs})


# =============================================================================
# RATE LIMITING
# =============================================================================

class RateLimiter:
    """Sliding-window in-memory rate limiter keyed by client."""

    def __init__(self, max_requests: int = DEFAULT_RATE_LIMIT_REQUESTS,
                 window_seconds: int = DEFAULT_RATE_LIMIT_WINDOW):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: Dict[str, list] = {}
        self._lock = threading.Lock()

    def _prune(self, key: str, now: float) -> list:
        recent = [t for t in self._requests.get(key, []) if now - t < self.window_seconds]
        self._requests[key] = recent
        return recent

    def is_allowed(self, key: str) -> bool:
        """Record a request for key and report whether it fits in the window."""
        now = time.time()
        with self._lock:
            recent = self._prune(key, now)
            if len(recent) >= self.max_requests:
                return False
            recent.append(now)
            return True

    def get_retry_after(self, key: str) -> int:
        """Get seconds until the oldest request for key leaves the window."""
        with self._lock:
            stamps = self._requests.get(key)
            if not stamps:
                return 0
            oldest = min(stamps)
        return max(1, int(self.window_seconds - (time.time() - oldest)))

    def reset(self, key: Optional[str] = None):
        """Reset rate limit for a key or all keys."""
        with self._lock:
            if key:
                self._requests.pop(key, None)
            else:
                self._requests.clear()

