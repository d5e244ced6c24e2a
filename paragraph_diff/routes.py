"""
Paragraph Diff Flask Routes
===========================
API endpoints exposing the comparison engine.

v1.0.0: compare, word-count and health endpoints
"""

import time
from functools import wraps
from flask import Blueprint, request, jsonify, g, current_app

from config_logging import (
    get_logger, get_config, StructuredLogger, RateLimiter,
    ParagraphDiffError, ValidationError, RateLimitError
)

from . import __version__
from .differ import ParagraphDiffer
from .tokenizer import count_words, split_paragraphs

logger = get_logger('paragraph_diff')

pd_blueprint = Blueprint('paragraph_diff', __name__)

SLOW_CALL_SECONDS = 5.0


# =============================================================================
# STANDARDIZED ERROR HANDLING DECORATOR
# =============================================================================

def _error_response(code: str, message: str, status_code: int, details=None):
    body = {
        'success': False,
        'error': {
            'code': code,
            'message': message,
            'correlation_id': getattr(g, 'correlation_id', 'unknown')
        }
    }
    if details:
        body['error']['details'] = details
    return jsonify(body), status_code


def handle_pd_errors(f):
    """
    Decorator for standardized API error handling in Paragraph Diff routes.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        start_time = time.time()
        try:
            result = f(*args, **kwargs)

            elapsed = time.time() - start_time
            if elapsed > SLOW_CALL_SECONDS:
                logger.warning(f"Slow PD API call: {f.__name__} took {elapsed:.1f}s")

            return result

        except ValidationError as e:
            logger.warning(f"Validation error in {f.__name__}: {e}")
            return _error_response(e.code, e.message, e.status_code)
        except RateLimitError as e:
            logger.warning(f"Rate limit hit in {f.__name__}")
            response, status = _error_response(e.code, e.message, e.status_code, e.details)
            response.headers['Retry-After'] = str(e.details['retry_after'])
            return response, status
        except ParagraphDiffError as e:
            logger.error(f"Processing error in {f.__name__}: {e}")
            return _error_response(e.code, e.message, e.status_code)
        except Exception as e:
            logger.exception(f"Unexpected error in {f.__name__}: {e}")
            return _error_response('INTERNAL_ERROR', 'An unexpected error occurred', 500)

    return decorated


# =============================================================================
# REQUEST LIFECYCLE
# =============================================================================

@pd_blueprint.before_request
def assign_correlation_id():
    """Tag each request with a correlation id shared by its log records."""
    g.correlation_id = (request.headers.get('X-Correlation-ID')
                        or StructuredLogger.new_correlation_id())
    StructuredLogger.set_correlation_id(g.correlation_id)


@pd_blueprint.after_request
def add_correlation_header(response):
    response.headers['X-Correlation-ID'] = getattr(g, 'correlation_id', 'unknown')
    return response


def _config():
    """Configuration of the running app, falling back to the environment."""
    return current_app.config.get('PD_CONFIG') or get_config()


def _rate_limiter() -> RateLimiter:
    """One limiter per application, created on first use."""
    limiter = current_app.extensions.get('pd_rate_limiter')
    if limiter is None:
        config = _config()
        limiter = RateLimiter(config.rate_limit_requests, config.rate_limit_window)
        current_app.extensions['pd_rate_limiter'] = limiter
    return limiter


def _enforce_rate_limit():
    if not _config().rate_limit_enabled:
        return
    limiter = _rate_limiter()
    client = request.remote_addr or 'unknown'
    if not limiter.is_allowed(client):
        raise RateLimitError(retry_after=limiter.get_retry_after(client))


def _get_text_field(data: dict, name: str) -> str:
    """Pull one text field out of the JSON body and bound its size."""
    value = data.get(name)
    if not isinstance(value, str):
        raise ValidationError(f"'{name}' must be a string", field=name)

    limit = _config().max_text_chars
    if len(value) > limit:
        raise ValidationError(
            f"'{name}' exceeds the maximum of {limit} characters", field=name
        )
    return value


def _get_json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


# =============================================================================
# ENDPOINTS
# =============================================================================

@pd_blueprint.route('/compare', methods=['POST'])
@handle_pd_errors
def compare_texts():
    """
    Compare two texts and return the paragraph-aligned word diff.

    Request body:
        { original: str, revised: str }

    Returns:
        {
            success: true,
            diff: {
                paragraphs: [...],
                stats: { words_original, words_revised, words_added,
                         words_deleted, words_unchanged, paragraphs_moved }
            }
        }
    """
    _enforce_rate_limit()
    data = _get_json_body()
    original = _get_text_field(data, 'original')
    revised = _get_text_field(data, 'revised')

    result = ParagraphDiffer().compare(original, revised)

    logger.info(
        f"Computed paragraph diff: {len(result.paragraphs)} paragraphs, "
        f"+{result.stats.words_added} -{result.stats.words_deleted}"
    )

    return jsonify({
        'success': True,
        'diff': result.to_dict()
    })


@pd_blueprint.route('/word-count', methods=['POST'])
@handle_pd_errors
def word_count():
    """
    Count words and paragraphs in one text.

    Request body:
        { text: str }
    """
    data = _get_json_body()
    text = _get_text_field(data, 'text')

    return jsonify({
        'success': True,
        'words': count_words(text),
        'paragraphs': len(split_paragraphs(text))
    })


@pd_blueprint.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'success': True,
        'module': 'paragraph_diff',
        'version': __version__,
        'status': 'healthy'
    })
