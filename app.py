"""
Paragraph Diff Service - Main Flask Application
Serves the comparison engine over a small JSON API.
"""
from flask import Flask, jsonify

from config_logging import get_config, get_logger, APP_NAME, VERSION
from paragraph_diff.routes import pd_blueprint

logger = get_logger('app')

API_PREFIX = '/api/paragraph-diff'


def create_app(config=None) -> Flask:
    """Build the Flask application with the paragraph diff blueprint mounted."""
    config = config or get_config()

    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            logger.warning(f"Configuration problem: {error}")

    flask_app = Flask(__name__)
    flask_app.config['DEBUG'] = config.debug
    flask_app.config['PD_CONFIG'] = config
    # JSON bodies carry both texts plus escaping overhead
    flask_app.config['MAX_CONTENT_LENGTH'] = config.max_text_chars * 2 * 6 + 1024
    flask_app.json.sort_keys = False

    flask_app.register_blueprint(pd_blueprint, url_prefix=API_PREFIX)

    @flask_app.route('/')
    def index():
        """Describe the service"""
        return jsonify({
            'name': APP_NAME,
            'version': VERSION,
            'endpoints': [
                f'{API_PREFIX}/compare',
                f'{API_PREFIX}/word-count',
                f'{API_PREFIX}/health'
            ]
        })

    return flask_app


app = create_app()


if __name__ == '__main__':
    config = get_config()
    logger.info(f"Starting {APP_NAME} v{VERSION} on {config.host}:{config.port}")
    app.run(host=config.host, port=config.port, debug=config.debug)
