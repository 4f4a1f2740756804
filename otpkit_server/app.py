"""
app.py - Flask application factory and entry point for the otpkit API.

- create_app() builds the app, enables CORS and registers the /api routes
- OtpError -> 400, werkzeug HTTP errors -> their own status, both as JSON
- main() runs the development server with the configured host / port

Run:
    otpkit-server
    OTPKIT_PORT=8000 otpkit-server
"""

import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from otpkit.errors import AlgorithmUnavailable, OtpError

from .config import Config
from .routes import otp_bp

logger = logging.getLogger(__name__)


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, app.config["LOG_LEVEL"], logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    app.logger.setLevel(level)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(OtpError)
    def handle_otp_error(e):
        logger.warning("Rejected request: %s", type(e).__name__)
        return jsonify({"error": str(e), "type": type(e).__name__}), 400

    @app.errorhandler(AlgorithmUnavailable)
    def handle_algorithm_unavailable(e):
        logger.error("Hash algorithm unavailable: %s", e)
        return jsonify({"error": str(e), "type": type(e).__name__}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code


def create_app(config_object=Config) -> Flask:
    """
    Build the Flask app.

    Arguments:
        config_object: class or object whose UPPERCASE attributes become
            app.config (default: Config, read from the environment)
    """
    app = Flask(__name__)
    app.config.from_object(config_object)
    _configure_logging(app)

    # Let a frontend on another origin call the API
    CORS(app, origins=app.config["CORS_ORIGINS"])

    app.register_blueprint(otp_bp)
    _register_error_handlers(app)

    @app.route("/", methods=["GET"])
    def index():
        return jsonify({
            "service": "otpkit",
            "endpoints": sorted(
                str(rule) for rule in app.url_map.iter_rules() if str(rule).startswith("/api/")
            ),
        })

    return app


def main() -> None:
    app = create_app()
    logger.info("Starting otpkit API on %s:%s", app.config["HOST"], app.config["PORT"])
    app.run(debug=app.config["DEBUG"], host=app.config["HOST"], port=app.config["PORT"])


if __name__ == "__main__":
    main()
