"""
API gateway: serves the caption blueprint plus health checks.
This is the entrypoint for local development and deployment.
"""

import logging
from typing import Any, Optional

from flask import Flask, jsonify
from flask_cors import CORS

from backend.caption_service.config import CaptionSettings, load_settings
from backend.caption_service.openrouter_client import OpenRouterClient
from backend.caption_service.routes import (
    CLIENT_EXTENSION,
    SETTINGS_EXTENSION,
    caption_bp,
    error_response,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(levelname)s] %(asctime)s - %(message)s"


def configure_logging(level: str) -> None:
    """Basic console logging during API requests."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def create_app(settings: Optional[CaptionSettings] = None, client: Any = None) -> Flask:
    """
    Application factory for creating the Flask app.

    Args:
        settings (CaptionSettings, optional): Defaults to settings loaded from
            the environment and .env.
        client (optional): Anything with generate(prompt) -> str. Defaults to an
            OpenRouterClient built from settings.

    Returns:
        Flask: The configured Flask application.
    """
    if settings is None:
        settings = load_settings()
    if client is None:
        client = OpenRouterClient(settings)

    app = Flask(__name__)
    CORS(app, resources={
        r"/*": {
            "origins": list(settings.cors_origins),
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type"],
        }
    })

    app.extensions[SETTINGS_EXTENSION] = settings
    app.extensions[CLIENT_EXTENSION] = client

    # --- REGISTER BLUEPRINTS ---
    app.register_blueprint(caption_bp)

    # --- BASIC HEALTH CHECKPOINTS ---
    @app.route("/")
    def ping():
        """
        Root URL for simple 'online' check.
        """
        return jsonify({"status": "gateway_ok"}), 200

    @app.route("/health")
    def health():
        """
        Health check endpoint.
        """
        return jsonify({"status": "ok"}), 200

    # --- JSON ERROR ENVELOPES ---
    @app.errorhandler(404)
    def not_found(error):
        return error_response("Not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response("Method not allowed", 405)

    return app


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)

    # never log any part of the key itself
    if settings.api_key_configured:
        logger.info("OPENROUTER_API_KEY is configured.")
    else:
        logger.warning("OPENROUTER_API_KEY is not set. Caption requests will fail until it is configured.")

    app = create_app(settings)
    logger.info(f"Server running on port {settings.port}")
    app.run(host="0.0.0.0", port=settings.port, threaded=True)


if __name__ == "__main__":
    main()
