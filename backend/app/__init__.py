"""Application factory and app-wide configuration."""

import logging

from flask import Flask
from flask_cors import CORS

from backend.app.api.routes import api_bp
from backend.config import get_settings


def create_app() -> Flask:
    """Build the Flask app instance."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.cors_origins}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
