"""
Career card builder backend
"""
import logging

from flask import Flask

from careercard.extensions import init_app_extensions
from careercard.logging_config import configure_logging
from careercard.routes import (
    career_cards_bp,
    health_bp,
    portfolio_bp,
    resume_bp,
    scoring_bp,
)
from careercard.utils.exceptions import register_error_handlers

__version__ = "1.0.0"

logger = logging.getLogger(__name__)


def create_app(config=None) -> Flask:
    """
    Application factory.

    ``config`` overrides are applied before the extensions are initialized, so
    ``{"TESTING": True}`` skips Firebase and ``{"RATELIMIT_ENABLED": False}``
    turns the limiter off.
    """
    configure_logging()

    app = Flask(__name__)
    app.json.sort_keys = False
    if config:
        app.config.update(config)

    init_app_extensions(app)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(resume_bp)
    app.register_blueprint(portfolio_bp)
    app.register_blueprint(scoring_bp)
    app.register_blueprint(career_cards_bp)

    logger.info("Career card backend initialized")
    return app
