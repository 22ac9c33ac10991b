"""
Flask web surface for This or That.

Serves the single page and a small JSON API over the session controller.
One controller is kept per browser session (cookie session id).
"""
import logging
import os
import uuid
from typing import Callable, Optional

from flask import Flask, jsonify, render_template, request, session
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException

from .categories import Category
from .config import ThisOrThatConfig
from .exceptions import ConfigurationError, ValidationError
from .gemini_client import GeminiClient
from .session import Session, SessionController, SessionRegistry
from .session.controller import GenerationClient

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[ThisOrThatConfig] = None,
    client_factory: Optional[Callable[[], GenerationClient]] = None,
) -> Flask:
    """
    Build the Flask application.

    If the Gemini client cannot be built (missing or invalid API key) the app
    still starts, shows the configuration error, and answers every API call
    with 503 without touching the network.

    :param config: Application configuration (defaults to ThisOrThatConfig())
    :param client_factory: Builds the generation client; defaults to GeminiClient.from_config
    :return: Configured Flask app
    """
    config = config or ThisOrThatConfig()

    app = Flask(__name__)
    app.secret_key = config.secret_key or os.urandom(32).hex()

    config_error: Optional[str] = None
    if client_factory is None:
        try:
            client = GeminiClient.from_config(config)
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            config_error = str(e)
            client = None

        def client_factory() -> GenerationClient:
            return client

    registry = SessionRegistry(
        client_factory,
        default_category=config.default_category,
        max_sessions=config.max_sessions,
    )
    limiter = Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=["300 per hour"],
        storage_uri="memory://",
        enabled=config.rate_limit_enabled,
    )
    # Flask-Limiter only keeps a weak reference to itself on the app
    app.extensions["this_or_that"] = {
        "config": config,
        "registry": registry,
        "limiter": limiter,
        "config_error": config_error,
    }

    def _session_id() -> str:
        if "session_id" not in session:
            session["session_id"] = str(uuid.uuid4())
        return session["session_id"]

    def _controller() -> SessionController:
        return registry.get_controller(_session_id())

    def _config_error_response():
        return jsonify({"error": config_error}), 503

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        logger.warning(f"Input validation failed: {e}")
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        if e.code == 429:
            logger.warning(f"Rate limit exceeded - Path: {request.path}, Limit: {e.description}")
            return jsonify({"error": f"Too many requests ({e.description}). Please wait a moment and try again."}), 429
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return jsonify({"error": str(e)}), 500

    @app.route("/")
    def index():
        """Serve main UI."""
        return render_template(
            "index.html",
            title=config.title,
            categories=Category.labels(),
            default_category=config.default_category.value,
            config_error=config_error,
        )

    @app.route("/api/state")
    def state():
        if config_error:
            return _config_error_response()
        if "session_id" not in session:
            return jsonify(Session(selected_category=config.default_category).to_dict())
        return jsonify(_controller().snapshot())

    @app.route("/api/load", methods=["POST"])
    def load():
        if config_error:
            return _config_error_response()
        controller = _controller()
        logger.info(f"Load - Session: {_session_id()}")
        controller.ensure_loaded()
        return jsonify(controller.snapshot())

    @app.route("/api/category", methods=["POST"])
    def select_category():
        if config_error:
            return _config_error_response()
        data = request.get_json(silent=True) or {}
        if "category" not in data:
            raise ValidationError("Missing 'category' in request body")

        category = Category.from_label(data["category"])
        controller = _controller()
        logger.info(f"Select category - Session: {_session_id()}, Category: {category.value}")
        controller.select_category(category)
        return jsonify(controller.snapshot())

    @app.route("/api/next", methods=["POST"])
    @limiter.limit(config.next_rate_limit)
    def next_round():
        if config_error:
            return _config_error_response()
        controller = _controller()
        logger.info(f"Next - Session: {_session_id()}, Category: {controller.session.selected_category.value}")
        controller.request_next()
        return jsonify(controller.snapshot())

    @app.route("/api/previous", methods=["POST"])
    def previous_round():
        if config_error:
            return _config_error_response()
        controller = _controller()
        logger.info(f"Previous - Session: {_session_id()}")
        controller.request_previous()
        return jsonify(controller.snapshot())

    @app.route("/api/reset", methods=["POST"])
    def reset():
        """Drop the session's rounds and start over."""
        if config_error:
            return _config_error_response()
        controller = _controller()
        controller.reset(config.default_category)
        logger.info(f"Cleared session - Session: {_session_id()}")
        return jsonify(controller.snapshot())

    return app
