# listing_critic/api/server.py
"""
Flask Application Factory

Creates and configures the JSON API around the listing pipeline.
"""

from __future__ import annotations

import logging
from typing import Any

from flask import Flask

from listing_critic.api.routes import EXTENSION_KEY, register_routes
from listing_critic.config import Settings, load_settings
from listing_critic.core.ai import AreaAverageService, TextModel, build_text_model
from listing_critic.logging_config import setup_logging
from listing_critic.tools.listing_pipeline import build_area_service

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def create_app(
    settings: Settings | None = None,
    *,
    model: TextModel | None = _UNSET,
    area_service: AreaAverageService | None = _UNSET,
    test_config: dict[str, Any] | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        settings:     Runtime settings; loaded from the environment when omitted.
        model:        Text model override (tests pass fakes; None disables the LLM).
        area_service: Area-average service override.
        test_config:  Optional Flask config overrides.

    Returns:
        Configured Flask application.
    """
    settings = settings or load_settings()
    setup_logging("DEBUG" if settings.debug else settings.log_level, settings.log_file)

    if model is _UNSET:
        model = build_text_model(settings)
    if area_service is _UNSET:
        area_service = build_area_service(settings, model)

    app = Flask(__name__)
    app.config["DEBUG"] = settings.debug
    app.json.sort_keys = False
    if test_config:
        app.config.update(test_config)

    app.extensions[EXTENSION_KEY] = {
        "settings": settings,
        "policy": settings.fetch_policy(),
        "model": model,
        "area_service": area_service,
    }

    register_routes(app)

    logger.info("Flask app created (llm=%s)", "on" if model is not None else "off")
    return app


def run_server(host: str | None = None, port: int | None = None, debug: bool | None = None) -> None:
    """Run the Flask development server."""
    settings = load_settings()

    host = host or settings.api_host
    port = port or settings.api_port
    debug = debug if debug is not None else settings.debug

    app = create_app(settings)

    logger.info("Starting server on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug)


def main() -> int:
    run_server()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
