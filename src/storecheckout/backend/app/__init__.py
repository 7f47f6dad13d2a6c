"""Application factory for the storefront checkout backend."""

from __future__ import annotations

import logging
import time
from http import HTTPStatus

from flask import Flask, Response, jsonify, request
from flask.typing import ResponseReturnValue
from flask_cors import CORS
from werkzeug.exceptions import BadRequest, InternalServerError

from storecheckout.backend.config.catalog import Catalog, load_catalog
from storecheckout.backend.config.settings import Settings, load_settings
from storecheckout.backend.logging_config import configure_logging
from storecheckout.backend.version import get_service_version

from .errors import ProcessorUnavailableError
from .http import CHECKOUT_EXTENSION, problem_response
from .routes import register_routes
from .services.checkout_service import CheckoutService
from .services.processor import PaymentProcessor, StripeProcessor

logger = logging.getLogger(__name__)


def _install_origin_guard(app: Flask, allowed_origins: frozenset[str]) -> None:
    """Reject requests whose ``Origin`` is not allow-listed before any route runs."""

    @app.before_request
    def _reject_disallowed_origin() -> ResponseReturnValue | None:
        origin = request.headers.get("Origin")
        if not origin or origin in allowed_origins:
            return None
        logger.warning("Rejected %s %s from origin %s", request.method, request.path, origin)
        return problem_response(
            f"Origin not allowed: {origin}", status=HTTPStatus.FORBIDDEN
        ).to_response()


def create_app(
    settings: Settings | None = None,
    *,
    processor: PaymentProcessor | None = None,
    catalog: Catalog | None = None,
) -> Flask:
    """Create and configure the Flask application instance."""

    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_level)

    app = Flask(__name__)

    if not settings.allowed_origins:
        logger.warning(
            "No allowed origins configured; cross-origin requests will be rejected."
        )
    logger.info("CORS allowed from: %s", sorted(settings.allowed_origins))

    if not settings.stripe_secret_key and processor is None:
        logger.warning("STRIPE_SECRET_KEY is not set; processor calls will fail.")

    _install_origin_guard(app, settings.allowed_origins)
    CORS(
        app,
        resources={r"/*": {"origins": sorted(settings.allowed_origins)}},
        supports_credentials=False,
        methods=["GET", "OPTIONS", "POST"],
        allow_headers=["Content-Type"],
    )

    if catalog is None:
        catalog = load_catalog()
    if processor is None:
        processor = StripeProcessor(
            settings.stripe_secret_key, timeout=settings.processor_timeout
        )

    app.extensions[CHECKOUT_EXTENSION] = CheckoutService(
        catalog=catalog,
        processor=processor,
        store_name=settings.store_name,
    )

    register_routes(app)

    @app.route("/", methods=["GET"])
    def liveness() -> Response:
        """Plain-text liveness string."""

        return Response(f"{settings.store_name} API is up", mimetype="text/plain")

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        return jsonify(
            {
                "ok": True,
                "ts": int(time.time() * 1000),
                "version": get_service_version(),
            }
        )

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed payloads."""

        message = error.description or "Invalid request"
        return problem_response(message, status=HTTPStatus.BAD_REQUEST).to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        """Surface request validation errors (missing fields, unknown SKUs) to clients."""

        return problem_response(str(error), status=HTTPStatus.BAD_REQUEST).to_response()

    @app.errorhandler(ProcessorUnavailableError)
    def handle_processor_unavailable(error: ProcessorUnavailableError):
        """Timeouts and connection failures are reported as a distinct 5xx."""

        return problem_response(
            error.message, status=HTTPStatus.SERVICE_UNAVAILABLE
        ).to_response()

    @app.errorhandler(InternalServerError)
    def handle_internal_error(error: InternalServerError):
        """Hide unexpected failures behind a generic JSON message."""

        return problem_response(
            "Server error", status=HTTPStatus.INTERNAL_SERVER_ERROR
        ).to_response()

    return app
