"""Development server entry point (``storecheckout-server``)."""

from __future__ import annotations

import logging

from storecheckout.backend.app import create_app
from storecheckout.backend.config.settings import load_settings

logger = logging.getLogger(__name__)


def main() -> int:
    """Run the Flask development server on the configured ``PORT``."""

    settings = load_settings()
    app = create_app(settings)
    logger.info("Payment server running on http://localhost:%d", settings.port)
    app.run(host="0.0.0.0", port=settings.port)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
