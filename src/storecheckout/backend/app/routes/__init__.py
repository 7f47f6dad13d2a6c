"""Blueprint registrations for application routes."""

from flask import Flask

from .checkout import blueprint as checkout_blueprint
from .orders import blueprint as orders_blueprint


def register_routes(app: Flask) -> None:
    """Register all Flask blueprints with the provided application."""

    app.register_blueprint(checkout_blueprint)
    app.register_blueprint(orders_blueprint)
