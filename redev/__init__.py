"""Real-estate development store and financial engine, Flask application factory."""

from flask import Flask

from redev.config import get_global_settings, load_database_config
from redev.logging_config import setup_logging
from redev.storage import StoreFactory


def create_app() -> Flask:
    """Create and configure the Flask application.

    Initializes the process-wide store factory from settings and exposes it
    as ``app.extensions["store_factory"]``.

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    settings = get_global_settings()
    setup_logging(settings.log_level, settings.log_format)

    app.config["SECRET_KEY"] = settings.secret_key
    app.config["ENV"] = settings.app_env
    app.config["DEBUG"] = settings.app_env == "development"
    app.config["DATABASE_TYPE"] = settings.database_type

    app.extensions["store_factory"] = StoreFactory.initialize(
        load_database_config(settings)
    )

    from redev.blueprints.health import health_bp

    app.register_blueprint(health_bp)

    return app
