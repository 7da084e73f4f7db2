# /app/__init__.py
import logging
import os

from dotenv import load_dotenv
from flask import Flask

from app.routes import schedule_bp
from config import ProductionConfig
from services.config_service import ConfigManager

load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def init_sentry():
    """Send errors to Sentry when SENTRY_DSN is set; a no-op otherwise."""
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return

    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    from sentry_sdk.integrations.logging import LoggingIntegration

    environment = os.getenv("FLASK_ENV") or os.getenv("ENV") or "development"
    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            integrations=[
                FlaskIntegration(),
                # INFO logs become breadcrumbs, ERROR logs (skills sheet failures, upstream errors) become events
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            ],
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
            attach_stacktrace=True,
            debug=os.getenv("SENTRY_DEBUG", "0") == "1",
        )
    except Exception as e:
        logging.error(f"Failed to initialize Sentry: {e}")
        return
    logging.info(f"Sentry initialized for environment: {environment}")


def create_app(config_name: str = "", schedule_service=None):
    """
    Build the API app.

    ``config_name`` picks a class from config.py ("Development", "Testing").
    config.json is merged on top, so its "schedule" section is visible to
    get_cfg() through app.config as well. ``schedule_service`` replaces the
    ScheduleService the routes would otherwise build from config.
    """
    init_sentry()

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(ProductionConfig)
    if config_name:
        app.config.from_object(f"config.{config_name}Config")
    app.config.update(ConfigManager().config)

    logging.basicConfig(
        level=logging.DEBUG if app.config.get("DEBUG") else logging.INFO,
        format=LOG_FORMAT,
        force=True,
    )

    if schedule_service is not None:
        app.extensions["schedule_service"] = schedule_service

    # rep fields keep their model order in responses
    app.json.sort_keys = False

    app.register_blueprint(schedule_bp)
    return app
