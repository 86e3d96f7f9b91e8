"""Application factory wiring Flask extensions, services and blueprints."""

from __future__ import annotations

from flask import Flask

from socialnet.core.config import BaseConfig, get_config
from socialnet.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application."""

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Proxy headers if running behind a reverse proxy
    from socialnet.core import proxy

    proxy.init_app(app)

    from socialnet.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from socialnet.core import cors

    cors.init_app(app)

    from socialnet.core import services

    services.init_app(app)

    from socialnet.api import init_app as init_api

    init_api(app)

    from socialnet.core import errors

    errors.init_app(app)

    return app
