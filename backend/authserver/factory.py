"""Application factory for the OAuth2 token server."""

from __future__ import annotations

from flask import Flask

from authserver.core.config import BaseConfig, get_config
from authserver.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Return an app with the token services, the OAuth API and the CLI attached.

    ``config`` is anything :meth:`flask.Config.from_object` accepts, or ``None``
    to select a class from ``APP_ENV``. An optional instance file can
    override individual keys (for example ``JWT_SECRET_KEY``).
    """
    from authserver import cli
    from authserver.api import init_app as init_api
    from authserver.core import errors, extensions

    app = Flask(__name__, instance_relative_config=instance_relative_config)
    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))
    # services first: blueprints and the CLI resolve them lazily per call
    extensions.init_app(app)
    init_logging(app)
    init_api(app)
    errors.init_app(app)
    cli.init_app(app)
    return app
