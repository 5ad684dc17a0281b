"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: MIT-0
"""
import os

from flask import Flask

from . import config
from .logs import configure_logging
from .resources.kube import load_resource_clients
from .routes import ClientFactory, create_routes

settings = config.load()
log = configure_logging(settings.log_format, settings.log_level)


def log_settings(app_settings: config.Settings) -> None:
    log.info(
        "Set environment variables: %s",
        " ".join(f"{k}={v}" for k, v in app_settings.as_log_fields().items()),
    )


# Logged at import so gunicorn-served workers report their settings too
log_settings(settings)


def create_app(
    app_settings: config.Settings,
    client_factory: ClientFactory = load_resource_clients,
) -> Flask:
    flask_app = Flask(__name__)
    flask_app.register_blueprint(create_routes(app_settings, client_factory))
    return flask_app


app = create_app(settings)


def main() -> None:
    for path in (settings.tls_cert_file, settings.tls_key_file):
        if not os.path.isfile(path):
            log.error("TLS file not found at %s", path)
    log.info("Listening on port %s...", settings.port)
    app.run(
        host="0.0.0.0",
        port=settings.port,
        ssl_context=(settings.tls_cert_file, settings.tls_key_file),
        threaded=True,
    )


if __name__ == "__main__":
    main()
