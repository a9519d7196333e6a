#!/usr/bin/env python3
"""
Website Audit Web Service

Flask app exposing the audit form endpoint.
"""

from flask import Flask

from config import configure_logging, get_settings
from repositories import configure_backend


def create_app(settings=None) -> Flask:
    """Build the Flask app and register blueprints."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    configure_backend("json", settings.data_dir)

    app = Flask(__name__)
    app.config["AUDIT_SETTINGS"] = settings

    from routes import audit_bp
    app.register_blueprint(audit_bp)

    return app


if __name__ == "__main__":
    create_app().run(debug=True, port=5001)
