"""
Form Coach Server
=================

Main entry point for the Flask server.

Usage:
    python run.py

Or with gunicorn:
    gunicorn -w 4 -b 0.0.0.0:5000 "run:create_app()"
"""

import logging
import os
import sys

# Add server source to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from flask import Flask
from config import get_server_config
from formcoach.api import register_routes
from formcoach.utils import setup_logger
from templates.index import HTML_TEMPLATE

logger = logging.getLogger("formcoach")


def create_app() -> Flask:
    """Create and configure the Flask app."""
    config = get_server_config()
    setup_logger("formcoach", level=config.log_level)

    app = Flask(__name__)
    app.json.sort_keys = False

    register_routes(app, HTML_TEMPLATE)
    return app


def main():
    """Main entry point."""
    config = get_server_config()
    app = create_app()
    logger.info("Form Coach server running at http://%s:%s (debug=%s)",
                config.host, config.port, config.debug)
    logger.info("Endpoints: GET / | GET /exercises | GET /exercises/<name>/rule | "
                "POST /check_form | POST /process_frame | POST /reset_analyzer | GET /health")
    app.run(host=config.host, port=config.port, debug=config.debug, threaded=config.threaded)


if __name__ == "__main__":
    main()
