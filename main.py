"""
main.py

Slack markdown viewer: renders .md and .html files shared in Slack and
serves them as web pages until they expire.

Dependencies:
  - Python packages: Flask, flask-restx, flask-cors, redis, httpx, Markdown, Pygments
  - Infrastructure (optional): Redis server, selected with REDIS_URL

Notes:
  - Without REDIS_URL, artifacts are kept in memory and installations in DATA_DIR
  - Admin API at /api/v1/ with Swagger docs at /api/v1/docs
  - Uses application factory pattern for better testability
"""

import atexit

from app_factory import create_app, shutdown_app
from mdviewer.config import Settings, configure_logging

settings = Settings()
configure_logging(settings.log_level)

app = create_app(settings)
atexit.register(shutdown_app, app)

if __name__ == "__main__":
    # the reloader would start a second process with its own loop and stores
    app.run(
        host=settings.server.host,
        port=settings.server.port,
        debug=settings.server.debug,
        use_reloader=False,
    )
