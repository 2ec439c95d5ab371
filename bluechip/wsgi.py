"""WSGI entrypoint for the BlueChip site."""

from __future__ import annotations

from bluechip import create_app

app = create_app()

if __name__ == "__main__":
    import os

    host = os.environ.get("FLASK_RUN_HOST", "127.0.0.1")
    app.run(host=host, port=app.config["PORT"])  # nosec B104
