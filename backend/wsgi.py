"""WSGI entrypoint for gunicorn and ``flask --app wsgi``."""

from accounts import create_app

app = create_app()
