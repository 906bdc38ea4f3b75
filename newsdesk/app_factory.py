"""Entry point compatible with uvicorn/gunicorn (`uvicorn newsdesk.app_factory:app`)."""
from newsdesk.app import create_app

app = create_app()

__all__ = ["app", "create_app"]
