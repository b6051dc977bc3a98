"""ASGI entry point: ``uvicorn medibook.main:app``."""

from .app import create_app

app = create_app()
