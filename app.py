"""Provides application for development purposes."""
from people.factory import create_web_app

app = create_web_app()
