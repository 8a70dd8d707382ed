"""API modules for the medical report analyzer."""

from medreport.api.main import app, create_app

__all__ = [
    "app",
    "create_app",
]
