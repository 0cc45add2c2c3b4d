"""
Request-scoped dependencies for the API layer.
"""

from fastapi import Request

from hubhook.core.config import Settings


def get_settings(request: Request) -> Settings:
    """Return the settings the application was created with."""
    return request.app.state.settings
