"""Route dependencies."""

from fastapi import Request

from biz.settings import Settings
from biz.stores import Backends


def get_backends(request: Request) -> Backends:
    """Shared backend handles installed on app.state at startup."""
    return request.app.state.backends


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings
