"""API routes module."""

from quotecraft_api.routes.account import router as account_router
from quotecraft_api.routes.auth import router as auth_router
from quotecraft_api.routes.health import router as health_router
from quotecraft_api.routes.quotes import router as quotes_router
from quotecraft_api.routes.statistics import router as statistics_router

__all__ = [
    "account_router",
    "auth_router",
    "health_router",
    "quotes_router",
    "statistics_router",
]
