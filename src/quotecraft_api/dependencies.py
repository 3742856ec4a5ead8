"""FastAPI dependencies wiring the store into services."""

from fastapi import Depends, Request

from quotecraft_api.config import Settings
from quotecraft_api.services.quota_service import QuotaGuard
from quotecraft_api.services.quote_service import QuoteService
from quotecraft_api.services.statistics_service import StatisticsService
from quotecraft_api.services.user_service import UserService
from quotecraft_api.storage.base import QuoteStore


def get_store(request: Request) -> QuoteStore:
    """The store built at startup and kept on the application state."""
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_quota_guard(
    store: QuoteStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> QuotaGuard:
    return QuotaGuard(store, settings)


def get_quote_service(
    store: QuoteStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
    quota_guard: QuotaGuard = Depends(get_quota_guard),
) -> QuoteService:
    return QuoteService(store, settings, quota_guard=quota_guard)


def get_statistics_service(
    store: QuoteStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> StatisticsService:
    return StatisticsService(store, settings)


def get_user_service(
    store: QuoteStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> UserService:
    return UserService(store, settings)
