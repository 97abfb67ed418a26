"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from household_budget.config import Settings, settings
from household_budget.domain.models import VarianceThresholds


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_settings() -> Settings:
    return settings


def get_default_thresholds() -> VarianceThresholds:
    """Variance thresholds used when a request does not send its own"""
    return VarianceThresholds(
        percentage_threshold=settings.variance_percentage_threshold,
        absolute_threshold=settings.variance_absolute_threshold,
    )
