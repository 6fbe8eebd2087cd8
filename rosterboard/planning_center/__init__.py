"""Planning Center Services integration."""

from .client import (
    PlanningCenterClient,
    PlanningCenterError,
    PlanningCenterAuthError,
    PlanningCenterRateLimitError,
    UpstreamUnavailable,
)
from .oauth import OAuthClient, OAuthError, OAuthTokens

__all__ = [
    "PlanningCenterClient",
    "PlanningCenterError",
    "PlanningCenterAuthError",
    "PlanningCenterRateLimitError",
    "UpstreamUnavailable",
    "OAuthClient",
    "OAuthError",
    "OAuthTokens",
]
