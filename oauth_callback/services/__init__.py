"""Service layer exports."""

from .authorization import AuthorizationService

__all__ = ["AuthorizationService"]
