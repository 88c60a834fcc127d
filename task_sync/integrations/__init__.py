"""
External service integrations for Task Sync.

Provides the integration registry and the built-in GitHub, Apple Reminders
and Apple Calendar services.
"""

from task_sync.integrations.base import BaseIntegrationService
from task_sync.integrations.defaults import (
    APPLE_CALENDAR,
    APPLE_REMINDERS,
    GITHUB,
    register_default_integrations,
)
from task_sync.integrations.registry import (
    IntegrationConfig,
    IntegrationRegistry,
    integration_registry,
)

__all__ = [
    "APPLE_CALENDAR",
    "APPLE_REMINDERS",
    "GITHUB",
    "BaseIntegrationService",
    "IntegrationConfig",
    "IntegrationRegistry",
    "integration_registry",
    "register_default_integrations",
]
