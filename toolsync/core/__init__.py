"""Core module for configuration, settings, and shared utilities"""

from .config import settings, get_settings, Settings
from .logging import setup_logging, get_logger
from .exceptions import (
    ToolSyncException,
    ConfigurationError,
    AuthenticationError,
    SyncError,
    ConnectionFetchError,
    ToolRegistrationError,
    AgentNotFoundError,
    ServiceError,
    ComposioServiceError,
    ElevenLabsServiceError,
    SupabaseServiceError
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    "Settings",
    # Logging
    "setup_logging",
    "get_logger",
    # Exceptions
    "ToolSyncException",
    "ConfigurationError",
    "AuthenticationError",
    "SyncError",
    "ConnectionFetchError",
    "ToolRegistrationError",
    "AgentNotFoundError",
    "ServiceError",
    "ComposioServiceError",
    "ElevenLabsServiceError",
    "SupabaseServiceError"
]
