"""
Custom Exceptions for the Tool Sync service
Provides structured error handling across the application
"""

from typing import Optional, Dict, Any, List


class ToolSyncException(Exception):
    """Base exception for all tool sync errors"""

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response"""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


# Configuration Exceptions
class ConfigurationError(ToolSyncException):
    """Raised when a required credential or secret is missing"""

    def __init__(self, missing: List[str]):
        super().__init__(
            message=f"Missing required configuration: {', '.join(missing)}",
            error_code="CONFIGURATION_ERROR",
            details={"missing": missing},
            status_code=500
        )


# Authentication Exceptions
class AuthenticationError(ToolSyncException):
    """Raised when authentication fails"""

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            error_code="AUTH_FAILED",
            details=details,
            status_code=401
        )


# Sync Exceptions
class SyncError(ToolSyncException):
    """Base exception for tool synchronization errors"""
    pass


class ConnectionFetchError(SyncError):
    """Raised when every tool fetch strategy failed for an integration"""

    def __init__(self, integration_type: str, toolkit: str, reason: str):
        super().__init__(
            message=f"All methods failed to fetch tools for {integration_type}: {reason}",
            error_code="TOOL_FETCH_FAILED",
            details={"integration_type": integration_type, "toolkit": toolkit},
            status_code=502
        )


class ToolRegistrationError(SyncError):
    """Raised when the platform rejects a tool creation"""

    def __init__(self, tool_name: str, reason: str):
        super().__init__(
            message=f"Failed to create tool {tool_name}: {reason}",
            error_code="TOOL_REGISTRATION_FAILED",
            details={"tool_name": tool_name},
            status_code=502
        )


class AgentNotFoundError(SyncError):
    """Raised when a tenant has no voice agent to attach tools to"""

    def __init__(self, tenant_id: str):
        super().__init__(
            message=f"No agent found for tenant: {tenant_id}",
            error_code="AGENT_NOT_FOUND",
            details={"tenant_id": tenant_id},
            status_code=404
        )


# Service Exceptions
class ServiceError(ToolSyncException):
    """Base exception for external service errors"""
    pass


class ComposioServiceError(ServiceError):
    """Raised when the Composio API fails"""

    def __init__(self, message: str, composio_status: Optional[int] = None):
        super().__init__(
            message=f"Composio error: {message}",
            error_code="COMPOSIO_ERROR",
            details={"status_code": composio_status} if composio_status else {},
            status_code=502
        )


class ElevenLabsServiceError(ServiceError):
    """Raised when the ElevenLabs API fails"""

    def __init__(self, message: str, elevenlabs_status: Optional[int] = None):
        super().__init__(
            message=f"ElevenLabs error: {message}",
            error_code="ELEVENLABS_ERROR",
            details={"status_code": elevenlabs_status} if elevenlabs_status else {},
            status_code=502
        )


class SupabaseServiceError(ServiceError):
    """Raised when a Supabase query fails"""

    def __init__(self, message: str, supabase_status: Optional[int] = None):
        super().__init__(
            message=f"Supabase error: {message}",
            error_code="SUPABASE_ERROR",
            details={"status_code": supabase_status} if supabase_status else {},
            status_code=502
        )
