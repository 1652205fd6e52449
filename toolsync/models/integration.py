"""
Integration Connection Models
Rows read from the connection store for a tenant's linked accounts
"""

from typing import Optional, Dict, Any
from pydantic import BaseModel


class IntegrationConnection(BaseModel):
    """A third-party account a tenant user has linked through Composio"""
    tenant_id: str
    user_id: str
    integration_type: str
    connection_id: Optional[str] = None
    is_connected: bool = False

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "IntegrationConnection":
        """Build from a tenant_integrations row"""
        return cls(
            tenant_id=str(row.get("tenant_id") or ""),
            user_id=str(row.get("user_id") or ""),
            integration_type=str(row.get("integration_type") or ""),
            connection_id=row.get("connection_id"),
            is_connected=bool(row.get("is_connected")),
        )

    @property
    def is_syncable(self) -> bool:
        return self.is_connected and bool(self.connection_id)
