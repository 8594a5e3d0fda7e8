"""
Remote tool (MCP) server description.

Records come from the external tool-server registry. Adapters that support
remote tools inject every server with a non-empty URL into the outbound
request, each in its own provider shape.
"""
from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ToolServer(BaseModel):
    """One remote tool server reachable by URL."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    label: str = Field(validation_alias=AliasChoices("label", "serverLabel", "server_label"))
    url: str = Field(default="", validation_alias=AliasChoices("url", "serverUrl", "server_url"))
    require_approval: Literal["always", "never"] = Field(
        default="never", validation_alias=AliasChoices("require_approval", "requireApproval")
    )
    allowed_tools: Optional[List[str]] = Field(
        default=None, validation_alias=AliasChoices("allowed_tools", "allowedTools")
    )
    auth_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("auth_token", "authToken", "authorizationToken"),
        repr=False,
    )
    custom_headers: Optional[Dict[str, str]] = Field(
        default=None, validation_alias=AliasChoices("custom_headers", "customHeaders")
    )

    @property
    def has_url(self) -> bool:
        return bool(self.url.strip())

    def bearer_token(self) -> Optional[str]:
        """Return the auth token with a ``Bearer `` prefix (``None`` if unset)."""
        if not self.auth_token:
            return None
        token = self.auth_token.strip()
        return token if token.lower().startswith("bearer ") else f"Bearer {token}"

    def raw_token(self) -> Optional[str]:
        """Return the auth token without any ``Bearer `` prefix."""
        if not self.auth_token:
            return None
        token = self.auth_token.strip()
        return token[7:].strip() if token.lower().startswith("bearer ") else token


__all__ = ["ToolServer"]
