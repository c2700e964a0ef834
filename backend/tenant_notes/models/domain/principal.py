"""Authenticated actor making a request."""

from typing import Optional

from pydantic import BaseModel, Field

from tenant_notes.models.enums import OrgRole


class Principal(BaseModel):
    """Claims forwarded by the gateway after it has verified the identity token."""
    org_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    roles: list[OrgRole] = Field(default_factory=list)
    email: Optional[str] = None
