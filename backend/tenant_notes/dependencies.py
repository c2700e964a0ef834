"""
Dependency injection for FastAPI routes.

Identity comes from headers the API gateway sets after verifying the caller's
token; request bodies never decide which org or user is acting.
"""

from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Request

from tenant_notes.database import NoteStore
from tenant_notes.models import OrgRole, Principal


def get_note_store(request: Request) -> NoteStore:
    return request.app.state.note_store_provider.get()


def get_principal(
    x_org_id: Annotated[Optional[str], Header()] = None,
    x_user_id: Annotated[Optional[str], Header()] = None,
    x_user_roles: Annotated[Optional[str], Header()] = None,
    x_user_email: Annotated[Optional[str], Header()] = None,
) -> Principal:
    if not x_org_id or not x_user_id:
        raise HTTPException(401, "Missing identity")
    try:
        roles = [
            OrgRole(role.strip())
            for role in (x_user_roles or "").split(",")
            if role.strip()
        ]
    except ValueError as exc:
        raise HTTPException(401, "Unknown role in identity") from exc
    return Principal(org_id=x_org_id, user_id=x_user_id, roles=roles, email=x_user_email)


NoteStoreDep = Annotated[NoteStore, Depends(get_note_store)]
PrincipalDep = Annotated[Principal, Depends(get_principal)]
