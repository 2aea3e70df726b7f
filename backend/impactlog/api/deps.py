from typing import AsyncIterator, Optional

from fastapi import Depends, Header, HTTPException

from impactlog.core.config import settings
from impactlog.core.identity import AccessPolicy, Principal, get_access_policy
from impactlog.db import get_session_factory
from impactlog.storage.backends import BackendFactory
from impactlog.storage.cloud import hub
from impactlog.storage.store import WinsStore


def get_principal(
    x_user_id: Optional[str] = Header(None),
    x_user_email: Optional[str] = Header(None),
    x_user_name: Optional[str] = Header(None),
) -> Optional[Principal]:
    """Identity forwarded by the auth provider in front of this service."""
    if not x_user_id:
        return None
    return Principal(uid=x_user_id, email=x_user_email or None, display_name=x_user_name or None)


def require_principal(principal: Optional[Principal] = Depends(get_principal)) -> Principal:
    if principal is None:
        raise HTTPException(status_code=401, detail="Sign in required")
    return principal


async def get_store(
    principal: Principal = Depends(require_principal),
    policy: AccessPolicy = Depends(get_access_policy),
    session_factory=Depends(get_session_factory),
) -> AsyncIterator[WinsStore]:
    store = WinsStore(
        policy=policy,
        select_backend=BackendFactory(session_factory, settings.local_storage_dir, hub),
        week_starts_on=settings.week_starts_on,
        snapshot_timeout=settings.snapshot_timeout_seconds,
    )
    await store.open(principal)
    try:
        yield store
    finally:
        store.close()
