from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from impactlog.api.deps import get_store
from impactlog.schemas.profile import ProfileUpdate, UserProfile
from impactlog.storage.errors import LocalOnlyOperation, StoreError
from impactlog.storage.store import WinsStore

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=UserProfile)
async def get_profile(store: WinsStore = Depends(get_store)):
    return await store.get_profile()


@router.put("", response_model=UserProfile)
async def update_profile(payload: ProfileUpdate, store: WinsStore = Depends(get_store)):
    try:
        return await store.update_profile(payload)
    except (StoreError, SQLAlchemyError):
        raise HTTPException(status_code=503, detail="Failed to save profile")


@router.delete("/local-data")
async def clear_local_data(store: WinsStore = Depends(get_store)):
    """Erase everything a guest has stored on this server's local medium."""
    try:
        await store.clear_local_data()
    except LocalOnlyOperation as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError:
        raise HTTPException(status_code=503, detail="Failed to clear local data")
    return {"message": "Local data cleared"}
