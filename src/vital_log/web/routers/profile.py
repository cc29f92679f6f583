"""User profile routes."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ...errors import MALFORMED_DATA_ERRORS
from ...models.profile import UserProfile
from ...store.local import PROFILE
from ...store.repositories import DocumentRepository
from ..deps import get_user_repo, require_token

router = APIRouter(
    prefix="/users/{user_id}/profile",
    tags=["profile"],
    dependencies=[Depends(require_token)],
)


class ProfilePayload(BaseModel):
    profile: dict


@router.get("")
async def get_profile(repo: DocumentRepository = Depends(get_user_repo)):
    """Get the stored profile."""
    profile = await repo.get(PROFILE)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return {"profile": profile}


@router.put("")
async def set_profile(payload: ProfilePayload, repo: DocumentRepository = Depends(get_user_repo)):
    """Create or replace the profile."""
    try:
        UserProfile.from_dict(payload.profile)
    except MALFORMED_DATA_ERRORS as e:
        raise HTTPException(status_code=422, detail=f"Profile is malformed: {e}") from e

    await repo.put(PROFILE, payload.profile)
    return {"status": "saved"}
