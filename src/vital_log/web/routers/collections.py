"""History collection routes."""

from typing import Callable

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ...errors import MALFORMED_DATA_ERRORS
from ...models.sessions import MeasurementSession, WorkoutSession
from ...models.templates import CustomWorkout
from ...store.local import CUSTOM_WORKOUTS, MEASUREMENT_SESSIONS, WORKOUT_SESSIONS
from ...store.repositories import DocumentRepository
from ..deps import get_user_repo, require_token

router = APIRouter(
    prefix="/users/{user_id}/collections",
    tags=["collections"],
    dependencies=[Depends(require_token)],
)

# Parsers used to reject malformed items before they are stored
COLLECTION_PARSERS: dict[str, Callable[[dict], object]] = {
    MEASUREMENT_SESSIONS: MeasurementSession.from_dict,
    WORKOUT_SESSIONS: WorkoutSession.from_dict,
    CUSTOM_WORKOUTS: CustomWorkout.from_dict,
}


class CollectionPayload(BaseModel):
    items: list[dict]


def _check_collection(name: str) -> Callable[[dict], object]:
    parser = COLLECTION_PARSERS.get(name)
    if parser is None:
        raise HTTPException(status_code=404, detail=f"Unknown collection: {name}")
    return parser


@router.get("/{name}")
async def get_collection(name: str, repo: DocumentRepository = Depends(get_user_repo)):
    """Get every item of a collection."""
    _check_collection(name)
    items = await repo.get(name)
    return {"collection": name, "items": items or []}


@router.put("/{name}")
async def replace_collection(
    name: str,
    payload: CollectionPayload,
    repo: DocumentRepository = Depends(get_user_repo),
):
    """Replace a collection in one write."""
    parser = _check_collection(name)
    for index, item in enumerate(payload.items):
        try:
            parser(item)
        except MALFORMED_DATA_ERRORS as e:
            raise HTTPException(status_code=422, detail=f"Item {index} is malformed: {e}") from e

    await repo.put(name, payload.items)
    return {"collection": name, "count": len(payload.items)}
