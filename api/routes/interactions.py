"""
Interactions API endpoints for Kinship.

Log, list and delete contact events.
"""
from datetime import datetime
from typing import Optional
import logging

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from api.services.interaction_store import (
    INTERACTION_TYPES,
    Interaction,
    create_interaction,
    get_interaction_store,
)
from api.services.person_store import get_person_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interactions", tags=["interactions"])


class InteractionResponse(BaseModel):
    """Response model for an interaction."""
    id: str
    person_id: str
    type: str
    type_badge: str
    occurred_at: str
    duration_minutes: Optional[int] = None
    description: Optional[str] = None
    location: Optional[str] = None
    mood_rating: Optional[int] = None
    platform: Optional[str] = None
    created_at: str

    @classmethod
    def from_interaction(cls, i: Interaction) -> "InteractionResponse":
        return cls(
            id=i.id,
            person_id=i.person_id,
            type=i.type,
            type_badge=i.type_badge,
            occurred_at=i.occurred_at.isoformat(),
            duration_minutes=i.duration_minutes,
            description=i.description,
            location=i.location,
            mood_rating=i.mood_rating,
            platform=i.platform,
            created_at=i.created_at.isoformat(),
        )


class CreateInteractionRequest(BaseModel):
    person_id: str = Field(..., min_length=1)
    type: str = Field(..., description="call, text, email, in_person, social_media or video_call")
    occurred_at: Optional[datetime] = Field(default=None, description="Defaults to now")
    duration_minutes: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    location: Optional[str] = None
    mood_rating: Optional[int] = Field(default=None, ge=1, le=5)
    platform: Optional[str] = Field(default=None, description="whatsapp, imessage, phone, ... or a custom name")


@router.post("", response_model=InteractionResponse)
async def log_interaction(request: CreateInteractionRequest):
    """Log a new interaction with a person."""
    if request.type not in INTERACTION_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"type must be one of: {', '.join(INTERACTION_TYPES)}",
        )
    if not get_person_store().get_by_id(request.person_id):
        raise HTTPException(status_code=404, detail="Person not found")

    interaction = create_interaction(
        person_id=request.person_id,
        type=request.type,
        occurred_at=request.occurred_at,
        duration_minutes=request.duration_minutes,
        description=request.description,
        location=request.location,
        mood_rating=request.mood_rating,
        platform=request.platform,
    )
    get_interaction_store().add(interaction)
    return InteractionResponse.from_interaction(interaction)


@router.get("", response_model=list[InteractionResponse])
async def list_interactions(limit: int = Query(default=100, ge=1, le=1000)):
    """Most recent interactions across everyone."""
    return [
        InteractionResponse.from_interaction(i)
        for i in get_interaction_store().get_all(limit=limit)
    ]


@router.get("/{interaction_id}", response_model=InteractionResponse)
async def get_interaction(interaction_id: str):
    interaction = get_interaction_store().get_by_id(interaction_id)
    if not interaction:
        raise HTTPException(status_code=404, detail="Interaction not found")
    return InteractionResponse.from_interaction(interaction)


@router.delete("/{interaction_id}")
async def delete_interaction(interaction_id: str):
    """Delete an interaction."""
    if not get_interaction_store().delete(interaction_id):
        raise HTTPException(status_code=404, detail="Interaction not found")
    return {"status": "deleted", "id": interaction_id}
