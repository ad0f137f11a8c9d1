"""
People API endpoints for Kinship.

CRUD for connections. Health and days since last contact are derived from
interactions on every read.
"""
from datetime import datetime, timezone
from typing import Optional
import logging

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from api.services.person_store import Person, get_person_store
from api.services.interaction_store import get_interaction_store
from api.services.journal_store import get_journal_store
from api.services.relationship_health import HealthStatus, classify_health, days_since_last_contact
from api.services.relationship_suggestions import group_by_person
from api.routes.interactions import InteractionResponse
from config.relationship_thresholds import CLOSENESS_LABELS
from config.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/people", tags=["people"])


class PersonResponse(BaseModel):
    """Response model for a person."""
    id: str
    name: str
    relationship: str
    closeness: int
    closeness_label: str
    platform: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    health: str
    days_since_last_contact: int = 999  # 999 = never contacted
    created_at: str
    updated_at: Optional[str] = None

    @classmethod
    def from_person(cls, person: Person, interactions: list, now: datetime) -> "PersonResponse":
        return cls(
            id=person.id,
            name=person.name,
            relationship=person.relationship,
            closeness=person.closeness,
            closeness_label=CLOSENESS_LABELS.get(person.closeness, "Unknown"),
            platform=person.platform,
            email=person.email,
            phone=person.phone,
            notes=person.notes,
            health=classify_health(person, interactions, now).value,
            days_since_last_contact=days_since_last_contact(person, interactions, now),
            created_at=person.created_at.isoformat(),
            updated_at=person.updated_at.isoformat() if person.updated_at else None,
        )


class PersonListResponse(BaseModel):
    people: list[PersonResponse]
    total: int


class CreatePersonRequest(BaseModel):
    name: str = Field(..., min_length=1)
    relationship: str = Field(default="friend", description="family, friend, colleague, partner, mentor, other or custom")
    closeness: Optional[int] = Field(default=None, ge=1, le=5)
    platform: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class UpdatePersonRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    relationship: Optional[str] = None
    closeness: Optional[int] = Field(default=None, ge=1, le=5)
    platform: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


@router.get("", response_model=PersonListResponse)
async def list_people(
    health: Optional[HealthStatus] = Query(default=None, description="Filter by health: healthy, attention, inactive"),
):
    """List all people with derived health."""
    now = datetime.now(timezone.utc)
    people = get_person_store().get_all()
    by_person = group_by_person(get_interaction_store().get_all())

    results = [
        PersonResponse.from_person(p, by_person.get(p.id, []), now)
        for p in people
    ]
    if health:
        results = [r for r in results if r.health == health.value]

    return PersonListResponse(people=results, total=len(results))


@router.post("", response_model=PersonResponse)
async def create_person(request: CreatePersonRequest):
    """Add a new connection."""
    person = get_person_store().create(
        name=request.name,
        closeness=request.closeness or settings.default_closeness,
        relationship=request.relationship,
        platform=request.platform,
        email=request.email,
        phone=request.phone,
        notes=request.notes,
    )
    return PersonResponse.from_person(person, [], datetime.now(timezone.utc))


@router.get("/{person_id}", response_model=PersonResponse)
async def get_person(person_id: str):
    """Get a person by ID."""
    person = get_person_store().get_by_id(person_id)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")
    interactions = get_interaction_store().get_for_person(person_id)
    return PersonResponse.from_person(person, interactions, datetime.now(timezone.utc))


@router.put("/{person_id}", response_model=PersonResponse)
async def update_person(person_id: str, request: UpdatePersonRequest):
    """Update a person. Omitted fields are left unchanged; null clears optional fields."""
    updates = request.model_dump(exclude_unset=True)
    person = get_person_store().update(person_id, **updates)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")
    interactions = get_interaction_store().get_for_person(person_id)
    return PersonResponse.from_person(person, interactions, datetime.now(timezone.utc))


@router.delete("/{person_id}")
async def delete_person(person_id: str):
    """Delete a person and their interactions. Journal entries about them are kept, unlinked."""
    if not get_person_store().delete(person_id):
        raise HTTPException(status_code=404, detail="Person not found")
    removed = get_interaction_store().delete_for_person(person_id)
    get_journal_store().detach_person(person_id)
    return {"status": "deleted", "id": person_id, "interactions_deleted": removed}


@router.get("/{person_id}/interactions", response_model=list[InteractionResponse])
async def get_person_interactions(
    person_id: str,
    days_back: Optional[int] = Query(default=None, ge=1),
    limit: int = Query(default=50, ge=1, le=500),
):
    """Interactions for a person, most recent first."""
    if not get_person_store().get_by_id(person_id):
        raise HTTPException(status_code=404, detail="Person not found")
    interactions = get_interaction_store().get_for_person(person_id, days_back=days_back, limit=limit)
    return [InteractionResponse.from_interaction(i) for i in interactions]
