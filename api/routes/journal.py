"""
Journal API endpoints for Kinship.

Write, list, edit and delete journal entries. Saving an entry posts a
low-priority activity notification.
"""
from typing import Optional
import logging

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from api.services.journal_store import JOURNAL_MOODS, JournalEntry, get_journal_store
from api.services.notifications import create_activity_notification
from api.services.person_store import get_person_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/journal", tags=["journal"])

UNTITLED_ENTRY = "Reflection"
NO_PERSON_LABEL = "General"


class JournalEntryResponse(BaseModel):
    """Response model for a journal entry."""
    id: str
    content: str
    title: Optional[str] = None
    display_title: str
    mood: Optional[str] = None
    person_id: Optional[str] = None
    person_name: str
    tags: list[str] = []
    is_private: bool = False
    created_at: str
    updated_at: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: JournalEntry, person_name: Optional[str] = None) -> "JournalEntryResponse":
        return cls(
            id=entry.id,
            content=entry.content,
            title=entry.title,
            display_title=entry.title or UNTITLED_ENTRY,
            mood=entry.mood,
            person_id=entry.person_id,
            person_name=person_name or NO_PERSON_LABEL,
            tags=list(entry.tags),
            is_private=entry.is_private,
            created_at=entry.created_at.isoformat(),
            updated_at=entry.updated_at.isoformat() if entry.updated_at else None,
        )


class JournalListResponse(BaseModel):
    entries: list[JournalEntryResponse]
    total: int


class CreateJournalEntryRequest(BaseModel):
    content: str = Field(..., min_length=1)
    title: Optional[str] = None
    mood: Optional[str] = Field(default=None, description="happy, neutral or sad")
    person_id: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    is_private: bool = False


class UpdateJournalEntryRequest(BaseModel):
    content: Optional[str] = Field(default=None, min_length=1)
    title: Optional[str] = None
    mood: Optional[str] = None
    person_id: Optional[str] = None
    tags: Optional[list[str]] = None
    is_private: Optional[bool] = None


def _check_mood(mood: Optional[str]) -> None:
    if mood is not None and mood not in JOURNAL_MOODS:
        raise HTTPException(status_code=400, detail=f"mood must be one of: {', '.join(JOURNAL_MOODS)}")


def _check_person(person_id: Optional[str]) -> Optional[str]:
    """404 for an unknown person; returns the person's name."""
    if not person_id:
        return None
    person = get_person_store().get_by_id(person_id)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")
    return person.name


def _person_name(person_id: Optional[str]) -> Optional[str]:
    if not person_id:
        return None
    person = get_person_store().get_by_id(person_id)
    return person.name if person else None


def _person_names() -> dict[str, str]:
    return {p.id: p.name for p in get_person_store().get_all()}


@router.get("", response_model=JournalListResponse)
async def list_entries(
    limit: int = Query(default=20, ge=1, le=200),
    person_id: Optional[str] = Query(default=None, description="Only entries about this person"),
    include_private: bool = Query(default=True),
):
    """Most recent journal entries, newest first."""
    entries = get_journal_store().list_recent(limit=limit, person_id=person_id, include_private=include_private)
    names = _person_names()
    results = [JournalEntryResponse.from_entry(e, names.get(e.person_id)) for e in entries]
    return JournalListResponse(entries=results, total=len(results))


@router.post("", response_model=JournalEntryResponse)
async def create_entry(request: CreateJournalEntryRequest):
    """Save a journal entry and announce it as an activity notification."""
    _check_mood(request.mood)
    person_name = _check_person(request.person_id)

    entry = get_journal_store().create(
        content=request.content,
        title=request.title,
        mood=request.mood,
        person_id=request.person_id,
        tags=request.tags,
        is_private=request.is_private,
    )

    title = entry.title or UNTITLED_ENTRY
    create_activity_notification(
        "Journal entry saved",
        f'"{title}" was added to your journal',
        metadata={
            "entry_id": entry.id,
            "entry_title": title,
            "mood": entry.mood,
            "person_id": entry.person_id,
        },
    )
    return JournalEntryResponse.from_entry(entry, person_name)


@router.get("/{entry_id}", response_model=JournalEntryResponse)
async def get_entry(entry_id: str):
    entry = get_journal_store().get_by_id(entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return JournalEntryResponse.from_entry(entry, _person_name(entry.person_id))


@router.put("/{entry_id}", response_model=JournalEntryResponse)
async def update_entry(entry_id: str, request: UpdateJournalEntryRequest):
    """Update an entry. Omitted fields are left unchanged; null clears title, mood and person."""
    updates = request.model_dump(exclude_unset=True)
    _check_mood(updates.get("mood"))
    _check_person(updates.get("person_id"))

    entry = get_journal_store().update(entry_id, **updates)
    if not entry:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return JournalEntryResponse.from_entry(entry, _person_name(entry.person_id))


@router.delete("/{entry_id}")
async def delete_entry(entry_id: str):
    if not get_journal_store().delete(entry_id):
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return {"status": "deleted", "id": entry_id}
