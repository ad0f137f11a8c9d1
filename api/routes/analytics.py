"""
Relationship analytics API routes for Kinship.

Closeness suggestions, insights and the contact reminder queue. Everything
is recomputed from the current people and interactions on each request.
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query
from pydantic import BaseModel

from api.services.contact_reminders import compute_contact_reminders
from api.services.interaction_store import get_interaction_store
from api.services.notifications import maybe_notify_high_confidence_suggestions
from api.services.person_store import get_person_store
from api.services.relationship_insights import compute_insights
from api.services.relationship_suggestions import (
    Suggestion,
    build_suggestion_report,
    compute_suggestions,
    find_suggestion,
)
from config.relationship_thresholds import REMINDER_QUEUE_SIZE
from config.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analytics"])


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class SuggestionResponse(BaseModel):
    person_id: str
    person_name: str
    current_closeness: int
    suggested_closeness: int
    reason: str
    confidence: str
    action_type: str
    interaction_count: int
    days_since_last_contact: int
    average_interaction_quality: float

    @classmethod
    def from_suggestion(cls, s: Suggestion) -> "SuggestionResponse":
        return cls(**s.to_dict())


class ActiveRelationshipResponse(BaseModel):
    person_id: str
    person_name: str
    interaction_count: int


class NeglectedRelationshipResponse(BaseModel):
    person_id: str
    person_name: str
    days_since_last_contact: int


class RisingConnectionResponse(BaseModel):
    person_id: str
    person_name: str
    trend: int


class InsightsResponse(BaseModel):
    most_active: list[ActiveRelationshipResponse]
    neglected: list[NeglectedRelationshipResponse]
    rising: list[RisingConnectionResponse]


class AnalyticsResponse(BaseModel):
    suggestions: list[SuggestionResponse]
    total_suggestions: int
    promotions: list[SuggestionResponse]
    demotions: list[SuggestionResponse]
    insights: InsightsResponse


class AcceptSuggestionResponse(BaseModel):
    status: str
    person_id: str
    previous_closeness: int
    closeness: int


class ContactReminderResponse(BaseModel):
    person_id: str
    name: str
    relationship: str
    days_since_contact: int
    priority: str
    suggestion: str


class ContactReminderListResponse(BaseModel):
    reminders: list[ContactReminderResponse]
    total: int


def _load_snapshot():
    return get_person_store().get_all(), get_interaction_store().get_all()


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(background_tasks: BackgroundTasks):
    """Closeness suggestions and relationship insights."""
    now = datetime.now(timezone.utc)
    people, interactions = _load_snapshot()

    report = build_suggestion_report(people, interactions, now)
    insights = compute_insights(people, interactions, now)

    if settings.notify_on_suggestions:
        background_tasks.add_task(maybe_notify_high_confidence_suggestions, report.suggestions)

    return AnalyticsResponse(
        suggestions=[SuggestionResponse.from_suggestion(s) for s in report.suggestions],
        total_suggestions=report.total_suggestions,
        promotions=[SuggestionResponse.from_suggestion(s) for s in report.promotions],
        demotions=[SuggestionResponse.from_suggestion(s) for s in report.demotions],
        insights=InsightsResponse(**insights.to_dict()),
    )


@router.post("/analytics/suggestions/{person_id}/accept", response_model=AcceptSuggestionResponse)
async def accept_suggestion(person_id: str):
    """
    Apply the current suggestion for a person.

    The suggestion is recomputed so a stale UI cannot apply an outdated
    closeness value.
    """
    people, interactions = _load_snapshot()
    suggestion = find_suggestion(
        compute_suggestions(people, interactions, datetime.now(timezone.utc)),
        person_id,
    )
    if not suggestion:
        raise HTTPException(status_code=404, detail="No suggestion for this person")

    person = get_person_store().update_closeness(person_id, suggestion.suggested_closeness)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")

    logger.info(
        f"Accepted {suggestion.action_type} for {suggestion.person_name}: "
        f"{suggestion.current_closeness} -> {suggestion.suggested_closeness}"
    )
    return AcceptSuggestionResponse(
        status="applied",
        person_id=person_id,
        previous_closeness=suggestion.current_closeness,
        closeness=person.closeness,
    )


@router.get("/reminders", response_model=ContactReminderListResponse)
async def list_contact_reminders(limit: int = Query(default=REMINDER_QUEUE_SIZE, ge=1, le=50)):
    """People to reach out to next."""
    people, interactions = _load_snapshot()
    reminders = compute_contact_reminders(people, interactions, datetime.now(timezone.utc), limit=limit)
    return ContactReminderListResponse(
        reminders=[ContactReminderResponse(**r.to_dict()) for r in reminders],
        total=len(reminders),
    )
