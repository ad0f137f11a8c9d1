"""
Kinship Services Package.

This package contains all business logic and data access services.
Use this module to import commonly-used services.

Example:
    from api.services import (
        get_person_store,
        get_interaction_store,
        compute_suggestions,
    )

Key service modules:
- person_store: Person model and store
- interaction_store: Interaction records
- relationship_health: healthy / attention / inactive classification
- interaction_quality: per-interaction quality scores
- relationship_suggestions: closeness promote/demote suggestions
- relationship_insights: most active, neglected and rising connections
- contact_reminders: who to reach out to next
- notification_store / notifications: in-app notifications
- journal_store: journal entries
"""

# ============================================================================
# People & Interactions
# ============================================================================

from api.services.person_store import (
    Person,
    get_person_store,
)

from api.services.interaction_store import (
    Interaction,
    get_interaction_store,
)

from api.services.journal_store import (
    JournalEntry,
    get_journal_store,
)

# ============================================================================
# Relationship Engine
# ============================================================================

from api.services.relationship_health import (
    HealthStatus,
    classify_health,
)

from api.services.interaction_quality import (
    score_interaction,
    average_interaction_quality,
)

from api.services.relationship_suggestions import (
    Suggestion,
    compute_suggestions,
)

from api.services.relationship_insights import (
    Insights,
    compute_insights,
)

from api.services.contact_reminders import (
    ContactReminder,
    compute_contact_reminders,
)

# ============================================================================
# Notifications
# ============================================================================

from api.services.notification_store import (
    Notification,
    get_notification_store,
)

from api.services.notifications import (
    maybe_notify_high_confidence_suggestions,
    generate_reminder_notifications,
)


__all__ = [
    # People
    "Person",
    "get_person_store",
    "Interaction",
    "get_interaction_store",
    "JournalEntry",
    "get_journal_store",
    # Engine
    "HealthStatus",
    "classify_health",
    "score_interaction",
    "average_interaction_quality",
    "Suggestion",
    "compute_suggestions",
    "Insights",
    "compute_insights",
    "ContactReminder",
    "compute_contact_reminders",
    # Notifications
    "Notification",
    "get_notification_store",
    "maybe_notify_high_confidence_suggestions",
    "generate_reminder_notifications",
]
