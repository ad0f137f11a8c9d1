"""
Relationship Health and Suggestion Thresholds.

Central configuration for the constants used in:
- Health classification (contact recency)
- Interaction quality scoring
- Closeness suggestions
- Relationship insights

Edit this file to tune how connections are classified and nudged.
"""

# =============================================================================
# CLOSENESS SCALE
# =============================================================================
# 5 = Inner Circle, 1 = Very Distant

MIN_CLOSENESS = 1
MAX_CLOSENESS = 5

CLOSENESS_LABELS = {
    5: "Inner Circle",
    4: "Close Friends",
    3: "Regular Contact",
    2: "Distant",
    1: "Very Distant",
}

# Days-since-contact value for people who were never contacted
NEVER_CONTACTED_DAYS = 999


# =============================================================================
# HEALTH
# =============================================================================
# days <= HEALTHY_MAX_DAYS           -> healthy
# days <= ATTENTION_MAX_DAYS         -> attention
# anything older, or never contacted -> inactive

HEALTHY_MAX_DAYS = 7
ATTENTION_MAX_DAYS = 21


# =============================================================================
# INTERACTION QUALITY
# =============================================================================

INTERACTION_TYPE_SCORES = {
    "in_person": 5.0,
    "video_call": 4.0,
    "call": 3.0,
    "text": 2.0,
    "email": 1.5,
    "social_media": 1.0,
}
DEFAULT_INTERACTION_SCORE = 1.0

# (exclusive lower bound in minutes, multiplier), checked in order.
# Only the first match applies.
DURATION_MULTIPLIERS = (
    (60, 1.5),
    (30, 1.3),
    (15, 1.1),
)


# =============================================================================
# SUGGESTION WINDOWS AND RULE THRESHOLDS
# =============================================================================

RECENT_WINDOW_DAYS = 30
VERY_RECENT_WINDOW_DAYS = 7

# Promotions
VERY_RECENT_PROMOTE_COUNT = 5       # weekly contacts for a high-confidence promote
QUALITY_PROMOTE_COUNT = 8           # monthly contacts for a quality promote
QUALITY_PROMOTE_MIN_AVERAGE = 2.5   # average quality must exceed this
QUALITY_PROMOTE_CAP = 4
MODERATE_PROMOTE_COUNT = 5          # monthly contacts for a medium promote
MODERATE_PROMOTE_CAP = 3

# Demotions
DISTANT_AFTER_DAYS = 180            # straight to closeness 1
LONG_SILENCE_DAYS = 90
CLOSE_SILENCE_DAYS = 60
CLOSE_SILENCE_FLOOR = 2

CONFIDENCE_RANK = {"high": 3, "medium": 2, "low": 1}


# =============================================================================
# INSIGHTS
# =============================================================================

INSIGHT_LIST_SIZE = 5
NEGLECTED_AFTER_DAYS = 30
RISING_TREND_MIN = 2                # trend must exceed this


# =============================================================================
# CONTACT REMINDERS
# =============================================================================

REMINDER_MIN_DAYS = 7
REMINDER_QUEUE_SIZE = 5
PRIORITY_RANK = {"high": 3, "medium": 2, "low": 1}

CONTACT_SUGGESTIONS = {
    "family": ("Call to check in", "Send a photo update", "Plan a visit"),
    "friend": ("Send a message", "Share something funny", "Plan to meet up"),
    "colleague": ("Check in about work", "Send a professional update", "Schedule a coffee"),
    "default": ("Send a message", "Give them a call", "Share an update"),
}
