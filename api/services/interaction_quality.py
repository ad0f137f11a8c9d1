"""
Interaction Quality - Score how meaningful a single interaction was.

    score = type_score × duration_multiplier

Type scores: in_person=5, video_call=4, call=3, text=2, email=1.5,
social_media=1, anything else=1.

Duration multiplier (only when duration is known, first match wins):
>60 min ×1.5, >30 min ×1.3, >15 min ×1.1, otherwise ×1.
"""
from typing import Optional, Sequence

from api.services.interaction_store import Interaction
from config.relationship_thresholds import (
    INTERACTION_TYPE_SCORES,
    DEFAULT_INTERACTION_SCORE,
    DURATION_MULTIPLIERS,
)


def duration_multiplier(duration_minutes: Optional[int]) -> float:
    """Bonus multiplier for longer interactions."""
    if not duration_minutes:
        return 1.0
    for threshold, multiplier in DURATION_MULTIPLIERS:
        if duration_minutes > threshold:
            return multiplier
    return 1.0


def score_interaction(interaction: Interaction) -> float:
    """
    Compute the quality score of one interaction.

    Args:
        interaction: Interaction to score

    Returns:
        Non-negative quality score (e.g. a 45 minute call scores 3.9)
    """
    base = INTERACTION_TYPE_SCORES.get(interaction.type, DEFAULT_INTERACTION_SCORE)
    return base * duration_multiplier(interaction.duration_minutes)


def average_interaction_quality(interactions: Sequence[Interaction]) -> float:
    """Mean quality score over interactions, 0.0 when there are none."""
    if not interactions:
        return 0.0
    return sum(score_interaction(i) for i in interactions) / len(interactions)
