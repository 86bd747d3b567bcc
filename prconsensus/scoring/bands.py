"""Color bands for engagement scores and comment rows."""

from __future__ import annotations

from enum import Enum


class Band(Enum):
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"


# (inclusive lower bound, band), checked top down
ENGAGEMENT_THRESHOLDS = [
    (90, Band.GREEN),
    (70, Band.YELLOW),
    (50, Band.ORANGE),
]


def band_for(percentage: int) -> Band:
    """Band for an engagement percentage. Anything under 50 is red."""
    for lower_bound, band in ENGAGEMENT_THRESHOLDS:
        if percentage >= lower_bound:
            return band
    return Band.RED


def is_consensus_positive(approval_count: int, participant_count: int) -> bool:
    """Two thirds of participants approve, counting the proposer as a yes.

    Integer form of `approval + 1 >= 2/3 * participants`.
    """
    return 3 * (approval_count + 1) >= 2 * participant_count


def is_consensus_negative(disapproval_count: int, participant_count: int) -> bool:
    """Two thirds of the non-proposer participants disapprove.

    Integer form of `disapproval >= 2/3 * (participants - 1)`.
    """
    return 3 * disapproval_count >= 2 * (participant_count - 1)


def break_tie(positive: bool, negative: bool) -> Band | None:
    """Row highlight from the two consensus checks. Green wins a tie."""
    if positive:
        return Band.GREEN
    if negative:
        return Band.RED
    return None


def highlight_for(approval_count: int, disapproval_count: int, participant_count: int) -> Band | None:
    """Highlight band for a comment row, or None for no highlight."""
    return break_tie(
        is_consensus_positive(approval_count, participant_count),
        is_consensus_negative(disapproval_count, participant_count),
    )
