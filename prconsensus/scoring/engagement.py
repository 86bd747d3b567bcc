"""Per-participant engagement: how many eligible comments did they react to?

A comment is eligible for a participant unless they wrote it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .bands import Band, band_for
from .classifier import CommentRecord


@dataclass(frozen=True)
class EngagementStat:
    """Engagement of one participant across a pull request."""

    reacted: int
    eligible: int
    percentage: int
    band: Band


def engagement_percentage(reacted: int, eligible: int) -> int:
    """Rounded (half up) percentage; no eligible comments means full engagement."""
    if eligible == 0:
        return 100
    return (200 * reacted + eligible) // (2 * eligible)


def score(comments: Sequence[CommentRecord], participants: Sequence[str]) -> dict[str, EngagementStat]:
    """Engagement stats keyed by participant, in participant order."""
    stats: dict[str, EngagementStat] = {}

    for participant in participants:
        eligible = 0
        reacted = 0
        for comment in comments:
            if comment.proposer == participant:
                continue
            eligible += 1
            if participant in comment.participation:
                reacted += 1

        percentage = engagement_percentage(reacted, eligible)
        stats[participant] = EngagementStat(
            reacted=reacted,
            eligible=eligible,
            percentage=percentage,
            band=band_for(percentage),
        )

    return stats
