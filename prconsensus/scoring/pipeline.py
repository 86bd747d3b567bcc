"""One aggregation pass over a pull request's review threads."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..models import PullRequestTarget, ReviewThread
from .aggregator import DEFAULT_BODY_CHAR_LIMIT, aggregate
from .bands import highlight_for
from .classifier import (
    CommentRecord,
    ResolutionCounters,
    UnresolvedApprovalPolicy,
    classify_all,
)
from .engagement import EngagementStat, score

logger = logging.getLogger(__name__)


@dataclass
class PullRequestReport:
    """Everything a renderer needs for one pull request."""

    target: PullRequestTarget
    comments: list[CommentRecord] = field(default_factory=list)
    participants: list[str] = field(default_factory=list)
    engagement: dict[str, EngagementStat] = field(default_factory=dict)
    counters: ResolutionCounters = field(default_factory=ResolutionCounters)


def build_report(
    threads: Sequence[ReviewThread],
    target: PullRequestTarget,
    *,
    body_char_limit: int = DEFAULT_BODY_CHAR_LIMIT,
    policy: UnresolvedApprovalPolicy = UnresolvedApprovalPolicy.PENDING,
) -> PullRequestReport:
    """Aggregate, classify and score the threads of one pull request."""
    aggregation = aggregate(threads, body_char_limit=body_char_limit)
    comments, counters = classify_all(aggregation.drafts, policy)

    participant_count = len(aggregation.participants)
    for comment in comments:
        comment.highlight = highlight_for(
            comment.approval_count, comment.disapproval_count, participant_count
        )

    engagement = score(comments, aggregation.participants)

    logger.info(
        f"{target.label}: {len(comments)} comments, {participant_count} participants, "
        f"{counters.approved} approved / {counters.non_approved} non-approved / {counters.pending} pending"
    )

    return PullRequestReport(
        target=target,
        comments=comments,
        participants=aggregation.participants,
        engagement=engagement,
        counters=counters,
    )
