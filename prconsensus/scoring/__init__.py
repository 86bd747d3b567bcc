"""Comment and reaction scoring for pull request review threads.

Pipeline, leaf first:
- Emoji normalization (reaction kind -> glyph)
- Thread aggregation (one draft per thread, participant set)
- Reaction classification (vote counts, resolution status)
- Engagement scoring (per-participant reaction ratio)
- Bands (engagement color, row highlight)
"""

from .aggregator import PROPOSER_MARKER, Aggregation, CommentDraft, aggregate, truncate
from .bands import Band, band_for, highlight_for
from .classifier import (
    CommentRecord,
    ResolutionCounters,
    ResolutionStatus,
    UnresolvedApprovalPolicy,
    classify,
    classify_all,
)
from .emoji import is_known, normalize
from .engagement import EngagementStat, score
from .pipeline import PullRequestReport, build_report

__all__ = [
    # Emoji
    "normalize",
    "is_known",
    # Aggregation
    "aggregate",
    "truncate",
    "Aggregation",
    "CommentDraft",
    "PROPOSER_MARKER",
    # Classification
    "classify",
    "classify_all",
    "CommentRecord",
    "ResolutionCounters",
    "ResolutionStatus",
    "UnresolvedApprovalPolicy",
    # Engagement
    "score",
    "EngagementStat",
    # Bands
    "Band",
    "band_for",
    "highlight_for",
    # Pipeline
    "build_report",
    "PullRequestReport",
]
