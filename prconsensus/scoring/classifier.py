"""Reaction classification and resolution status.

A thread is signed off when it is resolved and carries the strong-approval
(🚀) reaction. 👍 and 👎 are votes, 👀 means "seen", anything else is kept
as a raw mark in the reactor's cell.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum

from .aggregator import CommentDraft
from .bands import Band
from .emoji import ACKNOWLEDGEMENT, APPROVAL, DISAPPROVAL, STRONG_APPROVAL

logger = logging.getLogger(__name__)


class ResolutionStatus(Enum):
    APPROVED = "Approved"
    NON_APPROVED = "NonApproved"
    PENDING = "Pending"


class UnresolvedApprovalPolicy(Enum):
    """How to classify an unresolved thread that already carries 🚀."""

    PENDING = "pending"  # not finalized until resolved
    APPROVED = "approved"


@dataclass(frozen=True)
class ResolutionCounters:
    """Resolution totals across the comments of one pull request."""

    approved: int = 0
    non_approved: int = 0
    pending: int = 0

    def record(self, status: ResolutionStatus) -> ResolutionCounters:
        if status is ResolutionStatus.APPROVED:
            return replace(self, approved=self.approved + 1)
        if status is ResolutionStatus.NON_APPROVED:
            return replace(self, non_approved=self.non_approved + 1)
        return replace(self, pending=self.pending + 1)

    @property
    def total(self) -> int:
        return self.approved + self.non_approved + self.pending


@dataclass
class CommentRecord:
    """A classified comment row."""

    comment_id: str
    body: str
    url: str
    proposer: str
    is_resolved: bool
    status: ResolutionStatus
    has_strong_approval: bool
    approval_count: int = 0
    disapproval_count: int = 0
    glyphs: dict[str, str] = field(default_factory=dict)
    participation: set[str] = field(default_factory=set)
    anomalies: list[str] = field(default_factory=list)
    highlight: Band | None = None


def resolve_status(
    is_resolved: bool,
    has_strong_approval: bool,
    policy: UnresolvedApprovalPolicy = UnresolvedApprovalPolicy.PENDING,
) -> ResolutionStatus:
    """Resolution status from the thread flag and the 🚀 signal."""
    if is_resolved:
        if has_strong_approval:
            return ResolutionStatus.APPROVED
        return ResolutionStatus.NON_APPROVED
    if has_strong_approval and policy is UnresolvedApprovalPolicy.APPROVED:
        return ResolutionStatus.APPROVED
    return ResolutionStatus.PENDING


def classify(
    draft: CommentDraft,
    counters: ResolutionCounters,
    policy: UnresolvedApprovalPolicy = UnresolvedApprovalPolicy.PENDING,
) -> tuple[CommentRecord, ResolutionCounters]:
    """Classify one draft and return it with the updated counters.

    Glyph cells are last-write-wins: a participant who reacts several times
    keeps only the last mark that occupies a cell. Every reaction, whatever
    its kind, counts as participation.
    """
    has_strong_approval = False
    approvals = 0
    disapprovals = 0
    glyphs = dict(draft.glyphs)
    participation: set[str] = set()
    anomalies: list[str] = []

    for reaction in draft.reactions:
        participation.add(reaction.reactor)

        if reaction.glyph == STRONG_APPROVAL:
            has_strong_approval = True
        elif reaction.glyph == APPROVAL:
            approvals += 1
            glyphs[reaction.reactor] = reaction.glyph
        elif reaction.glyph == DISAPPROVAL:
            disapprovals += 1
            glyphs[reaction.reactor] = reaction.glyph
        elif reaction.glyph == ACKNOWLEDGEMENT:
            continue
        else:
            glyphs[reaction.reactor] = reaction.glyph
            if not reaction.is_known:
                anomalies.append(reaction.raw_kind)

    status = resolve_status(draft.is_resolved, has_strong_approval, policy)

    if status is ResolutionStatus.NON_APPROVED:
        logger.warning(f"Thread resolved without {STRONG_APPROVAL} sign-off: {draft.url}")
    elif has_strong_approval and not draft.is_resolved:
        logger.debug(f"{STRONG_APPROVAL} on unresolved thread, status {status.value}: {draft.url}")

    record = CommentRecord(
        comment_id=draft.comment_id,
        body=draft.body,
        url=draft.url,
        proposer=draft.proposer,
        is_resolved=draft.is_resolved,
        status=status,
        has_strong_approval=has_strong_approval,
        approval_count=approvals,
        disapproval_count=disapprovals,
        glyphs=glyphs,
        participation=participation,
        anomalies=anomalies,
    )
    return record, counters.record(status)


def classify_all(
    drafts: Sequence[CommentDraft],
    policy: UnresolvedApprovalPolicy = UnresolvedApprovalPolicy.PENDING,
) -> tuple[list[CommentRecord], ResolutionCounters]:
    """Classify drafts in order, folding the counters through each step."""
    records = []
    counters = ResolutionCounters()
    for draft in drafts:
        record, counters = classify(draft, counters, policy)
        records.append(record)
    return records, counters
