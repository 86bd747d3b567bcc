"""Thread aggregation: one draft record per review thread.

Walks threads in source order, keeps each thread's opening comment and
builds the ordered set of participants (authors first, then reactors, in the
order they are first seen).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..models import ReviewThread
from .emoji import is_known, normalize

logger = logging.getLogger(__name__)

DEFAULT_BODY_CHAR_LIMIT = 300
ELLIPSIS = "..."
PROPOSER_MARKER = "✍️"  # glyph cell of the comment's own author


@dataclass(frozen=True)
class RawReaction:
    """A reaction as seen on the comment, after glyph normalization."""

    reactor: str
    glyph: str
    raw_kind: str

    @property
    def is_known(self) -> bool:
        return is_known(self.raw_kind)


@dataclass
class CommentDraft:
    """Opening comment of a thread, before classification."""

    comment_id: str
    body: str
    url: str
    proposer: str
    is_resolved: bool
    reactions: list[RawReaction] = field(default_factory=list)
    glyphs: dict[str, str] = field(default_factory=dict)


@dataclass
class Aggregation:
    """Result of one aggregation pass."""

    drafts: list[CommentDraft] = field(default_factory=list)
    participants: list[str] = field(default_factory=list)

    def __post_init__(self):
        self._seen = set(self.participants)

    def add_participant(self, handle: str) -> None:
        if handle not in self._seen:
            self._seen.add(handle)
            self.participants.append(handle)


def truncate(text: str, limit: int = DEFAULT_BODY_CHAR_LIMIT, marker: str = ELLIPSIS) -> str:
    """Cut text to `limit` characters, appending `marker` when cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + marker


def aggregate(
    threads: Sequence[ReviewThread],
    body_char_limit: int = DEFAULT_BODY_CHAR_LIMIT,
) -> Aggregation:
    """Build draft records and the participant set from review threads.

    Only the first comment of each thread is kept. Output order follows
    input order.
    """
    result = Aggregation()

    for thread in threads:
        comment = thread.first_comment
        if comment is None:
            logger.debug(f"Thread {thread.thread_id} has no comments, skipping")
            continue

        if len(thread.comments) > 1:
            logger.debug(
                f"Thread {thread.thread_id}: ignoring {len(thread.comments) - 1} follow-up replies"
            )

        result.add_participant(comment.author_login)
        draft = CommentDraft(
            comment_id=comment.comment_id,
            body=truncate(comment.body, body_char_limit),
            url=comment.url,
            proposer=comment.author_login,
            is_resolved=thread.is_resolved,
            glyphs={comment.author_login: PROPOSER_MARKER},
        )

        for reaction in comment.reactions:
            result.add_participant(reaction.user_login)
            raw = RawReaction(
                reactor=reaction.user_login,
                glyph=normalize(reaction.content),
                raw_kind=reaction.content,
            )
            if not raw.is_known:
                logger.warning(
                    f"Unrecognized reaction kind {reaction.content!r} "
                    f"from {reaction.user_login} on {comment.url}"
                )
            draft.reactions.append(raw)

        result.drafts.append(draft)

    return result
