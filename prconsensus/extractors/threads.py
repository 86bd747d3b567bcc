"""Review thread extractors (GraphQL `reviewThreads` nodes)."""

from ..models import Reaction, ReviewThread, ThreadComment

# GitHub shows deleted accounts as "ghost"; GraphQL returns a null author
GHOST_LOGIN = "ghost"


def _login(actor: dict | None) -> str:
    if not actor:
        return GHOST_LOGIN
    return actor.get("login") or GHOST_LOGIN


def extract_reaction(reaction_data: dict) -> Reaction:
    """Extract a reaction from a GraphQL `Reaction` node."""
    return Reaction(
        content=reaction_data.get("content", ""),
        user_login=_login(reaction_data.get("user")),
    )


def extract_thread_comment(comment_data: dict) -> ThreadComment:
    """Extract a comment from a GraphQL `PullRequestReviewComment` node."""
    reactions = (comment_data.get("reactions") or {}).get("nodes", [])

    return ThreadComment(
        comment_id=str(comment_data["id"]),
        author_login=_login(comment_data.get("author")),
        body=comment_data.get("body") or "",
        url=comment_data.get("url", ""),
        reactions=[extract_reaction(r) for r in reactions],
    )


def extract_review_thread(thread_data: dict) -> ReviewThread:
    """Extract a review thread from a GraphQL `PullRequestReviewThread` node."""
    comments = (thread_data.get("comments") or {}).get("nodes", [])

    return ReviewThread(
        thread_id=str(thread_data["id"]),
        is_resolved=bool(thread_data.get("isResolved", False)),
        is_outdated=bool(thread_data.get("isOutdated", False)),
        path=thread_data.get("path"),
        comments=[extract_thread_comment(c) for c in comments],
    )
