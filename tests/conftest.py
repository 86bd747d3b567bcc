"""Shared test fixtures."""

import pytest

from prconsensus.models import PullRequestTarget, Reaction, ReviewThread, ThreadComment


@pytest.fixture
def github_client_uninit():
    """Create an uninitialized GitHubClient with a fake PAT token.

    Use this for sync tests that don't need the async context manager.
    """
    from prconsensus.github_client import GitHubClient

    return GitHubClient(token="fake-token")


@pytest.fixture
def target():
    return PullRequestTarget(owner="acme", repo="widgets", pr_number=7)


@pytest.fixture
def make_thread():
    """Build a ReviewThread whose first comment carries the given reactions.

    Reactions are (content, login) pairs, e.g. [("THUMBS_UP", "bob")].
    """
    counter = {"n": 0}

    def _make(author="alice", reactions=(), resolved=False, body="Please rename this", replies=()):
        counter["n"] += 1
        n = counter["n"]
        comments = [
            ThreadComment(
                comment_id=f"C{n}",
                author_login=author,
                body=body,
                url=f"https://github.com/acme/widgets/pull/7#discussion_r{n}",
                reactions=[Reaction(content=c, user_login=u) for c, u in reactions],
            )
        ]
        for i, reply_author in enumerate(replies):
            comments.append(
                ThreadComment(
                    comment_id=f"C{n}-{i}",
                    author_login=reply_author,
                    body="reply",
                    url=f"https://github.com/acme/widgets/pull/7#discussion_r{n}{i}",
                    reactions=[Reaction(content="THUMBS_UP", user_login="zed")],
                )
            )
        return ReviewThread(thread_id=f"T{n}", is_resolved=resolved, comments=comments)

    return _make
