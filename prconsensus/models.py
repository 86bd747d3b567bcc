"""Pydantic models for review thread data handed over by the GitHub client."""

from pydantic import BaseModel, Field


class PullRequestTarget(BaseModel):
    """One (repository, pull request) unit of work."""
    owner: str
    repo: str
    pr_number: int

    @property
    def label(self) -> str:
        return f"{self.owner}/{self.repo}#{self.pr_number}"


class Reaction(BaseModel):
    """Emoji reaction left on a comment."""
    content: str
    user_login: str


class ThreadComment(BaseModel):
    """Comment inside a review thread."""
    comment_id: str
    author_login: str
    body: str
    url: str
    reactions: list[Reaction] = Field(default_factory=list)


class ReviewThread(BaseModel):
    """Review thread anchored to a code location."""
    thread_id: str
    is_resolved: bool
    is_outdated: bool = False
    path: str | None = None
    comments: list[ThreadComment] = Field(default_factory=list)

    @property
    def first_comment(self) -> ThreadComment | None:
        """The comment that opened the thread; replies are not scored."""
        return self.comments[0] if self.comments else None
