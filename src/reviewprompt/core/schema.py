"""Response shapes for the GitHub GraphQL review-thread query.

Responses are validated once here; everything downstream works with
fully-typed objects instead of probing nested dictionaries.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Author(BaseModel):
    """Comment author (``null`` for deleted accounts)."""

    login: str


class ThreadComment(BaseModel):
    """A ``PullRequestReviewComment`` node."""

    id: str
    database_id: int = Field(alias="databaseId")
    body: str = ""
    path: Optional[str] = None
    line: Optional[int] = None
    start_line: Optional[int] = Field(default=None, alias="startLine")
    author: Optional[Author] = None
    url: str = ""
    position: Optional[int] = None
    original_position: Optional[int] = Field(default=None, alias="originalPosition")
    diff_hunk: Optional[str] = Field(default=None, alias="diffHunk")
    created_at: str = Field(default="", alias="createdAt")
    updated_at: str = Field(default="", alias="updatedAt")


class ThreadCommentConnection(BaseModel):
    nodes: list[ThreadComment] = Field(default_factory=list)


class PageInfo(BaseModel):
    has_next_page: bool = Field(default=False, alias="hasNextPage")
    end_cursor: Optional[str] = Field(default=None, alias="endCursor")


class ReviewThread(BaseModel):
    """A ``PullRequestReviewThread`` node."""

    id: str
    is_resolved: bool = Field(default=False, alias="isResolved")
    comments: ThreadCommentConnection = Field(default_factory=ThreadCommentConnection)

    def contains(self, comment_id: int) -> bool:
        """Return True if a comment with this database id belongs to the thread."""
        return any(comment.database_id == comment_id for comment in self.comments.nodes)


class ReviewThreadConnection(BaseModel):
    nodes: list[ReviewThread] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")


class PullRequestNode(BaseModel):
    review_threads: ReviewThreadConnection = Field(alias="reviewThreads")


class RepositoryNode(BaseModel):
    pull_request: Optional[PullRequestNode] = Field(default=None, alias="pullRequest")


class ReviewThreadsResponse(BaseModel):
    """Top-level ``data`` object of the review-thread query."""

    repository: Optional[RepositoryNode] = None


class ResolvedThread(BaseModel):
    id: str
    is_resolved: bool = Field(alias="isResolved")


class ResolveThreadPayload(BaseModel):
    thread: ResolvedThread


class ResolveThreadResponse(BaseModel):
    """Top-level ``data`` object of the ``resolveReviewThread`` mutation."""

    resolve_review_thread: ResolveThreadPayload = Field(alias="resolveReviewThread")
