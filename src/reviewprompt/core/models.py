"""Data model for review comments and pull request references."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PRInfo:
    """Owner, repository and number of a pull request."""

    owner: str
    repo: str
    pull_number: int


@dataclass(frozen=True)
class CommentUser:
    """Author of a review comment."""

    login: str


@dataclass(frozen=True)
class ReviewComment:
    """A review comment as returned by GitHub.

    ``path``, ``line``, ``start_line`` and ``diff_hunk`` are ``None`` when
    GitHub omits them. ``position`` and ``original_position`` are ``None``
    only when GitHub reports null; zero is a valid position.
    """

    id: int
    body: str
    user: CommentUser
    html_url: str
    created_at: str
    updated_at: str
    path: Optional[str] = None
    line: Optional[int] = None
    start_line: Optional[int] = None
    position: Optional[int] = None
    original_position: Optional[int] = None
    diff_hunk: Optional[str] = None
    is_resolved: Optional[bool] = None


@dataclass(frozen=True)
class FilteredComment:
    """A review comment that matched the mention marker.

    Same fields as :class:`ReviewComment` with ``user`` narrowed to the
    author's login.
    """

    id: int
    body: str
    user: str
    html_url: str
    created_at: str
    updated_at: str
    path: Optional[str] = None
    line: Optional[int] = None
    start_line: Optional[int] = None
    position: Optional[int] = None
    original_position: Optional[int] = None
    diff_hunk: Optional[str] = None
    is_resolved: Optional[bool] = None


@dataclass(frozen=True)
class PromptSection:
    """A selected comment paired with its rendered prompt block."""

    comment: FilteredComment
    content: str
