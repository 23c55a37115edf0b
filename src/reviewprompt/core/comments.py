"""Mention filtering and per-comment prompt formatting."""

import re
from collections.abc import Iterable

from .models import FilteredComment, ReviewComment

DEFAULT_MENTION = "[ai]"

_LEADING_BLANK_LINES = re.compile(r"^\s*\n+")
_TRAILING_BLANK_LINES = re.compile(r"\n+\s*$")


def filter_comments_by_mention(
    comments: Iterable[ReviewComment], mention: str = DEFAULT_MENTION
) -> list[FilteredComment]:
    """
    Keep comments whose body contains the mention marker.

    Matching is a literal, case-sensitive substring test. The input
    comments are not modified and their order is preserved.

    Args:
        comments: Review comments as returned by the API client
        mention: Marker to look for

    Returns:
        Matching comments narrowed to :class:`FilteredComment`
    """
    return [
        FilteredComment(
            id=comment.id,
            body=comment.body,
            path=comment.path,
            line=comment.line,
            start_line=comment.start_line,
            user=comment.user.login,
            html_url=comment.html_url,
            position=comment.position,
            original_position=comment.original_position,
            diff_hunk=comment.diff_hunk,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            is_resolved=comment.is_resolved,
        )
        for comment in comments
        if mention in comment.body
    ]


def clean_comment_body(body: str, mention: str = DEFAULT_MENTION) -> str:
    """Remove every occurrence of the marker and surrounding blank lines."""
    cleaned = body.replace(mention, "") if mention else body
    cleaned = cleaned.strip()
    cleaned = _LEADING_BLANK_LINES.sub("", cleaned)
    return _TRAILING_BLANK_LINES.sub("", cleaned)


def format_line_spec(comment: FilteredComment) -> str:
    """
    Render the line reference of a comment.

    Returns ``L<start>-L<end>`` for a multi-line range, ``L<n>`` otherwise.
    """
    start, end = comment.start_line, comment.line
    if start and end and start != end:
        return f"L{start}-L{end}"
    return f"L{end or start}"


def format_comment_for_prompt(comment: FilteredComment, mention: str = DEFAULT_MENTION) -> str:
    """
    Render a comment as a prompt block.

    Comments anchored to a file and line get a ``./<path>:<lines>`` header
    line; anything else is rendered as the cleaned body alone.

    Args:
        comment: Comment to render
        mention: Marker to strip from the body

    Returns:
        Prompt block text
    """
    body = clean_comment_body(comment.body, mention)

    if comment.path and (comment.line or comment.start_line):
        return f"./{comment.path}:{format_line_spec(comment)}\n{body}"

    return body
