"""Core functionality for reviewprompt."""

from .comments import clean_comment_body, filter_comments_by_mention, format_comment_for_prompt
from .github import GitHubClient
from .prompt import build_prompt, display_prompt

__all__ = [
    "GitHubClient",
    "filter_comments_by_mention",
    "clean_comment_body",
    "format_comment_for_prompt",
    "build_prompt",
    "display_prompt",
]
