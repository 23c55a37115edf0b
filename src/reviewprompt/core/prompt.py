"""Assemble selected comments into a single prompt."""

from collections.abc import Callable, Sequence

import click

from .comments import DEFAULT_MENTION, format_comment_for_prompt
from .models import FilteredComment, PromptSection

PROMPT_SEPARATOR = "\n=====\n"
NO_COMMENTS_MESSAGE = "No comments found with the specified mention."


def build_sections(
    comments: Sequence[FilteredComment], mention: str = DEFAULT_MENTION
) -> list[PromptSection]:
    """Pair each comment with its rendered prompt block."""
    return [
        PromptSection(comment=comment, content=format_comment_for_prompt(comment, mention))
        for comment in comments
    ]


def build_prompt(comments: Sequence[FilteredComment], mention: str = DEFAULT_MENTION) -> str:
    """
    Build the prompt text for a list of comments.

    Args:
        comments: Selected comments, in output order
        mention: Marker to strip from each body

    Returns:
        Rendered blocks joined by a ``=====`` separator line, or an
        empty string when there are no comments
    """
    if not comments:
        return ""

    return PROMPT_SEPARATOR.join(section.content for section in build_sections(comments, mention))


def display_prompt(prompt: str, echo: Callable[[str], None] = click.echo) -> None:
    """
    Write the prompt to standard output.

    The prompt is written verbatim; a whitespace-only prompt is replaced
    by a notice.
    """
    if prompt.strip():
        echo(prompt)
    else:
        echo(NO_COMMENTS_MESSAGE)
