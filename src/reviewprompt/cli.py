#!/usr/bin/env python3
"""Command-line interface for reviewprompt."""

import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

import click
from rich.console import Console

from . import __version__
from .auth.token import get_github_token
from .core.comments import DEFAULT_MENTION, filter_comments_by_mention
from .core.errors import ClipboardError, ReviewPromptError
from .core.github import GitHubClient, parse_pr_url
from .core.models import FilteredComment, PRInfo
from .core.prompt import build_prompt, display_prompt
from .ui.display import DisplayManager
from .ui.selector import select_comments
from .utils.clipboard import ClipboardManager
from .utils.config import ConfigManager
from .utils.rich_logger import get_logger

console = Console(highlight=False)
error_console = Console(stderr=True, highlight=False)

logger = get_logger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@dataclass
class CLIConfig:
    """Options shared by every command."""
    pr_url: str
    mention: Optional[str] = None
    interactive: bool = False
    select_all: bool = False
    resolve: bool = False
    delete: bool = False
    clipboard: bool = False
    verbose: bool = False
    config: Optional[str] = None


@dataclass
class CommandContext:
    """Services and resolved settings for one invocation."""
    cfg: CLIConfig
    config_manager: ConfigManager
    display: DisplayManager
    mention: str


class DefaultCommandGroup(click.Group):
    """Group that falls back to a default command.

    ``reviewprompt <pr-url> ...`` runs the default command while
    ``reviewprompt resolve <pr-url>`` still dispatches to ``resolve``.
    """

    def __init__(self, *args, default_command: str = "prompt", **kwargs):
        super().__init__(*args, **kwargs)
        self.default_command = default_command

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if args and args[0] not in self.commands and args[0] not in ("--version", *ctx.help_option_names):
            args = [self.default_command, *args]
        return super().parse_args(ctx, args)


def common_options(func: Callable) -> Callable:
    """Options accepted by every command."""
    func = click.option(
        "--config", type=click.Path(dir_okay=False), help="Path to config file", metavar="PATH"
    )(func)
    func = click.option(
        "-v", "--verbose", is_flag=True, help="Show debug logging on stderr"
    )(func)
    func = click.option(
        "-m", "--mention",
        help=f"Mention marker to filter comments by (default: {DEFAULT_MENTION})",
        metavar="MARKER",
    )(func)
    return click.argument("pr_url", metavar="PR_URL")(func)


@click.group(cls=DefaultCommandGroup, context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, prog_name="reviewprompt")
def main() -> None:
    """
    GitHub PR review comments to AI prompt CLI tool

    Collects review comments containing a mention marker (default "[ai]")
    and turns them into a prompt for an AI assistant.

    Examples:
        reviewprompt https://github.com/owner/repo/pull/53
        reviewprompt https://github.com/owner/repo/pull/53 -i -c
        reviewprompt https://github.com/owner/repo/pull/53 --resolve
        reviewprompt resolve https://github.com/owner/repo/pull/53 --all
        reviewprompt delete https://github.com/owner/repo/pull/53 -m "@ai"
    """


@main.command("prompt", hidden=True, context_settings=CONTEXT_SETTINGS)
@common_options
@click.option("-i", "--interactive", is_flag=True, help="Choose comments interactively")
@click.option("-r", "--resolve", is_flag=True, help="Resolve comments after building the prompt")
@click.option("-d", "--delete", is_flag=True, help="Delete comments after building the prompt")
@click.option("-c", "--clipboard", is_flag=True, help="Copy the prompt to the clipboard")
def prompt_command(**kwargs) -> None:
    """Build a prompt from review comments of PR_URL."""
    _run(CLIConfig(**kwargs), _execute_prompt)


@main.command("resolve", context_settings=CONTEXT_SETTINGS)
@common_options
@click.option(
    "-a", "--all", "select_all", is_flag=True, help="Resolve all matching comments without asking"
)
def resolve_command(**kwargs) -> None:
    """Resolve review threads of comments containing the mention."""
    _run(CLIConfig(**kwargs), _execute_resolve)


@main.command("delete", context_settings=CONTEXT_SETTINGS)
@common_options
@click.option(
    "-a", "--all", "select_all", is_flag=True, help="Delete all matching comments without asking"
)
def delete_command(**kwargs) -> None:
    """Delete comments containing the mention."""
    _run(CLIConfig(**kwargs), _execute_delete)


def _run(cfg: CLIConfig, handler: Callable[[CommandContext], None]) -> None:
    """Set up services, run a command handler and report failures."""
    config_manager = ConfigManager(config_path=cfg.config)
    config_manager.setup_logging(verbose=cfg.verbose)

    ctx = CommandContext(
        cfg=cfg,
        config_manager=config_manager,
        display=DisplayManager(console, error_console),
        mention=cfg.mention or config_manager.get("defaults.mention", DEFAULT_MENTION),
    )

    try:
        handler(ctx)
    except KeyboardInterrupt:
        ctx.display.notice("\nInterrupted by user")
        sys.exit(130)
    except ReviewPromptError as e:
        logger.debug("Command failed", error_type=e.__class__.__name__)
        ctx.display.error(str(e))
        sys.exit(1)
    except Exception as e:
        ctx.display.error(str(e) or e.__class__.__name__)
        if cfg.verbose:
            error_console.print_exception()
        sys.exit(1)


def _load_comments(ctx: CommandContext) -> tuple[GitHubClient, PRInfo, list[FilteredComment]]:
    """Parse the PR URL, fetch its review comments and filter them by mention."""
    pr_info = parse_pr_url(ctx.cfg.pr_url)
    client = GitHubClient(get_github_token())

    with ctx.display.spinner(f"Fetching review comments for PR #{pr_info.pull_number}..."):
        comments = client.get_review_comments(pr_info)

    filtered = filter_comments_by_mention(comments, ctx.mention)
    logger.debug("Filtered comments", total=len(comments), matched=len(filtered), mention=ctx.mention)
    return client, pr_info, filtered


def _choose_comments(
    ctx: CommandContext, comments: list[FilteredComment], interactive: bool, purpose: str
) -> list[FilteredComment]:
    """Return all comments, or the ones the user picks when interactive."""
    if not interactive:
        return comments

    return select_comments(
        comments,
        heading=f'Select comments with "{ctx.mention}" {purpose}:',
        mention=ctx.mention,
    )


def _apply_to_comments(
    ctx: CommandContext,
    comments: list[FilteredComment],
    action: Callable[[int], None],
    verb: str,
    past_tense: str,
) -> None:
    """Run ``action`` on each comment id in order; the first failure aborts the batch."""
    total = len(comments)
    with ctx.display.batch_progress(f"{verb} comments", total) as (progress, task):
        for index, comment in enumerate(comments, start=1):
            progress.update(task, description=f"{verb} comment {index}/{total}")
            action(comment.id)
            progress.advance(task)

    ctx.display.success(f"{past_tense} {total} comment(s).")


def _gather(ctx: CommandContext, interactive: bool, purpose: str):
    """Shared front half of every command.

    Returns:
        (client, pr_info, selected) or None when there is nothing to do
    """
    client, pr_info, filtered = _load_comments(ctx)

    if not filtered:
        ctx.display.notice(f'No comments found with mention "{ctx.mention}"')
        return None

    selected = _choose_comments(ctx, filtered, interactive, purpose)
    if not selected:
        ctx.display.notice("No comments selected.")
        return None

    return client, pr_info, selected


def _execute_prompt(ctx: CommandContext) -> None:
    """Build the prompt and optionally resolve or delete the comments."""
    gathered = _gather(ctx, ctx.cfg.interactive, "to include in prompt")
    if gathered is None:
        return
    client, pr_info, selected = gathered

    prompt = build_prompt(selected, ctx.mention)

    if ctx.cfg.clipboard:
        timeout = ctx.config_manager.get("clipboard.timeout_seconds", 5.0)
        clipboard = ClipboardManager(timeout=timeout)
        if not clipboard.copy(prompt):
            raise ClipboardError(f"Failed to copy to clipboard: {clipboard.last_error}")
        ctx.display.success(f"Copied {len(selected)} comment(s) to clipboard.")
    else:
        display_prompt(prompt)

    if ctx.cfg.resolve:
        _apply_to_comments(
            ctx, selected, lambda cid: client.resolve_comment(pr_info, cid), "Resolving", "Resolved"
        )
    elif ctx.cfg.delete:
        _apply_to_comments(
            ctx, selected, lambda cid: client.delete_comment(pr_info, cid), "Deleting", "Deleted"
        )


def _execute_resolve(ctx: CommandContext) -> None:
    """Resolve the review thread of each selected comment."""
    gathered = _gather(ctx, not ctx.cfg.select_all, "to resolve")
    if gathered is None:
        return
    client, pr_info, selected = gathered

    _apply_to_comments(
        ctx, selected, lambda cid: client.resolve_comment(pr_info, cid), "Resolving", "Resolved"
    )


def _execute_delete(ctx: CommandContext) -> None:
    """Delete each selected comment."""
    gathered = _gather(ctx, not ctx.cfg.select_all, "to delete")
    if gathered is None:
        return
    client, pr_info, selected = gathered

    _apply_to_comments(
        ctx, selected, lambda cid: client.delete_comment(pr_info, cid), "Deleting", "Deleted"
    )


if __name__ == "__main__":
    main()
