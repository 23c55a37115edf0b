"""GitHub token resolution and authentication error messages."""

import os
import subprocess
from collections.abc import Mapping
from typing import Optional

from ..utils.rich_logger import get_logger

logger = get_logger(__name__)

# Constants
TOKEN_ENV_VAR = "GITHUB_TOKEN"
SUBPROCESS_TIMEOUT = 5  # seconds
GH_CLI_AUTH_TOKEN_CMD = ["gh", "auth", "token"]

MISSING_TOKEN_MESSAGE = (
    "GitHub authentication required. Please set GITHUB_TOKEN environment variable "
    "or authenticate with GitHub CLI (gh auth login)."
)

AUTH_FAILED_MESSAGE = "\n".join([
    "GitHub authentication failed. Please ensure you have a valid token:",
    "1. Set GITHUB_TOKEN environment variable with a personal access token",
    "2. Or authenticate with GitHub CLI: gh auth login",
    "",
    "For GitHub.com, create a token at: https://github.com/settings/tokens",
    "For GitHub Enterprise, contact your administrator for token generation.",
])

FORBIDDEN_MESSAGE = "\n".join([
    "GitHub API rate limit exceeded or insufficient permissions.",
    "Please check your token permissions or wait before retrying.",
])


def get_github_token(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Resolve a GitHub token.

    Priority:
    1. GITHUB_TOKEN environment variable
    2. ``gh auth token`` output

    Args:
        environ: Environment mapping to read (defaults to ``os.environ``)

    Returns:
        Token string, or None if no source provides one
    """
    env = os.environ if environ is None else environ

    if env_token := env.get(TOKEN_ENV_VAR):
        logger.debug("Found token from environment variable", source=TOKEN_ENV_VAR)
        return env_token

    if gh_token := _get_gh_cli_token():
        logger.debug("Found token from gh CLI")
        return gh_token

    logger.debug("No GitHub token found", checked_sources=[TOKEN_ENV_VAR, "gh_cli"])
    return None


def _get_gh_cli_token() -> Optional[str]:
    """
    Try to get a token from the gh CLI.

    Returns:
        Trimmed token string if gh printed one, None otherwise
    """
    try:
        # Fixed argv, no shell
        result = subprocess.run(
            GH_CLI_AUTH_TOKEN_CMD,
            capture_output=True,
            text=True,
            timeout=SUBPROCESS_TIMEOUT,
            check=False,
        )
    except (subprocess.SubprocessError, OSError) as e:
        logger.debug("gh CLI token lookup failed", error=str(e), error_type=e.__class__.__name__)
        return None

    token = result.stdout.strip() if result.stdout else ""
    if result.returncode == 0 and token:
        return token
    return None


def create_auth_error_message(message: str) -> Optional[str]:
    """
    Map an API error message to a remediation message.

    Args:
        message: Error message from the transport layer

    Returns:
        Remediation text for authentication or rate-limit failures,
        None for any other error
    """
    if "Bad credentials" in message or "401" in message:
        return AUTH_FAILED_MESSAGE

    if "403" in message:
        return FORBIDDEN_MESSAGE

    return None
