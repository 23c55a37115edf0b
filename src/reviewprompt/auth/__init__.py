"""Authentication helpers for reviewprompt."""

from .token import create_auth_error_message, get_github_token

__all__ = ["get_github_token", "create_auth_error_message"]
