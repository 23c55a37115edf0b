"""Exceptions raised by reviewprompt."""


class ReviewPromptError(Exception):
    """Base class for all reviewprompt errors."""

    pass


class AuthenticationError(ReviewPromptError):
    """Raised when no GitHub credential can be resolved."""

    pass


class InvalidPRUrlError(ReviewPromptError, ValueError):
    """Raised when a pull request URL cannot be parsed."""

    pass


class GitHubAPIError(ReviewPromptError):
    """Raised when a GitHub REST or GraphQL call fails."""

    pass


class ThreadNotFoundError(GitHubAPIError):
    """Raised when no review thread contains a given comment."""

    def __init__(self, comment_id: int):
        super().__init__(f"Could not find review thread for comment {comment_id}")
        self.comment_id = comment_id


class ClipboardError(ReviewPromptError):
    """Raised when the prompt cannot be copied to the clipboard."""

    pass
