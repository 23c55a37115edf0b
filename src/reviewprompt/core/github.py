"""GitHub API client wrapper."""

import re
from typing import Optional

import requests
from github import Auth, Github, GithubException
from pydantic import ValidationError

from ..auth.token import MISSING_TOKEN_MESSAGE, create_auth_error_message
from ..utils.rich_logger import get_logger
from .errors import (
    AuthenticationError,
    GitHubAPIError,
    InvalidPRUrlError,
    ThreadNotFoundError,
)
from .graphql import GraphQLClient, GraphQLResult
from .models import CommentUser, PRInfo, ReviewComment
from .schema import ResolveThreadResponse, ReviewThread, ReviewThreadsResponse, ThreadComment

logger = get_logger(__name__)

PR_URL_PATTERN = re.compile(r"github\.com/([^/]+)/([^/]+)/pull/(\d+)")
UNKNOWN_AUTHOR = "unknown"


def _api_error(operation: str, error: Exception) -> GitHubAPIError:
    """
    Reword a transport error for the user.

    Args:
        operation: Human readable operation name, e.g. "resolve comment"
        error: The original error

    Returns:
        GitHubAPIError carrying either a remediation message or
        "Failed to <operation>: <detail>"
    """
    detail = str(error).strip()
    if not detail:
        return GitHubAPIError(f"Failed to {operation}")

    if remediation := create_auth_error_message(detail):
        return GitHubAPIError(remediation)

    return GitHubAPIError(f"Failed to {operation}: {detail}")


def parse_pr_url(url: str) -> PRInfo:
    """
    Parse a pull request URL.

    Args:
        url: URL of the form ``https://github.com/<owner>/<repo>/pull/<number>``;
            trailing path segments such as ``/files`` are ignored

    Returns:
        PRInfo for the pull request

    Raises:
        InvalidPRUrlError: If owner, repo or number cannot be extracted
    """
    match = PR_URL_PATTERN.search(url or "")
    if not match:
        raise InvalidPRUrlError("Invalid GitHub PR URL format")

    return PRInfo(
        owner=match.group(1),
        repo=match.group(2),
        pull_number=int(match.group(3)),
    )


class GitHubClient:
    """Wrapper for the GitHub operations reviewprompt needs."""

    def __init__(self, token: Optional[str], graphql_client: Optional[GraphQLClient] = None):
        """
        Initialize GitHubClient.

        Args:
            token: GitHub authentication token, as resolved by
                :func:`reviewprompt.auth.token.get_github_token`
            graphql_client: Optional pre-built GraphQL client

        Raises:
            AuthenticationError: If no token is available
        """
        if not token or not token.strip():
            raise AuthenticationError(MISSING_TOKEN_MESSAGE)

        # Store token privately to avoid accidental exposure
        self._token = token.strip()
        self.github = Github(auth=Auth.Token(self._token))
        self.graphql = graphql_client or GraphQLClient(self._token)

    @staticmethod
    def parse_pr_url(url: str) -> PRInfo:
        """Parse a pull request URL. See :func:`parse_pr_url`."""
        return parse_pr_url(url)

    def get_review_comments(self, pr_info: PRInfo) -> list[ReviewComment]:
        """
        Get every review comment on a pull request.

        Args:
            pr_info: Pull request reference

        Returns:
            Review comments in thread order, each annotated with whether its
            thread is resolved

        Raises:
            GitHubAPIError: If the request fails
        """
        operation = "fetch PR comments"
        threads = self._fetch_threads(pr_info, operation)

        comments = [
            self._to_review_comment(comment, thread.is_resolved)
            for thread in threads
            for comment in thread.comments.nodes
        ]
        logger.debug("Fetched review comments", pr=pr_info.pull_number, count=len(comments))
        return comments

    def resolve_comment(self, pr_info: PRInfo, comment_id: int) -> None:
        """
        Resolve the review thread containing a comment.

        Args:
            pr_info: Pull request reference
            comment_id: Numeric (REST) id of the comment

        Raises:
            ThreadNotFoundError: If no thread contains the comment
            GitHubAPIError: If a request fails
        """
        operation = "resolve comment"
        threads = self._fetch_threads(pr_info, operation)

        thread = next((t for t in threads if t.contains(comment_id)), None)
        if thread is None:
            raise ThreadNotFoundError(comment_id)

        result = self.graphql.resolve_thread(thread.id)
        self._raise_for_result(result, operation)
        try:
            ResolveThreadResponse.model_validate(result.data or {})
        except ValidationError as e:
            raise GitHubAPIError(f"Failed to {operation}: unexpected response ({e.error_count()} errors)") from e

        logger.info("Resolved review thread", comment_id=comment_id, thread_id=thread.id)

    def delete_comment(self, pr_info: PRInfo, comment_id: int) -> None:
        """
        Permanently delete a review comment.

        Args:
            pr_info: Pull request reference
            comment_id: Numeric (REST) id of the comment

        Raises:
            GitHubAPIError: If the request fails
        """
        try:
            repository = self.github.get_repo(f"{pr_info.owner}/{pr_info.repo}")
            pull = repository.get_pull(pr_info.pull_number)
            pull.get_review_comment(comment_id).delete()
        except (GithubException, requests.RequestException) as e:
            raise _api_error("delete comment", e) from e

        logger.info("Deleted review comment", comment_id=comment_id)

    def _fetch_threads(self, pr_info: PRInfo, operation: str) -> list[ReviewThread]:
        """Fetch and decode all review threads of a pull request."""
        result = self.graphql.get_review_threads(
            pr_info.owner, pr_info.repo, pr_info.pull_number
        )
        self._raise_for_result(result, operation)

        try:
            response = ReviewThreadsResponse.model_validate(result.data or {})
        except ValidationError as e:
            raise GitHubAPIError(f"Failed to {operation}: unexpected response ({e.error_count()} errors)") from e

        if response.repository is None or response.repository.pull_request is None:
            raise GitHubAPIError(
                f"Failed to {operation}: pull request "
                f"{pr_info.owner}/{pr_info.repo}#{pr_info.pull_number} not found"
            )

        return response.repository.pull_request.review_threads.nodes

    @staticmethod
    def _raise_for_result(result: GraphQLResult, operation: str) -> None:
        if not result.success:
            raise _api_error(operation, GitHubAPIError(result.error_message))

    @staticmethod
    def _to_review_comment(comment: ThreadComment, is_resolved: bool) -> ReviewComment:
        return ReviewComment(
            id=comment.database_id,
            body=comment.body,
            path=comment.path or None,
            line=comment.line or None,
            start_line=comment.start_line or None,
            user=CommentUser(login=comment.author.login if comment.author else UNKNOWN_AUTHOR),
            html_url=comment.url,
            position=comment.position,
            original_position=comment.original_position,
            diff_hunk=comment.diff_hunk or None,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            is_resolved=is_resolved,
        )
