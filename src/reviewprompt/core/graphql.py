"""GraphQL client for GitHub API operations."""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .. import __version__
from ..utils.rich_logger import get_logger

logger = get_logger(__name__)

# GraphQL API constants
GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_TIMEOUT = 30
THREADS_PAGE_SIZE = 100
COMMENTS_PER_THREAD = 100

COMMENT_FIELDS = """
            id
            databaseId
            body
            path
            line
            startLine
            author {
                login
            }
            url
            position
            originalPosition
            diffHunk
            createdAt
            updatedAt
"""

REVIEW_THREADS_QUERY = """
query GetReviewThreads($owner: String!, $repo: String!, $number: Int!, $cursor: String) {
    repository(owner: $owner, name: $repo) {
        pullRequest(number: $number) {
            reviewThreads(first: %d, after: $cursor) {
                nodes {
                    id
                    isResolved
                    comments(first: %d) {
                        nodes {%s}
                        pageInfo {
                            hasNextPage
                            endCursor
                        }
                    }
                }
                pageInfo {
                    hasNextPage
                    endCursor
                }
            }
        }
    }
}
""" % (THREADS_PAGE_SIZE, COMMENTS_PER_THREAD, COMMENT_FIELDS)

THREAD_COMMENTS_QUERY = """
query GetThreadComments($threadId: ID!, $cursor: String) {
    node(id: $threadId) {
        ... on PullRequestReviewThread {
            comments(first: %d, after: $cursor) {
                nodes {%s}
                pageInfo {
                    hasNextPage
                    endCursor
                }
            }
        }
    }
}
""" % (COMMENTS_PER_THREAD, COMMENT_FIELDS)

RESOLVE_THREAD_MUTATION = """
mutation ResolveReviewThread($threadId: ID!) {
    resolveReviewThread(input: {threadId: $threadId}) {
        thread {
            id
            isResolved
        }
    }
}
"""


@dataclass
class GraphQLError:
    """Represents a GraphQL error."""
    message: str
    type: str
    path: Optional[List[Any]] = None
    locations: Optional[List[Dict[str, Any]]] = None


@dataclass
class GraphQLResult:
    """Result of a GraphQL operation."""
    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[GraphQLError]] = None
    success: bool = True

    def __post_init__(self):
        """Set success based on error presence."""
        self.success = self.errors is None or len(self.errors) == 0

    @property
    def error_message(self) -> str:
        """All error messages joined into one line."""
        if not self.errors:
            return ""
        return "; ".join(error.message for error in self.errors)


class GraphQLClient:
    """GitHub GraphQL API client with error-as-values pattern."""

    def __init__(self, token: str, timeout: int = DEFAULT_TIMEOUT):
        """
        Initialize GraphQL client.

        Args:
            token: GitHub authentication token
            timeout: Request timeout in seconds
        """
        if not token or not token.strip():
            raise ValueError("GitHub token is required")

        self.token = token.strip()
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
            "Accept": "application/vnd.github.v4+json",
            "User-Agent": f"reviewprompt/{__version__}",
        })

    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> GraphQLResult:
        """
        Execute a GraphQL query or mutation.

        Args:
            query: GraphQL query string
            variables: Optional variables for the query

        Returns:
            GraphQLResult with data or errors
        """
        if not query or not query.strip():
            return GraphQLResult(
                errors=[GraphQLError("Query cannot be empty", "INVALID_INPUT")]
            )

        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            response = self.session.post(
                GITHUB_GRAPHQL_URL,
                json=payload,
                timeout=self.timeout,
            )

            # Status codes are kept in the message so callers can classify them
            if response.status_code == 401:
                return GraphQLResult(
                    errors=[GraphQLError("401 Bad credentials", "UNAUTHORIZED")]
                )

            if response.status_code == 403:
                return GraphQLResult(
                    errors=[GraphQLError("403 Forbidden", "FORBIDDEN")]
                )

            if not response.ok:
                return GraphQLResult(
                    errors=[GraphQLError(f"HTTP {response.status_code}: {response.text}", "HTTP_ERROR")]
                )

            result = response.json()
            errors = None

            if result.get("errors"):
                errors = [
                    GraphQLError(
                        message=err.get("message", "Unknown error"),
                        type=err.get("type", "GRAPHQL_ERROR"),
                        locations=err.get("locations"),
                        path=err.get("path"),
                    )
                    for err in result["errors"]
                ]

            return GraphQLResult(data=result.get("data"), errors=errors)

        except json.JSONDecodeError as e:
            logger.error("Invalid JSON response", error=str(e))
            return GraphQLResult(
                errors=[GraphQLError(f"Invalid response format: {e}", "JSON_ERROR")]
            )
        except requests.RequestException as e:
            logger.error("Network error in GraphQL request", error=str(e))
            return GraphQLResult(
                errors=[GraphQLError(f"Network error: {e}", "NETWORK_ERROR")]
            )

    def get_review_threads(self, owner: str, repo: str, pr_number: int) -> GraphQLResult:
        """
        Get all review threads of a pull request, following pagination.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            GraphQLResult whose data holds every thread node under
            ``repository.pullRequest.reviewThreads.nodes``
        """
        if not all([owner, repo, pr_number]):
            return GraphQLResult(
                errors=[GraphQLError("Owner, repo, and PR number are required", "INVALID_INPUT")]
            )

        if pr_number <= 0:
            return GraphQLResult(
                errors=[GraphQLError("PR number must be positive", "INVALID_INPUT")]
            )

        all_threads: List[Dict[str, Any]] = []
        cursor = None
        page = 0

        while True:
            variables = {
                "owner": owner.strip(),
                "repo": repo.strip(),
                "number": pr_number,
                "cursor": cursor,
            }

            result = self.execute(REVIEW_THREADS_QUERY, variables)
            page += 1

            if result.errors:
                return result

            repository = (result.data or {}).get("repository")
            pull_request = repository.get("pullRequest") if repository else None
            if not pull_request:
                # Let the caller decide how to report the missing PR
                return result

            threads_data = pull_request.get("reviewThreads") or {}
            for thread in threads_data.get("nodes") or []:
                comments = thread.get("comments") or {}
                comments_page = comments.get("pageInfo") or {}
                if comments_page.get("hasNextPage"):
                    more = self._get_remaining_comments(
                        thread["id"], comments_page.get("endCursor")
                    )
                    if more.errors:
                        return more
                    comments["nodes"] = (comments.get("nodes") or []) + more.data["nodes"]
                    comments["pageInfo"] = {"hasNextPage": False, "endCursor": None}
                all_threads.append(thread)

            page_info = threads_data.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")

        logger.debug("Fetched review threads", pages=page, threads=len(all_threads))

        return GraphQLResult(
            data={
                "repository": {
                    "pullRequest": {
                        "reviewThreads": {"nodes": all_threads},
                    },
                },
            }
        )

    def _get_remaining_comments(self, thread_id: str, cursor: Optional[str]) -> GraphQLResult:
        """Page through a thread's comments after ``cursor``; data is ``{"nodes": [...]}``."""
        nodes: List[Dict[str, Any]] = []

        while True:
            result = self.execute(
                THREAD_COMMENTS_QUERY, {"threadId": thread_id, "cursor": cursor}
            )
            if result.errors:
                return result

            thread = (result.data or {}).get("node") or {}
            comments = thread.get("comments")
            if comments is None:
                return GraphQLResult(
                    errors=[GraphQLError(f"Review thread {thread_id} not found", "NOT_FOUND")]
                )

            nodes.extend(comments.get("nodes") or [])

            page_info = comments.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")

        logger.debug("Fetched extra thread comments", thread=thread_id, comments=len(nodes))
        return GraphQLResult(data={"nodes": nodes})

    def resolve_thread(self, thread_id: str) -> GraphQLResult:
        """
        Resolve a pull request review thread.

        Args:
            thread_id: GitHub node ID of the thread to resolve

        Returns:
            GraphQLResult indicating success or failure
        """
        if not thread_id or not thread_id.strip():
            return GraphQLResult(
                errors=[GraphQLError("Thread ID is required", "INVALID_INPUT")]
            )

        return self.execute(RESOLVE_THREAD_MUTATION, {"threadId": thread_id.strip()})
