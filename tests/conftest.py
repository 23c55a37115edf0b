"""Pytest configuration and shared fixtures for reviewprompt tests."""

import pytest

from reviewprompt.core.models import CommentUser, FilteredComment, ReviewComment


def make_review_comment(comment_id=1, body="[ai] fix this", **overrides):
    """Build a ReviewComment with sensible defaults."""
    fields = {
        "id": comment_id,
        "body": body,
        "user": CommentUser(login="reviewer1"),
        "html_url": f"https://github.com/owner/repo/pull/53#discussion_r{comment_id}",
        "created_at": "2024-01-15T10:30:00Z",
        "updated_at": "2024-01-15T10:35:00Z",
        "path": "src/main.py",
        "line": 42,
    }
    fields.update(overrides)
    return ReviewComment(**fields)


def make_filtered_comment(comment_id=1, body="[ai] fix this", **overrides):
    """Build a FilteredComment with sensible defaults."""
    fields = {
        "id": comment_id,
        "body": body,
        "user": "reviewer1",
        "html_url": f"https://github.com/owner/repo/pull/53#discussion_r{comment_id}",
        "created_at": "2024-01-15T10:30:00Z",
        "updated_at": "2024-01-15T10:35:00Z",
        "path": "src/main.py",
        "line": 42,
    }
    fields.update(overrides)
    return FilteredComment(**fields)


def make_thread_node(thread_id, comments, is_resolved=False):
    """Build a reviewThreads node as GitHub's GraphQL API returns it."""
    return {"id": thread_id, "isResolved": is_resolved, "comments": {"nodes": comments}}


def make_comment_node(database_id, body="[ai] fix this", **overrides):
    """Build a review comment node as GitHub's GraphQL API returns it."""
    node = {
        "id": f"PRRC_{database_id}",
        "databaseId": database_id,
        "body": body,
        "path": "src/main.py",
        "line": 42,
        "startLine": None,
        "author": {"login": "reviewer1"},
        "url": f"https://github.com/owner/repo/pull/53#discussion_r{database_id}",
        "position": 5,
        "originalPosition": 5,
        "diffHunk": "@@ -1,3 +1,4 @@",
        "createdAt": "2024-01-15T10:30:00Z",
        "updatedAt": "2024-01-15T10:35:00Z",
    }
    node.update(overrides)
    return node


def threads_page(nodes, has_next_page=False, end_cursor=None):
    """Wrap thread nodes in a full reviewThreads response page."""
    return {
        "data": {
            "repository": {
                "pullRequest": {
                    "reviewThreads": {
                        "nodes": nodes,
                        "pageInfo": {"hasNextPage": has_next_page, "endCursor": end_cursor},
                    }
                }
            }
        }
    }


@pytest.fixture
def sample_review_comments():
    """Review comments as returned by the API client."""
    return [
        make_review_comment(1, "[ai] Add error handling", path="src/main.py", line=42),
        make_review_comment(2, "Looks good to me", path="src/utils.py", line=10),
        make_review_comment(
            3, "[ai]\nRename this function", path="src/utils.py", line=20, start_line=15
        ),
        make_review_comment(4, "[ai] Update the README", path=None, line=None),
    ]


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


def pytest_collection_modifyitems(config, items):
    """Add markers based on file location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
