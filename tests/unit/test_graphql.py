"""Unit tests for GraphQL client functionality."""

import json
from unittest.mock import Mock, patch

import pytest
import requests

from conftest import make_comment_node, make_thread_node, threads_page

from reviewprompt import __version__
from reviewprompt.core.graphql import (
    GITHUB_GRAPHQL_URL,
    RESOLVE_THREAD_MUTATION,
    REVIEW_THREADS_QUERY,
    THREAD_COMMENTS_QUERY,
    GraphQLClient,
    GraphQLError,
    GraphQLResult,
)


def make_response(status_code=200, payload=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    response.json.return_value = payload if payload is not None else {}
    return response


class TestGraphQLResult:
    """Test GraphQLResult dataclass."""

    def test_data_only_is_success(self):
        result = GraphQLResult(data={"test": "value"})

        assert result.success is True
        assert result.errors is None
        assert result.error_message == ""

    def test_errors_mean_failure(self):
        result = GraphQLResult(errors=[GraphQLError("first", "A"), GraphQLError("second", "B")])

        assert result.success is False
        assert result.error_message == "first; second"

    def test_empty_errors_list_is_success(self):
        assert GraphQLResult(errors=[]).success is True


class TestGraphQLClientInit:
    """Test GraphQLClient construction."""

    def test_requires_token(self):
        with pytest.raises(ValueError, match="GitHub token is required"):
            GraphQLClient("")

    def test_whitespace_token(self):
        with pytest.raises(ValueError):
            GraphQLClient("   ")

    def test_session_headers(self):
        client = GraphQLClient("test_token", timeout=10)

        assert client.timeout == 10
        assert client.session.headers["Authorization"] == "Bearer test_token"
        assert client.session.headers["User-Agent"] == f"reviewprompt/{__version__}"


class TestGraphQLClientExecute:
    """Test GraphQLClient.execute."""

    def setup_method(self):
        self.client = GraphQLClient("test_token")

    def test_empty_query(self):
        result = self.client.execute("  ")

        assert not result.success
        assert result.errors[0].type == "INVALID_INPUT"

    def test_successful_query(self):
        with patch.object(self.client.session, "post") as mock_post:
            mock_post.return_value = make_response(payload={"data": {"viewer": {"login": "me"}}})

            result = self.client.execute("query { viewer { login } }", {"a": 1})

        assert result.success
        assert result.data == {"viewer": {"login": "me"}}
        mock_post.assert_called_once_with(
            GITHUB_GRAPHQL_URL,
            json={"query": "query { viewer { login } }", "variables": {"a": 1}},
            timeout=self.client.timeout,
        )

    def test_unauthorized(self):
        with patch.object(self.client.session, "post", return_value=make_response(401)):
            result = self.client.execute("query { x }")

        assert result.errors[0].type == "UNAUTHORIZED"
        assert "Bad credentials" in result.error_message

    def test_forbidden(self):
        with patch.object(self.client.session, "post", return_value=make_response(403)):
            result = self.client.execute("query { x }")

        assert result.errors[0].type == "FORBIDDEN"
        assert "403" in result.error_message

    def test_other_http_error(self):
        response = make_response(502, text="Bad Gateway")
        with patch.object(self.client.session, "post", return_value=response):
            result = self.client.execute("query { x }")

        assert result.errors[0].type == "HTTP_ERROR"
        assert result.error_message == "HTTP 502: Bad Gateway"

    def test_graphql_errors(self):
        payload = {
            "data": None,
            "errors": [{"message": "Field 'x' doesn't exist", "path": ["x"], "locations": [{"line": 1}]}],
        }
        with patch.object(self.client.session, "post", return_value=make_response(payload=payload)):
            result = self.client.execute("query { x }")

        assert not result.success
        error = result.errors[0]
        assert error.message == "Field 'x' doesn't exist"
        assert error.type == "GRAPHQL_ERROR"
        assert error.path == ["x"]

    def test_network_error(self):
        with patch.object(
            self.client.session, "post", side_effect=requests.ConnectionError("refused")
        ):
            result = self.client.execute("query { x }")

        assert result.errors[0].type == "NETWORK_ERROR"
        assert "refused" in result.error_message

    def test_invalid_json(self):
        response = make_response()
        response.json.side_effect = json.JSONDecodeError("Expecting value", "", 0)
        with patch.object(self.client.session, "post", return_value=response):
            result = self.client.execute("query { x }")

        assert result.errors[0].type == "JSON_ERROR"

    def test_invalid_json_from_requests(self):
        response = make_response()
        response.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", "", 0)
        with patch.object(self.client.session, "post", return_value=response):
            result = self.client.execute("query { x }")

        assert result.errors[0].type == "JSON_ERROR"
        assert result.error_message.startswith("Invalid response format: ")


class TestGetReviewThreads:
    """Test paginated review thread fetching."""

    def setup_method(self):
        self.client = GraphQLClient("test_token")

    def test_invalid_input(self):
        assert self.client.get_review_threads("", "repo", 1).errors[0].type == "INVALID_INPUT"
        assert self.client.get_review_threads("owner", "repo", -1).errors[0].type == "INVALID_INPUT"

    def test_single_page(self):
        nodes = [make_thread_node("T1", [make_comment_node(1)])]
        with patch.object(self.client, "execute", return_value=GraphQLResult(**threads_page(nodes))) as mock_execute:
            result = self.client.get_review_threads("owner", "repo", 53)

        assert result.success
        assert result.data["repository"]["pullRequest"]["reviewThreads"]["nodes"] == nodes
        mock_execute.assert_called_once_with(
            REVIEW_THREADS_QUERY,
            {"owner": "owner", "repo": "repo", "number": 53, "cursor": None},
        )

    def test_follows_pagination(self):
        first = [make_thread_node("T1", [make_comment_node(1)])]
        second = [make_thread_node("T2", [make_comment_node(2)])]
        pages = [
            GraphQLResult(**threads_page(first, has_next_page=True, end_cursor="c1")),
            GraphQLResult(**threads_page(second)),
        ]
        with patch.object(self.client, "execute", side_effect=pages) as mock_execute:
            result = self.client.get_review_threads("owner", "repo", 53)

        nodes = result.data["repository"]["pullRequest"]["reviewThreads"]["nodes"]
        assert [n["id"] for n in nodes] == ["T1", "T2"]
        assert mock_execute.call_count == 2
        assert mock_execute.call_args_list[1].args[1]["cursor"] == "c1"

    def test_error_on_later_page(self):
        pages = [
            GraphQLResult(**threads_page([], has_next_page=True, end_cursor="c1")),
            GraphQLResult(errors=[GraphQLError("boom", "GRAPHQL_ERROR")]),
        ]
        with patch.object(self.client, "execute", side_effect=pages):
            result = self.client.get_review_threads("owner", "repo", 53)

        assert not result.success
        assert result.error_message == "boom"

    def test_follows_thread_comment_pagination(self):
        thread = make_thread_node("T1", [make_comment_node(1)])
        thread["comments"]["pageInfo"] = {"hasNextPage": True, "endCursor": "cc1"}
        more_comments = {
            "node": {
                "comments": {
                    "nodes": [make_comment_node(2)],
                    "pageInfo": {"hasNextPage": False, "endCursor": "cc2"},
                }
            }
        }
        pages = [
            GraphQLResult(**threads_page([thread])),
            GraphQLResult(data=more_comments),
        ]
        with patch.object(self.client, "execute", side_effect=pages) as mock_execute:
            result = self.client.get_review_threads("owner", "repo", 53)

        nodes = result.data["repository"]["pullRequest"]["reviewThreads"]["nodes"]
        assert [c["databaseId"] for c in nodes[0]["comments"]["nodes"]] == [1, 2]
        assert mock_execute.call_args_list[1].args == (
            THREAD_COMMENTS_QUERY,
            {"threadId": "T1", "cursor": "cc1"},
        )

    def test_thread_comment_page_error(self):
        thread = make_thread_node("T1", [make_comment_node(1)])
        thread["comments"]["pageInfo"] = {"hasNextPage": True, "endCursor": "cc1"}
        pages = [
            GraphQLResult(**threads_page([thread])),
            GraphQLResult(errors=[GraphQLError("boom", "GRAPHQL_ERROR")]),
        ]
        with patch.object(self.client, "execute", side_effect=pages):
            result = self.client.get_review_threads("owner", "repo", 53)

        assert result.error_message == "boom"

    def test_missing_pull_request_returns_raw_result(self):
        raw = GraphQLResult(data={"repository": {"pullRequest": None}})
        with patch.object(self.client, "execute", return_value=raw):
            result = self.client.get_review_threads("owner", "repo", 53)

        assert result is raw


class TestResolveThread:
    """Test the resolveReviewThread mutation."""

    def setup_method(self):
        self.client = GraphQLClient("test_token")

    def test_requires_thread_id(self):
        assert self.client.resolve_thread(" ").errors[0].type == "INVALID_INPUT"

    def test_runs_mutation(self):
        expected = GraphQLResult(data={"resolveReviewThread": {"thread": {"id": "T1", "isResolved": True}}})
        with patch.object(self.client, "execute", return_value=expected) as mock_execute:
            result = self.client.resolve_thread("T1")

        assert result is expected
        mock_execute.assert_called_once_with(RESOLVE_THREAD_MUTATION, {"threadId": "T1"})
