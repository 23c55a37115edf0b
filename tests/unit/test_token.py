"""
Unit tests for auth.token module.

Tests token resolution order and authentication error messages.
"""

import subprocess
import unittest
from unittest.mock import Mock, patch

from reviewprompt.auth.token import (
    AUTH_FAILED_MESSAGE,
    FORBIDDEN_MESSAGE,
    GH_CLI_AUTH_TOKEN_CMD,
    SUBPROCESS_TIMEOUT,
    create_auth_error_message,
    get_github_token,
)


class TestGetGithubToken(unittest.TestCase):
    """Test get_github_token function."""

    @patch("reviewprompt.auth.token.subprocess.run")
    def test_environment_variable_wins(self, mock_run):
        token = get_github_token({"GITHUB_TOKEN": "env_token"})

        self.assertEqual(token, "env_token")
        mock_run.assert_not_called()

    @patch("reviewprompt.auth.token.subprocess.run")
    def test_falls_back_to_gh_cli(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="gh_token\n")

        token = get_github_token({})

        self.assertEqual(token, "gh_token")
        mock_run.assert_called_once_with(
            GH_CLI_AUTH_TOKEN_CMD,
            capture_output=True,
            text=True,
            timeout=SUBPROCESS_TIMEOUT,
            check=False,
        )

    @patch("reviewprompt.auth.token.subprocess.run")
    def test_empty_environment_variable_is_ignored(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="  gh_token  ")

        self.assertEqual(get_github_token({"GITHUB_TOKEN": ""}), "gh_token")

    @patch("reviewprompt.auth.token.subprocess.run")
    def test_gh_cli_failure(self, mock_run):
        mock_run.return_value = Mock(returncode=1, stdout="")

        self.assertIsNone(get_github_token({}))

    @patch("reviewprompt.auth.token.subprocess.run")
    def test_gh_cli_empty_output(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="   \n")

        self.assertIsNone(get_github_token({}))

    @patch("reviewprompt.auth.token.subprocess.run", side_effect=FileNotFoundError("gh"))
    def test_gh_cli_missing(self, mock_run):
        self.assertIsNone(get_github_token({}))

    @patch(
        "reviewprompt.auth.token.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="gh", timeout=SUBPROCESS_TIMEOUT),
    )
    def test_gh_cli_timeout(self, mock_run):
        self.assertIsNone(get_github_token({}))

    @patch("reviewprompt.auth.token.subprocess.run")
    @patch.dict("os.environ", {"GITHUB_TOKEN": "process_env_token"})
    def test_reads_process_environment_by_default(self, mock_run):
        self.assertEqual(get_github_token(), "process_env_token")


class TestCreateAuthErrorMessage(unittest.TestCase):
    """Test create_auth_error_message function."""

    def test_bad_credentials(self):
        self.assertEqual(create_auth_error_message("Bad credentials"), AUTH_FAILED_MESSAGE)

    def test_401(self):
        self.assertEqual(create_auth_error_message("HTTP 401"), AUTH_FAILED_MESSAGE)

    def test_403(self):
        self.assertEqual(create_auth_error_message("403 rate limit"), FORBIDDEN_MESSAGE)

    def test_other(self):
        self.assertIsNone(create_auth_error_message("500 Internal Server Error"))

    def test_auth_message_mentions_remediation(self):
        self.assertIn("GITHUB_TOKEN", AUTH_FAILED_MESSAGE)
        self.assertIn("gh auth login", AUTH_FAILED_MESSAGE)


if __name__ == "__main__":
    unittest.main()
