"""Tests for the proxy server client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from gyst.git.staged import DiffStats, StagedChangeSet
from gyst.llm import RemoteServiceError, ServerClient
from gyst.llm.server_client import HEALTH_TIMEOUT, REQUEST_TIMEOUT


def _response(status: int = 200, body: object = None, text: str = "") -> MagicMock:
	response = MagicMock()
	response.ok = status < 400
	response.status_code = status
	response.text = text
	if isinstance(body, Exception):
		response.json.side_effect = body
	else:
		response.json.return_value = body
	return response


@pytest.mark.llm
class TestServerClient:
	"""Requests, responses and error mapping."""

	def setup_method(self) -> None:
		"""Create a client against a fake URL."""
		self.client = ServerClient("http://gyst.test:9000/")
		self.changes = StagedChangeSet(added=["a.py"], renamed=[("x", "y")], stats=DiffStats(files_changed=2))

	def test_generate_message(self) -> None:
		"""The change set is posted as JSON."""
		with patch("gyst.llm.server_client.requests.post", return_value=_response(body={"message": "feat: a"})) as post:
			message = self.client.generate_message(self.changes, "+a\n")

		assert message == "feat: a"
		post.assert_called_once()
		assert post.call_args.args == ("http://gyst.test:9000/api/commit",)
		payload = post.call_args.kwargs["json"]
		assert payload["diff"] == "+a\n"
		assert payload["changes"]["renamed"] == [["x", "y"]]
		assert post.call_args.kwargs["timeout"] == REQUEST_TIMEOUT

	def test_generate_suggestions(self) -> None:
		"""Suggestions come back as a list."""
		body = {"suggestions": ["feat: a", "fix: b"]}
		with patch("gyst.llm.server_client.requests.post", return_value=_response(body=body)) as post:
			suggestions = self.client.generate_suggestions(self.changes, "", 2)

		assert suggestions == ["feat: a", "fix: b"]
		assert post.call_args.args == ("http://gyst.test:9000/api/commit/suggestions",)
		assert post.call_args.kwargs["json"]["count"] == 2

	def test_diff_is_truncated_before_sending(self) -> None:
		"""The configured diff limit applies to both commit endpoints."""
		client = ServerClient("http://gyst.test:9000", max_diff_lines=2)
		diff = "".join(f"+{i}\n" for i in range(5))
		expected = "+0\n+1\n... (diff truncated, 3 more lines)\n"

		with patch("gyst.llm.server_client.requests.post", return_value=_response(body={"message": "feat: a"})) as post:
			client.generate_message(self.changes, diff)
		assert post.call_args.kwargs["json"]["diff"] == expected

		with patch("gyst.llm.server_client.requests.post", return_value=_response(body={"suggestions": []})) as post:
			client.generate_suggestions(self.changes, diff, 1)
		assert post.call_args.kwargs["json"]["diff"] == expected

	def test_suggest_command(self) -> None:
		"""The description is sent as-is."""
		body = {"suggestion": "COMMAND: git log"}
		with patch("gyst.llm.server_client.requests.post", return_value=_response(body=body)) as post:
			assert self.client.suggest_command("show history") == "COMMAND: git log"
		assert post.call_args.kwargs["json"] == {"description": "show history"}

	def test_connection_failure(self) -> None:
		"""Transport errors are wrapped."""
		with (
			patch("gyst.llm.server_client.requests.post", side_effect=requests.ConnectionError("refused")),
			pytest.raises(RemoteServiceError, match="Failed to send request to server: refused"),
		):
			self.client.suggest_command("x")

	def test_error_status(self) -> None:
		"""Non-success responses carry the body text."""
		response = _response(status=502, text='{"error": "API request failed: boom"}')
		with (
			patch("gyst.llm.server_client.requests.post", return_value=response),
			pytest.raises(RemoteServiceError, match="Server error: .*boom"),
		):
			self.client.generate_message(self.changes, "")

	@pytest.mark.parametrize(
		"body",
		[ValueError("not json"), {"unexpected": 1}, ["feat: a"]],
	)
	def test_malformed_response(self, body: object) -> None:
		"""Bodies without the expected field cannot be used."""
		with (
			patch("gyst.llm.server_client.requests.post", return_value=_response(body=body)),
			pytest.raises(RemoteServiceError, match="Failed to parse server response"),
		):
			self.client.generate_message(self.changes, "")

	def test_suggestions_must_be_a_list(self) -> None:
		"""A scalar suggestions field is rejected."""
		with (
			patch("gyst.llm.server_client.requests.post", return_value=_response(body={"suggestions": "feat: a"})),
			pytest.raises(RemoteServiceError, match="Failed to parse server response"),
		):
			self.client.generate_suggestions(self.changes, "", 1)

	def test_health_check(self) -> None:
		"""Health reflects the status code; unreachable servers raise."""
		with patch("gyst.llm.server_client.requests.get", return_value=_response(status=200)) as get:
			assert self.client.health_check() is True
		assert get.call_args.args == ("http://gyst.test:9000/api/health",)
		assert get.call_args.kwargs["timeout"] == HEALTH_TIMEOUT

		with patch("gyst.llm.server_client.requests.get", return_value=_response(status=503)):
			assert self.client.health_check() is False

		with (
			patch("gyst.llm.server_client.requests.get", side_effect=requests.Timeout("slow")),
			pytest.raises(RemoteServiceError, match="Failed to connect to server"),
		):
			self.client.health_check()
