"""
Client for the gyst proxy server.

The proxy holds the provider API key so individual users do not need
one. Each call is a single HTTP request; failures are reported as
``RemoteServiceError``.

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import requests

from .errors import RemoteServiceError
from .prompts import truncate_diff

if TYPE_CHECKING:
	from gyst.git.staged import StagedChangeSet

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://127.0.0.1:8080"
REQUEST_TIMEOUT = 60
HEALTH_TIMEOUT = 5


class ServerClient:
	"""HTTP client for the gyst proxy server API."""

	def __init__(self, base_url: str = DEFAULT_SERVER_URL, max_diff_lines: int = 0) -> None:
		"""
		Initialize the client.

		Args:
		    base_url: Root URL of the proxy server
		    max_diff_lines: Diffs are cut to this many lines before sending (0 for no limit)
		"""
		self.base_url = base_url.rstrip("/")
		self.max_diff_lines = max_diff_lines
		logger.debug("Initialized server client: %s", self.base_url)

	def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
		url = f"{self.base_url}/api/{endpoint}"
		try:
			response = requests.post(url, json=payload, timeout=REQUEST_TIMEOUT)
		except requests.RequestException as e:
			logger.exception("Failed to send request to %s", url)
			msg = f"Failed to send request to server: {e}"
			raise RemoteServiceError(msg) from e

		if not response.ok:
			msg = f"Server error: {response.text}"
			logger.error(msg)
			raise RemoteServiceError(msg)

		try:
			body = response.json()
		except ValueError as e:
			msg = "Failed to parse server response"
			raise RemoteServiceError(msg) from e
		if not isinstance(body, dict):
			msg = "Failed to parse server response"
			raise RemoteServiceError(msg)
		return body

	@staticmethod
	def _field(body: dict[str, Any], key: str) -> Any:  # noqa: ANN401
		if key not in body:
			msg = "Failed to parse server response"
			raise RemoteServiceError(msg)
		return body[key]

	def _commit_payload(self, changes: StagedChangeSet, diff: str) -> dict[str, Any]:
		return {"changes": changes.model_dump(mode="json"), "diff": truncate_diff(diff, self.max_diff_lines)}

	def generate_message(self, changes: StagedChangeSet, diff: str) -> str:
		"""Request a single commit message."""
		body = self._post("commit", self._commit_payload(changes, diff))
		return str(self._field(body, "message"))

	def generate_suggestions(self, changes: StagedChangeSet, diff: str, count: int) -> list[str]:
		"""Request ``count`` alternative commit messages."""
		payload = {**self._commit_payload(changes, diff), "count": count}
		body = self._post("commit/suggestions", payload)
		suggestions = self._field(body, "suggestions")
		if not isinstance(suggestions, list):
			msg = "Failed to parse server response"
			raise RemoteServiceError(msg)
		return [str(suggestion) for suggestion in suggestions]

	def suggest_command(self, description: str) -> str:
		"""Request git command suggestions for a task description."""
		body = self._post("command", {"description": description})
		return str(self._field(body, "suggestion"))

	def health_check(self) -> bool:
		"""
		Check whether the server is up.

		Returns:
		    bool: True if the health endpoint answered with a success status

		Raises:
		    RemoteServiceError: If the server cannot be reached
		"""
		url = f"{self.base_url}/api/health"
		try:
			response = requests.get(url, timeout=HEALTH_TIMEOUT)
		except requests.RequestException as e:
			msg = f"Failed to connect to server: {e}"
			raise RemoteServiceError(msg) from e
		return response.ok
