"""Commit message and command generation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from .api import call_llm_api
from .errors import MissingAPIKeyError
from .prompts import COMMAND_SYSTEM_PROMPT, build_commit_prompt, commit_system_prompt
from .server_client import ServerClient

if TYPE_CHECKING:
	from gyst.config.config_loader import ConfigLoader
	from gyst.git.staged import StagedChangeSet

logger = logging.getLogger(__name__)

COMMIT_TYPES = ("feat", "fix", "docs", "style", "refactor", "perf", "test", "chore", "ci", "build")

COMMAND_TEMPERATURE = 0.2
COMMAND_MAX_TOKENS = 500
SUGGESTION_TEMPERATURE = 0.7


def clean_commit_message(text: str) -> str:
	"""
	Strip any preamble the model put before the commit message.

	The first commit type found (checked in ``COMMIT_TYPES`` order) marks
	where the message starts.

	Args:
	    text: Raw model output

	Returns:
	    str: The trimmed message
	"""
	for commit_type in COMMIT_TYPES:
		index = text.find(commit_type)
		if index != -1:
			return text[index:].strip()
	return text.strip()


class MessageBackend(Protocol):
	"""Anything that can produce commit messages and command suggestions."""

	def generate_message(self, changes: StagedChangeSet, diff: str) -> str:
		"""Generate one commit message."""
		...

	def generate_suggestions(self, changes: StagedChangeSet, diff: str, count: int) -> list[str]:
		"""Generate ``count`` commit messages."""
		...

	def suggest_command(self, description: str) -> str:
		"""Suggest git commands for a task."""
		...


class CommitMessageGenerator:
	"""Generates messages by calling the provider directly."""

	def __init__(self, config_loader: ConfigLoader) -> None:
		"""
		Initialize the generator.

		Args:
		    config_loader: Loaded configuration (provider settings and API key)
		"""
		self.config_loader = config_loader

	def _api_key(self) -> str:
		api_key = self.config_loader.api_key
		if not api_key:
			msg = "API key not set. Use 'gyst config --api-key <key>' to set it."
			raise MissingAPIKeyError(msg)
		return api_key

	def generate_message(self, changes: StagedChangeSet, diff: str) -> str:
		"""Generate the single best commit message."""
		return self.generate_suggestions(changes, diff, 1)[0]

	def generate_suggestions(self, changes: StagedChangeSet, diff: str, count: int) -> list[str]:
		"""
		Generate several commit messages, one request each.

		Args:
		    changes: Classified staged changes
		    diff: Patch text of the staged changes
		    count: Number of messages to generate

		Returns:
		    list[str]: Cleaned commit messages

		Raises:
		    MissingAPIKeyError: If no API key is configured
		    LLMError: If a request fails
		"""
		api_key = self._api_key()
		config = self.config_loader.get
		prompt = build_commit_prompt(changes, diff, config.git.max_diff_size)
		system_prompt = commit_system_prompt(config.commit.max_subject_length)

		# Alternatives need sampling; a single message uses the configured temperature.
		temperature = SUGGESTION_TEMPERATURE if count > 1 else None

		suggestions = []
		for index in range(max(count, 1)):
			logger.debug("Generating commit message %d of %d", index + 1, count)
			text = call_llm_api(
				prompt, system_prompt=system_prompt, settings=config.llm, api_key=api_key, temperature=temperature
			)
			suggestions.append(clean_commit_message(text))
		return suggestions

	def suggest_command(self, description: str) -> str:
		"""Suggest git commands for a natural-language task description."""
		return call_llm_api(
			description,
			system_prompt=COMMAND_SYSTEM_PROMPT,
			settings=self.config_loader.get.llm,
			api_key=self._api_key(),
			temperature=COMMAND_TEMPERATURE,
			max_tokens=COMMAND_MAX_TOKENS,
		)


def get_message_backend(config_loader: ConfigLoader) -> MessageBackend:
	"""Return the proxy client or the direct generator, as configured."""
	server = config_loader.get.server
	if server.use_server:
		logger.debug("Using gyst server at %s", server.url)
		return ServerClient(server.url, max_diff_lines=config_loader.get.git.max_diff_size)
	return CommitMessageGenerator(config_loader)
