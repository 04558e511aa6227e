"""LLM access and commit message generation for gyst."""

from __future__ import annotations

from .errors import LLMError, MissingAPIKeyError, RemoteServiceError
from .message_generator import CommitMessageGenerator, MessageBackend, clean_commit_message, get_message_backend
from .server_client import ServerClient

__all__ = [
	"CommitMessageGenerator",
	"LLMError",
	"MessageBackend",
	"MissingAPIKeyError",
	"RemoteServiceError",
	"ServerClient",
	"clean_commit_message",
	"get_message_backend",
]
