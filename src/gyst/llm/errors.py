"""Error classes for LLM-related functionality."""


class LLMError(Exception):
	"""Custom exception for LLM-related errors."""


class RemoteServiceError(LLMError):
	"""Raised when the gyst proxy server fails or returns an unusable response."""


class MissingAPIKeyError(LLMError):
	"""Raised when direct generation is requested without an API key."""
