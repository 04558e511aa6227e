"""API interaction for LLM services."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic_ai import Agent
from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.providers.anthropic import AnthropicProvider
from pydantic_ai.settings import ModelSettings

from .errors import LLMError

if TYPE_CHECKING:
	from pydantic_ai.models import Model

	from gyst.config.config_schema import LLMSchema

logger = logging.getLogger(__name__)


def build_model(settings: LLMSchema, api_key: str) -> Model | str:
	"""
	Build the pydantic-ai model for the configured provider.

	Anthropic models get the API key explicitly; any other provider is
	passed to pydantic-ai as a ``provider:model`` string and reads its
	credentials from the environment.
	"""
	if settings.provider == "anthropic":
		return AnthropicModel(settings.model, provider=AnthropicProvider(api_key=api_key))
	return f"{settings.provider}:{settings.model}"


def call_llm_api(
	prompt: str,
	*,
	system_prompt: str,
	settings: LLMSchema,
	api_key: str,
	temperature: float | None = None,
	max_tokens: int | None = None,
) -> str:
	"""
	Call an LLM API using pydantic-ai.

	Args:
	    prompt: The user prompt
	    system_prompt: Instructions for the model
	    settings: Provider and model settings
	    api_key: Provider API key
	    temperature: Overrides the configured temperature
	    max_tokens: Overrides the configured output token limit

	Returns:
	    str: The generated text

	Raises:
	    LLMError: If the API call fails or returns nothing
	"""
	model_settings = ModelSettings(
		temperature=settings.temperature if temperature is None else temperature,
		max_tokens=settings.max_output_tokens if max_tokens is None else max_tokens,
	)
	logger.debug(
		"Calling Pydantic-AI Agent with model: %s:%s, system_prompt: '%s...', params: %s",
		settings.provider,
		settings.model,
		system_prompt[:100],
		model_settings,
	)

	try:
		agent = Agent(model=build_model(settings, api_key), system_prompt=system_prompt, output_type=str)
		result = agent.run_sync(prompt, model_settings=model_settings)
	except Exception as e:
		logger.exception("Pydantic-AI LLM API call failed")
		msg = f"Pydantic-AI LLM API call failed: {e}"
		raise LLMError(msg) from e

	if not result.output:
		msg = "Pydantic-AI call succeeded but returned no text."
		logger.error(msg)
		raise LLMError(msg)
	return result.output
