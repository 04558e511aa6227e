"""
HTTP proxy server for gyst.

The server holds the provider API key so that clients can generate
commit messages and command suggestions without configuring one. It
reads ``ANTHROPIC_API_KEY`` and optionally ``ANTHROPIC_MODEL`` from the
environment.

"""

from __future__ import annotations

import logging
import os

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from gyst import __version__
from gyst.config.config_schema import LLMSchema
from gyst.git.staged import StagedChangeSet
from gyst.llm.api import call_llm_api
from gyst.llm.errors import LLMError
from gyst.llm.message_generator import (
	COMMAND_MAX_TOKENS,
	COMMAND_TEMPERATURE,
	SUGGESTION_TEMPERATURE,
	clean_commit_message,
)
from gyst.llm.prompts import COMMAND_SYSTEM_PROMPT, build_commit_prompt, commit_system_prompt

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_SUGGESTION_COUNT = 3


class MissingServerKeyError(Exception):
	"""Raised when the server has no provider API key configured."""


class CommitRequest(BaseModel):
	"""Body of the commit message endpoints."""

	changes: StagedChangeSet
	diff: str
	count: int | None = Field(default=None, ge=1)


class CommandRequest(BaseModel):
	"""Body of the command suggestion endpoint."""

	description: str


class HealthResponse(BaseModel):
	"""Health check response."""

	status: str
	version: str


class CommitResponse(BaseModel):
	"""A single generated commit message."""

	message: str


class SuggestionsResponse(BaseModel):
	"""Several generated commit messages."""

	suggestions: list[str]


class CommandResponse(BaseModel):
	"""Generated command suggestion text."""

	suggestion: str


def _server_api_key() -> str:
	api_key = os.environ.get("ANTHROPIC_API_KEY", "")
	if not api_key:
		msg = "Missing API key"
		raise MissingServerKeyError(msg)
	return api_key


def _server_settings() -> LLMSchema:
	settings = LLMSchema()
	model = os.environ.get("ANTHROPIC_MODEL")
	if model:
		settings.model = model
	return settings


def _generate_commit_messages(req: CommitRequest, count: int, temperature: float | None) -> list[str]:
	api_key = _server_api_key()
	settings = _server_settings()
	prompt = build_commit_prompt(req.changes, req.diff)
	system_prompt = commit_system_prompt()
	return [
		clean_commit_message(
			call_llm_api(prompt, system_prompt=system_prompt, settings=settings, api_key=api_key, temperature=temperature)
		)
		for _ in range(count)
	]


def create_app() -> FastAPI:
	"""
	Create the FastAPI application.

	Returns:
	    FastAPI: The configured application
	"""
	app = FastAPI(title="gyst server", version=__version__)
	app.add_middleware(
		CORSMiddleware,
		allow_origins=["*"],
		allow_methods=["*"],
		allow_headers=["*"],
	)

	@app.exception_handler(MissingServerKeyError)
	async def missing_key_handler(_request: Request, _exc: MissingServerKeyError) -> JSONResponse:
		"""Handle a missing provider key."""
		logger.error("ANTHROPIC_API_KEY is not set")
		return JSONResponse(
			status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
			content={"error": "Server configuration error: Missing API key"},
		)

	@app.exception_handler(LLMError)
	async def llm_error_handler(_request: Request, exc: LLMError) -> JSONResponse:
		"""Handle provider failures."""
		return JSONResponse(
			status_code=status.HTTP_502_BAD_GATEWAY,
			content={"error": f"API request failed: {exc}"},
		)

	@app.get("/api/health")
	def health_check() -> HealthResponse:
		"""Report that the server is up."""
		return HealthResponse(status="ok", version=__version__)

	@app.post("/api/commit")
	def generate_commit(req: CommitRequest) -> CommitResponse:
		"""Generate one commit message."""
		messages = _generate_commit_messages(req, 1, SUGGESTION_TEMPERATURE)
		return CommitResponse(message=messages[0])

	@app.post("/api/commit/suggestions")
	def generate_commit_suggestions(req: CommitRequest) -> SuggestionsResponse:
		"""Generate several commit messages."""
		count = req.count or DEFAULT_SUGGESTION_COUNT
		return SuggestionsResponse(suggestions=_generate_commit_messages(req, count, SUGGESTION_TEMPERATURE))

	@app.post("/api/command")
	def suggest_command(req: CommandRequest) -> CommandResponse:
		"""Suggest git commands for a task description."""
		suggestion = call_llm_api(
			req.description,
			system_prompt=COMMAND_SYSTEM_PROMPT,
			settings=_server_settings(),
			api_key=_server_api_key(),
			temperature=COMMAND_TEMPERATURE,
			max_tokens=COMMAND_MAX_TOKENS,
		)
		return CommandResponse(suggestion=suggestion)

	return app


def run_server(host: str | None = None, port: int | None = None) -> None:
	"""
	Run the server with uvicorn until interrupted.

	Args:
	    host: Bind address (defaults to ``HOST`` or 127.0.0.1)
	    port: Bind port (defaults to ``PORT`` or 8080)
	"""
	load_dotenv()
	host = host or os.environ.get("HOST", DEFAULT_HOST)
	port = port or int(os.environ.get("PORT", str(DEFAULT_PORT)))
	logger.info("Starting server at http://%s:%d", host, port)
	uvicorn.run(create_app(), host=host, port=port, log_level="info")
