"""Schemas for the gyst configuration file."""

from pydantic import BaseModel, Field


class LLMSchema(BaseModel):
	"""Text-generation provider settings."""

	provider: str = "anthropic"
	api_key: str = ""
	model: str = "claude-3-5-haiku-20241022"
	temperature: float = 0.0
	max_output_tokens: int = 200


class GitSchema(BaseModel):
	"""Repository inspection settings."""

	max_diff_size: int = 1000
	"""Maximum number of diff lines sent for message generation; 0 disables the limit."""
	protected_branches: list[str] = Field(default_factory=lambda: ["main", "master"])


class CommitSchema(BaseModel):
	"""Commit message settings."""

	max_subject_length: int = 72


class ServerSchema(BaseModel):
	"""Proxy server settings."""

	use_server: bool = True
	url: str = "http://127.0.0.1:8080"


class AppConfigSchema(BaseModel):
	"""Root of the configuration file."""

	llm: LLMSchema = Field(default_factory=LLMSchema)
	git: GitSchema = Field(default_factory=GitSchema)
	commit: CommitSchema = Field(default_factory=CommitSchema)
	server: ServerSchema = Field(default_factory=ServerSchema)
