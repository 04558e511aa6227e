"""Command for running the gyst proxy server."""

from __future__ import annotations

from typing import Annotated

import typer

HostOpt = Annotated[str | None, typer.Option("--host", help="Bind address (default: $HOST or 127.0.0.1)")]

PortOpt = Annotated[int | None, typer.Option("--port", "-p", help="Bind port (default: $PORT or 8080)")]


def register_command(app: typer.Typer) -> None:
	"""Register the serve command with the CLI app."""

	@app.command(name="serve")
	def serve_command(host: HostOpt = None, port: PortOpt = None) -> None:
		"""Run the gyst proxy server."""
		from gyst.server.api_server import run_server

		run_server(host=host, port=port)
