"""Proxy server for gyst."""

from gyst.server.api_server import create_app, run_server

__all__ = ["create_app", "run_server"]
