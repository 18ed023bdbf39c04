"""Diagnostics hooks attached to subcommands."""

from gitlfs.services.diagnostics.http_logger import HTTPLoggerHook, setup_http_logger

__all__ = ["HTTPLoggerHook", "setup_http_logger"]
