"""Data models for the command dispatcher."""

from gitlfs.models.command import (
    CommandSpec,
    DEFAULT_PRE_RUN,
    PreRunHook,
    RunFunction,
    new_command,
)

__all__ = [
    "CommandSpec",
    "DEFAULT_PRE_RUN",
    "PreRunHook",
    "RunFunction",
    "new_command",
]
