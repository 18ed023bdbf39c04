"""Shared utilities and configuration."""

from gitlfs.lib.config import Settings, version_description
from gitlfs.lib.exceptions import (
    LFSError,
    CommandError,
    UsageError,
    ValidationError,
    UnsupportedShellError,
    RegistrationError,
)

__all__ = [
    "Settings",
    "version_description",
    "LFSError",
    "CommandError",
    "UsageError",
    "ValidationError",
    "UnsupportedShellError",
    "RegistrationError",
]
