"""Subcommands. Importing this package registers them with the default registry."""

from gitlfs.commands import command_version  # noqa: F401
