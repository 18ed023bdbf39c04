"""The ``git lfs version`` subcommand."""

import argparse
from dataclasses import replace

from gitlfs.cli.registry import register_command
from gitlfs.lib.config import version_description
from gitlfs.models.command import CommandSpec


def version_command(args: argparse.Namespace) -> None:
    print(version_description())


def _customize(spec: CommandSpec) -> CommandSpec:
    return replace(spec, short_help="Report the version number")


register_command("version", version_command, _customize)
