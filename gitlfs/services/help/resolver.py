"""Help and usage rendering backed by static man page text.

Every help request, whether from ``-h``, a usage error, the root command's
default body or the ``help`` subcommand, is answered from the same
name-to-text table instead of text generated from the parser.
"""

import logging
import sys
from collections.abc import Mapping, Sequence
from typing import Optional, TextIO

from gitlfs.lib.messages import get_message, quote
from gitlfs.models.command import CommandSpec

logger = logging.getLogger(__name__)

ROOT_NAME = "git-lfs"

# Requested as a topic when the help flag itself ends up as the argument
HELP_FLAG = "--help"


class HelpResolver:
    """Looks up help pages by command name.

    Attributes:
        man_pages: Mapping of command or topic name to its full help text
        root_name: Name substituted when no command name is given
    """

    def __init__(self, man_pages: Mapping[str, str], root_name: str = ROOT_NAME):
        self.man_pages = man_pages
        self.root_name = root_name

    def resolve(self, name: str) -> str:
        """Return the help text for ``name``.

        Args:
            name: Command or topic name; ``--help`` means the root

        Returns:
            The trimmed help page, or a "no usage text" message
        """
        if name == HELP_FLAG:
            name = self.root_name

        text = self.man_pages.get(name)
        if text is None:
            logger.debug(f"No man page for {name!r}")
            return get_message("NO_USAGE_TEXT", name=quote(name))
        return text.strip()

    def print_help(self, name: str, file: Optional[TextIO] = None) -> str:
        """Resolve ``name`` and write the text to ``file`` (default stdout)."""
        text = self.resolve(name)
        print(text, file=file if file is not None else sys.stdout)
        return text

    def help_func(self, command: CommandSpec, args: Sequence[str]) -> None:
        """Render help for the first requested topic, or the root."""
        if args:
            self.print_help(args[0])
        else:
            self.print_help(self.root_name)

    def usage_func(self, command: CommandSpec) -> None:
        """Render usage for ``command``."""
        self.print_help(command.name)
