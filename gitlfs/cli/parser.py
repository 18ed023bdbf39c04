"""Command tree built on argparse, with help and usage rendering injected.

argparse normally formats help from the declared arguments and exits the
process on bad input. Here every help or usage request is delegated to the
injected renderers, and errors are raised so the runner decides the exit
code.
"""

import argparse
import logging
from collections.abc import Callable, Sequence
from typing import Optional

from gitlfs.lib.exceptions import CommandError, UsageError
from gitlfs.lib.messages import get_message, quote
from gitlfs.models.command import CommandSpec

logger = logging.getLogger(__name__)

HelpFunction = Callable[[CommandSpec, Sequence[str]], None]
UsageFunction = Callable[[CommandSpec], None]

SPEC_ATTR = "command_spec"
RAW_ARGS_ATTR = "args"


class ParserExit(Exception):
    """Raised instead of exiting the interpreter (e.g. after ``--help``)."""

    def __init__(self, status: int = 0, message: Optional[str] = None):
        self.status = status
        self.message = message
        super().__init__(message or f"parser exited with status {status}")


class CommandParser(argparse.ArgumentParser):
    """ArgumentParser for one command node."""

    def __init__(
        self,
        *args,
        command: CommandSpec,
        help_func: HelpFunction,
        usage_func: UsageFunction,
        is_root: bool = False,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.command = command
        self.help_func = help_func
        self.usage_func = usage_func
        self.is_root = is_root

    def print_help(self, file=None) -> None:
        topics = [] if self.is_root else [self.command.name]
        self.help_func(self.command, topics)

    def print_usage(self, file=None) -> None:
        self.usage_func(self.command)

    def error(self, message: str):
        raise UsageError(message, command=self.command)

    def exit(self, status: int = 0, message: Optional[str] = None):
        raise ParserExit(status, message)


class CommandTree:
    """Root command plus its direct subcommands.

    Subcommand names are unique; a later command with an already used
    name is ignored so the first registration wins.
    """

    def __init__(
        self,
        root: CommandSpec,
        help_func: HelpFunction,
        usage_func: UsageFunction,
    ):
        self.root = root
        self.help_func = help_func
        self.usage_func = usage_func

        self.parser = CommandParser(
            prog=root.name,
            command=root,
            help_func=help_func,
            usage_func=usage_func,
            is_root=True,
        )
        if root.add_arguments is not None:
            root.add_arguments(self.parser)
        self.parser.set_defaults(**{SPEC_ATTR: root})

        self._subparsers = self.parser.add_subparsers(
            dest="command_name",
            metavar="<command>",
            parser_class=CommandParser,
        )
        self._commands: dict[str, CommandSpec] = {}
        self._parsers: dict[str, CommandParser] = {self.root.name: self.parser}

    @property
    def commands(self) -> list[CommandSpec]:
        """Subcommands in the order they were added."""
        return list(self._commands.values())

    def get(self, name: str) -> Optional[CommandSpec]:
        return self._commands.get(name)

    def add_command(self, spec: CommandSpec) -> bool:
        """Attach ``spec`` below the root.

        Returns:
            False if a command with the same name already exists
        """
        if spec.name in self._commands:
            logger.warning(f"Ignoring duplicate command {spec.name!r}")
            return False

        parser = self._subparsers.add_parser(
            spec.name,
            command=spec,
            help_func=self.help_func,
            usage_func=self.usage_func,
            add_help=not spec.raw_args,
        )
        if spec.add_arguments is not None and not spec.raw_args:
            spec.add_arguments(parser)
        parser.set_defaults(**{SPEC_ATTR: spec})

        self._commands[spec.name] = spec
        self._parsers[spec.name] = parser
        return True

    def options(self, spec: CommandSpec) -> list[tuple[str, str]]:
        """Option strings accepted by ``spec`` with their help text."""
        parser = self._parsers[spec.name]
        found = []
        for action in parser._actions:
            description = "" if action.help in (None, argparse.SUPPRESS) else action.help
            for option in action.option_strings:
                found.append((option, description))
        return found

    def find(self, args: Sequence[str]) -> tuple[CommandSpec, list[str]]:
        """Resolve a command path to its node.

        Returns:
            The matched node and the arguments left after its name

        Raises:
            CommandError: The first argument names no subcommand
        """
        if not args:
            return self.root, []

        spec = self._commands.get(args[0])
        if spec is None:
            raise CommandError(
                get_message(
                    "UNKNOWN_COMMAND", name=quote(args[0]), root=quote(self.root.name)
                )
            )
        return spec, list(args[1:])

    def parse(self, argv: Sequence[str]) -> tuple[CommandSpec, argparse.Namespace]:
        """Parse ``argv`` and return the matched node with its arguments.

        Raises:
            UsageError: The command line was rejected
            ParserExit: A help flag was handled
        """
        if argv and not argv[0].startswith("-"):
            spec = self._commands.get(argv[0])
            if spec is None:
                # argparse would list every choice, hidden nodes included
                raise UsageError(
                    get_message(
                        "UNKNOWN_COMMAND", name=quote(argv[0]), root=quote(self.root.name)
                    ),
                    command=self.root,
                )
            if spec.raw_args:
                namespace = argparse.Namespace(**{SPEC_ATTR: spec, RAW_ARGS_ATTR: list(argv[1:])})
                return spec, namespace

        namespace = self.parser.parse_args(list(argv))
        return getattr(namespace, SPEC_ATTR), namespace
