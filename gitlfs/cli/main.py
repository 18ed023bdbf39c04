"""CLI entry point: assembles the command tree and runs one command line.

Lifecycle of a single invocation:

    configure output -> build root, completion and help nodes
    -> global flags -> canonicalize environment -> load settings
    -> realize registered commands -> execute -> close API client
"""

import argparse
import logging
import os
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Optional, TextIO

from pydantic import ValidationError as SettingsValidationError

from gitlfs.cli.completion import (
    CompletionGenerator,
    build_complete_commands,
    build_completion_command,
)
from gitlfs.cli.parser import CommandTree, HelpFunction, ParserExit, UsageFunction
from gitlfs.cli.registry import CommandRegistry, default_registry
from gitlfs.lib.config import Settings, version_description
from gitlfs.lib.environment import canonicalize_environment
from gitlfs.lib.exceptions import CommandError, LFSError, UsageError
from gitlfs.lib.manpages import MAN_PAGES
from gitlfs.lib.messages import get_message, quote_list
from gitlfs.models.command import CommandSpec
from gitlfs.services.api.client import ApiClient
from gitlfs.services.diagnostics.http_logger import setup_http_logger
from gitlfs.services.help.resolver import ROOT_NAME, HelpResolver

logger = logging.getLogger(__name__)


# Exit codes per CLI contract
EXIT_SUCCESS = 0
EXIT_FAILURE = 127

# "git lfs help <topic>" topics that are pages, not commands
HELP_ALIAS_TOPICS = ("config", "faq")

PACKAGE_LOGGER = "gitlfs"
LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"


class OutputHandler(logging.StreamHandler):
    """Stream handler installed by setup_logging()."""


def setup_logging(stream: TextIO, verbose: bool = False) -> None:
    """Send the package's log output to ``stream``.

    A handler installed by an earlier call is replaced, not stacked.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if isinstance(handler, OutputHandler):
            package_logger.removeHandler(handler)

    handler = OutputHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def trace_enabled(value: Optional[str]) -> bool:
    """Interpret GIT_TRACE the way git does for on/off values."""
    return bool(value) and value.lower() not in ("0", "false", "no", "off")


def _config_error(error: SettingsValidationError) -> str:
    """First problem pydantic found, named by its environment variable."""
    details = error.errors()[0]
    field_name = ".".join(str(part) for part in details["loc"]) or "configuration"
    return get_message("INVALID_CONFIG", field=field_name, reason=details["msg"])


@dataclass
class RootState:
    """Per-invocation state shared by the root command and the hooks.

    Attributes:
        tree: Assembled command tree
        settings: Shared configuration, loaded after canonicalization
        api_client: Shared API client, created with the settings
        version: Whether -v/--version was given
    """

    tree: Optional[CommandTree] = None
    settings: Optional[Settings] = None
    api_client: Optional[ApiClient] = None
    version: bool = False
    closed: bool = field(default=False, repr=False)

    def require_settings(self) -> Settings:
        if self.settings is None:
            raise LFSError("configuration has not been loaded")
        return self.settings

    def require_api_client(self) -> ApiClient:
        if self.api_client is None:
            raise LFSError("API client has not been created")
        return self.api_client

    def close_api_client(self) -> None:
        """Close the shared API client once, if it was created."""
        if self.closed or self.api_client is None:
            return
        self.closed = True
        self.api_client.close()


class Runner:
    """Assembles the git-lfs command tree and executes command lines.

    Help/usage rendering, the command registry, the settings loader and the
    API client constructor are all injected so each can be replaced.
    """

    def __init__(
        self,
        registry: Optional[CommandRegistry] = None,
        help_func: Optional[HelpFunction] = None,
        usage_func: Optional[UsageFunction] = None,
        settings_factory: Callable[[], Settings] = Settings,
        api_client_factory: Callable[[Settings], ApiClient] = ApiClient,
        root_name: str = ROOT_NAME,
    ):
        resolver = HelpResolver(MAN_PAGES, root_name=root_name)
        self.registry = registry if registry is not None else default_registry
        self.help_func = help_func or resolver.help_func
        self.usage_func = usage_func or resolver.usage_func
        self.settings_factory = settings_factory
        self.api_client_factory = api_client_factory
        self.root_name = root_name
        self.state: Optional[RootState] = None

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Run one command line and return the process exit code."""
        if argv is None:
            argv = sys.argv[1:]

        setup_logging(sys.stderr, verbose=trace_enabled(os.environ.get("GIT_TRACE")))

        state = RootState()
        self.state = state
        state.tree = self._build_tree(state)
        state.tree.parser.add_argument("-v", "--version", action="store_true", default=False)

        try:
            try:
                canonicalize_environment()
                state.settings = self.settings_factory()
                state.api_client = self.api_client_factory(state.settings)
                self._realize(state)
            except SettingsValidationError as e:
                print(get_message("COMMAND_ERROR", error=_config_error(e)), file=sys.stderr)
                return EXIT_FAILURE
            except LFSError as e:
                print(get_message("COMMAND_ERROR", error=e.message), file=sys.stderr)
                return EXIT_FAILURE
            except Exception as e:
                logger.debug("Startup failed", exc_info=True)
                print(get_message("COMMAND_ERROR", error=e), file=sys.stderr)
                return EXIT_FAILURE
            return self._execute(state, argv)
        finally:
            state.close_api_client()

    def _build_tree(self, state: RootState) -> CommandTree:
        def root_command(args: argparse.Namespace) -> None:
            state.version = bool(getattr(args, "version", False))
            print(version_description())
            if not state.version:
                self.usage_func(state.tree.root)

        root = CommandSpec(name=self.root_name, run=root_command, pre_run=None)
        tree = CommandTree(root, help_func=self.help_func, usage_func=self.usage_func)

        tree.add_command(build_completion_command(CompletionGenerator(root.name)))
        tree.add_command(self._build_help_command(tree))
        for spec in build_complete_commands(tree):
            tree.add_command(spec)
        return tree

    def _build_help_command(self, tree: CommandTree) -> CommandSpec:
        def add_arguments(parser: argparse.ArgumentParser) -> None:
            parser.add_argument("topics", nargs="*", metavar="command")

        def help_command(args: argparse.Namespace) -> None:
            topics = list(args.topics)
            try:
                command, _ = tree.find(topics)
            except CommandError:
                command = None
                # "help config" and "help faq" name pages, not commands
                if topics[0] in HELP_ALIAS_TOPICS:
                    command, _ = tree.find(["help"])

            if command is None:
                print(get_message("UNKNOWN_HELP_TOPIC", topics=quote_list(topics)))
                self.usage_func(tree.root)
            else:
                self.help_func(command, topics)

        return CommandSpec(
            name="help",
            run=help_command,
            short_help="Help about any command",
            long_help=get_message("HELP_COMMAND_LONG", root=tree.root.name),
            pre_run=None,
            add_arguments=add_arguments,
        )

    def _realize(self, state: RootState) -> None:
        hook = setup_http_logger(state.require_settings, state.require_api_client)
        for spec in self.registry.realize_all():
            state.tree.add_command(spec.with_pre_run(hook))

    def _execute(self, state: RootState, argv: Sequence[str]) -> int:
        try:
            command, args = state.tree.parse(argv)
            if command.pre_run is not None:
                command.pre_run(args)
            command.run(args)
        except ParserExit as e:
            if e.message:
                print(e.message, file=sys.stderr, end="")
            return EXIT_SUCCESS if e.status == 0 else EXIT_FAILURE
        except UsageError as e:
            print(get_message("COMMAND_ERROR", error=e.message), file=sys.stderr)
            self.usage_func(e.command or state.tree.root)
            return EXIT_FAILURE
        except LFSError as e:
            print(get_message("COMMAND_ERROR", error=e.message), file=sys.stderr)
            return EXIT_FAILURE
        except Exception as e:
            logger.debug("Command failed", exc_info=True)
            print(get_message("COMMAND_ERROR", error=e), file=sys.stderr)
            return EXIT_FAILURE

        return EXIT_SUCCESS


def run(argv: Optional[Sequence[str]] = None, registry: Optional[CommandRegistry] = None) -> int:
    """Run ``argv`` against a fresh command tree and return the exit code."""
    return Runner(registry=registry).run(argv)


def main() -> int:
    """Main entry point."""
    # Import command modules so they register with the default registry
    import gitlfs.commands  # noqa: F401

    return run()


if __name__ == "__main__":
    sys.exit(main())
