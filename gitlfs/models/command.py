"""Command node model shared by the registry, the parser and the runner."""

import argparse
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Optional, Union

RunFunction = Callable[[argparse.Namespace], None]
PreRunHook = Callable[[argparse.Namespace], None]
ArgumentsFunction = Callable[[argparse.ArgumentParser], None]


class _DefaultPreRun:
    """Marker for "use the pre-run hook the root installs on every subcommand"."""

    def __repr__(self) -> str:
        return "DEFAULT_PRE_RUN"


DEFAULT_PRE_RUN = _DefaultPreRun()


@dataclass(frozen=True)
class CommandSpec:
    """A single addressable command in the CLI tree.

    Attributes:
        name: Command name as typed on the command line
        run: Function executed with the parsed arguments
        short_help: One-line summary, used for completion descriptions
        long_help: Longer description (help output itself comes from man pages)
        pre_run: Hook run right before ``run``; DEFAULT_PRE_RUN selects the
            root's diagnostics hook, None disables it
        add_arguments: Declares the command's flags and positionals
        valid_args: Fixed positional values offered by shell completion
        hidden: Left out of completion candidates
        raw_args: Receive the command line untouched instead of parsed flags
    """

    name: str
    run: RunFunction
    short_help: str = ""
    long_help: str = ""
    pre_run: Union[PreRunHook, _DefaultPreRun, None] = DEFAULT_PRE_RUN
    add_arguments: Optional[ArgumentsFunction] = None
    valid_args: tuple[str, ...] = field(default_factory=tuple)
    hidden: bool = False
    raw_args: bool = False

    def with_pre_run(self, hook: Optional[PreRunHook]) -> "CommandSpec":
        """Resolve the default pre-run marker to ``hook``."""
        if self.pre_run is DEFAULT_PRE_RUN:
            return replace(self, pre_run=hook)
        return self


def new_command(name: str, run: RunFunction) -> CommandSpec:
    """Create a subcommand that runs the root's default pre-run hook."""
    return CommandSpec(name=name, run=run)
