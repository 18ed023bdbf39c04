"""Deferred registry of subcommand builders.

Subcommand modules register themselves at import time, before the shared
configuration exists. Each registration stores a zero-argument builder; the
runner realizes all builders, in registration order, once configuration has
been loaded.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from gitlfs.lib.exceptions import RegistrationError
from gitlfs.models.command import CommandSpec, RunFunction, new_command

logger = logging.getLogger(__name__)

Builder = Callable[[], Optional[CommandSpec]]
Customizer = Callable[[CommandSpec], Optional[CommandSpec]]


@dataclass(frozen=True)
class BuilderEntry:
    """Builds one subcommand, optionally reshaped by a customize callback.

    Attributes:
        name: Command name
        run: Command run function
        customize: Receives the default spec and returns the spec to attach,
            or None to leave the command out of the tree
    """

    name: str
    run: RunFunction
    customize: Optional[Customizer] = None

    def __call__(self) -> Optional[CommandSpec]:
        spec = new_command(self.name, self.run)
        if self.customize is not None:
            return self.customize(spec)
        return spec


class CommandRegistry:
    """Ordered, thread-safe collection of deferred command builders.

    Registration may happen from any thread. Realization happens exactly
    once; the registry is sealed from that point on and any further
    registration, including from inside a builder, is rejected.
    """

    def __init__(self) -> None:
        self._entries: list[Builder] = []
        self._lock = threading.Lock()
        self._sealed = False

    def register(
        self,
        name: str,
        run: RunFunction,
        customize: Optional[Customizer] = None,
    ) -> None:
        """Register a subcommand to be built when the tree is assembled.

        Args:
            name: Command name
            run: Function executed with the parsed arguments
            customize: Optional callback reshaping the default spec

        Raises:
            RegistrationError: The registry was already realized
        """
        self.register_builder(BuilderEntry(name=name, run=run, customize=customize))

    def register_builder(self, builder: Builder) -> None:
        """Register an arbitrary zero-argument builder."""
        with self._lock:
            if self._sealed:
                raise RegistrationError(
                    "commands must be registered before the command tree is built"
                )
            self._entries.append(builder)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def sealed(self) -> bool:
        """Whether realize_all() has started."""
        return self._sealed

    def realize_all(self) -> list[CommandSpec]:
        """Invoke every builder in registration order.

        Returns:
            The specs of all builders that did not decline

        Raises:
            RegistrationError: The registry was already realized
        """
        with self._lock:
            if self._sealed:
                raise RegistrationError("command registry was already realized")
            self._sealed = True
            entries = list(self._entries)

        specs = []
        for builder in entries:
            spec = builder()
            if spec is None:
                logger.debug(f"Builder {builder!r} declined to produce a command")
                continue
            specs.append(spec)
        return specs


# Process-wide registry used by import-time registration
default_registry = CommandRegistry()


def register_command(
    name: str,
    run: RunFunction,
    customize: Optional[Customizer] = None,
) -> None:
    """Register a subcommand with the process-wide registry."""
    default_registry.register(name, run, customize)
