"""Exception hierarchy for the git-lfs command dispatcher.

All custom exceptions inherit from LFSError to enable
selective catching at different levels.

Hierarchy:
    LFSError (base)
    ├── CommandError - Dispatch failures (unknown command, bad flags)
    │   └── UsageError - Command line rejected by a command's parser
    ├── ValidationError - Invalid user input (e.g. unsupported shell)
    │   └── UnsupportedShellError
    └── RegistrationError - Registering after the command tree was realized
"""


class LFSError(Exception):
    """
    Base exception for all dispatcher errors.

    Catching this will catch all custom exceptions from this module.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CommandError(LFSError):
    """
    Command dispatch error.

    Raised when the command line cannot be matched to a runnable command.

    CLI Exit Code: 127
    """

    pass


class UsageError(CommandError):
    """
    Command line rejected by a command's argument parser.

    Attributes:
        command: CommandSpec whose parser rejected the arguments
    """

    def __init__(self, message: str, command=None):
        self.command = command
        super().__init__(message)


class ValidationError(LFSError):
    """
    Input validation error.

    Raised before any output is produced so that nothing is half-written.
    """

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class UnsupportedShellError(ValidationError):
    """Raised when a completion script is requested for an unknown shell."""

    def __init__(self, shell: str, supported: tuple[str, ...]):
        self.shell = shell
        self.supported = supported
        super().__init__(
            f"unsupported shell {shell!r} (choose from {', '.join(supported)})",
            field="shell",
        )


class RegistrationError(LFSError):
    """
    Command registration error.

    Raised when a command is registered after the registry has been
    realized, or when the registry is realized twice.
    """

    pass
