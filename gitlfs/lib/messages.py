"""Externalized user-facing message templates.

All strings printed to the user by the dispatcher live here so they can be
translated without touching the command code. Templates use str.format
placeholders.
"""

import json
from collections.abc import Iterable

# =============================================================================
# Help Messages
# =============================================================================

NO_USAGE_TEXT = "Sorry, no usage text found for {name}"

UNKNOWN_HELP_TOPIC = "Unknown help topic {topics}"

HELP_COMMAND_LONG = """Help provides help for any command in the application.
Simply type {root} help [path to command] for full details."""

# =============================================================================
# Dispatch Messages
# =============================================================================

COMMAND_ERROR = "Error: {error}"

UNKNOWN_COMMAND = "unknown command {name} for {root}"

INVALID_CONFIG = "invalid configuration for {field}: {reason}"

# =============================================================================
# Diagnostics Messages
# =============================================================================

HTTP_STATS_ERROR = "Error logging HTTP stats: {error}"

# =============================================================================
# Completion Messages
# =============================================================================

COMPLETION_SHORT = "Generate completion script"

# =============================================================================
# Helper Functions
# =============================================================================


def quote(value: str) -> str:
    """Double-quote a value with escapes, e.g. ``"git-lfs"``."""
    return json.dumps(value)


def quote_list(values: Iterable[str]) -> str:
    """Render a list of words as ``[`a` `b`]``."""
    return "[" + " ".join(f"`{value}`" for value in values) + "]"


def get_message(key: str, **kwargs) -> str:
    """Get a message template with optional formatting.

    Args:
        key: Message key (module-level constant name)
        **kwargs: Format arguments for the message

    Returns:
        Formatted message string, or the key itself when unknown
    """
    message = globals().get(key)
    if not isinstance(message, str):
        return key

    if kwargs:
        try:
            return message.format(**kwargs)
        except KeyError:
            return message
    return message
