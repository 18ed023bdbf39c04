"""Help text lookup for commands and topics."""

from gitlfs.services.help.resolver import HelpResolver, ROOT_NAME

__all__ = ["HelpResolver", "ROOT_NAME"]
