"""Services used by the command dispatcher."""
