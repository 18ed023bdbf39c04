"""Command-line assembly and dispatch."""
