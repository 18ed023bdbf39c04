"""Deferred command registration and dispatch for the git-lfs command line."""

__version__ = "3.6.0"
