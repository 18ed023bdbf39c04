"""Environment canonicalization performed before configuration is loaded."""

import logging
import os
from collections.abc import MutableMapping

logger = logging.getLogger(__name__)

# Git resolves these relative to its own working directory, which may differ
# from ours once we start spawning git subprocesses from other directories.
PATH_VARIABLES = (
    "GIT_INDEX_FILE",
    "GIT_OBJECT_DIRECTORY",
    "GIT_DIR",
    "GIT_WORK_TREE",
    "GIT_COMMON_DIR",
)


def canonicalize_path(path: str) -> str:
    """Return an absolute path with symlinks resolved where they exist."""
    absolute = os.path.abspath(path)
    try:
        return os.path.realpath(absolute, strict=True)
    except OSError:
        return absolute


def canonicalize_environment(environ: MutableMapping[str, str] | None = None) -> None:
    """
    Rewrite git path variables to absolute, canonical paths.

    Args:
        environ: Mapping to rewrite in place (default: os.environ)
    """
    if environ is None:
        environ = os.environ

    for name in PATH_VARIABLES:
        value = environ.get(name)
        if not value:
            continue
        canonical = canonicalize_path(value)
        if canonical != value:
            logger.debug(f"Canonicalized {name}: {value} -> {canonical}")
            environ[name] = canonical
