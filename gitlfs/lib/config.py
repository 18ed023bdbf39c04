"""Configuration management via environment variables and pydantic-settings."""

import platform
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from gitlfs import __version__


class Settings(BaseSettings):
    """
    Shared configuration loaded from environment variables.

    Constructed once per invocation, after the environment has been
    canonicalized, so that rewritten GIT_* paths are visible here.
    """

    git_dir: str = Field(
        default=".git",
        alias="GIT_DIR",
        description="Path to the repository's git directory",
    )

    log_stats: str = Field(
        default="",
        alias="GIT_LOG_STATS",
        description="Any non-empty value enables HTTP statistics logging",
    )

    http_timeout: float = Field(
        default=30.0,
        alias="GIT_LFS_HTTP_TIMEOUT",
        description="Timeout for API requests in seconds",
    )

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
    }

    @property
    def local_git_dir(self) -> Path:
        """Get the git directory as Path."""
        return Path(self.git_dir)

    @property
    def local_log_dir(self) -> Path:
        """Directory holding git-lfs diagnostic logs."""
        return self.local_git_dir / "lfs" / "logs"

    @property
    def http_stats_enabled(self) -> bool:
        """Check if HTTP statistics logging was requested."""
        return len(self.log_stats) > 0


def version_description() -> str:
    """Describe this build, e.g. ``git-lfs/3.6.0 (GitHub; linux x86_64; python 3.12.4)``."""
    system = platform.system().lower() or "unknown"
    machine = platform.machine().lower() or "unknown"
    return (
        f"git-lfs/{__version__} (GitHub; {system} {machine}; "
        f"python {platform.python_version()})"
    )
