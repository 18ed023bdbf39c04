"""Git LFS API client."""

from gitlfs.services.api.client import ApiClient, HTTPStatsLog

__all__ = ["ApiClient", "HTTPStatsLog"]
