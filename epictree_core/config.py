"""Settings for Epictree - read from INPUT_* environment variables."""

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from epictree_core.constants import DEFAULT_MAX_LEVELS, DEFAULT_SYNC_DAYS, TRUTHY_FLAGS
from epictree_core.exceptions import ConfigError

__all__ = [
    "flag_to_bool",
    "parse_sync_days",
    "parse_max_levels",
    "split_repo",
    "Settings",
]


def flag_to_bool(value: Optional[str]) -> bool:
    """Interpret an environment flag ("1", "true", "y", "yes" are true)."""
    if value is None:
        return False
    return value.strip().lower() in TRUTHY_FLAGS


def parse_sync_days(value: Optional[str]) -> int:
    """Parse the sync window in days.

    Returns:
        Number of days, -1 for "all", or the default when unparseable
    """
    if value is None:
        return DEFAULT_SYNC_DAYS
    try:
        return int(value)
    except ValueError:
        if value.strip().lower() == "all":
            return -1
        return DEFAULT_SYNC_DAYS


def parse_max_levels(value: Optional[str]) -> int:
    if value is None:
        return DEFAULT_MAX_LEVELS
    try:
        return int(value)
    except ValueError:
        return DEFAULT_MAX_LEVELS


def split_repo(repo: str) -> Tuple[str, str]:
    """Split "owner/repo".

    Raises:
        ConfigError: If the value is not of the form owner/repo
    """
    parts = repo.strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise ConfigError(f"Invalid repository '{repo}'. Expected owner/repo")
    return parts[0], parts[1]


@dataclass
class Settings:
    """Run settings for a repository sync."""

    owner: str = ""
    repo: str = ""
    token: str = ""
    sync_days: int = DEFAULT_SYNC_DAYS
    max_levels: int = DEFAULT_MAX_LEVELS
    dry_run: bool = False
    add_changelog: bool = False
    update_closed: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the environment.

        ``INPUT_REPO`` may be absent here; ``validate`` reports it.

        Raises:
            ConfigError: If INPUT_REPO is set but malformed
        """
        if environ is None:
            environ = os.environ

        owner, repo = "", ""
        if environ.get("INPUT_REPO"):
            owner, repo = split_repo(environ["INPUT_REPO"])

        return cls(
            owner=owner,
            repo=repo,
            token=environ.get("INPUT_TOKEN", ""),
            sync_days=parse_sync_days(environ.get("INPUT_SYNC_DAYS")),
            max_levels=parse_max_levels(environ.get("INPUT_MAX_LEVELS")),
            dry_run=flag_to_bool(environ.get("INPUT_DRY_RUN")),
            add_changelog=flag_to_bool(environ.get("INPUT_ADD_CHANGELOG")),
            update_closed=flag_to_bool(environ.get("INPUT_UPDATE_CLOSED")),
        )

    def validate(self) -> None:
        """Raise ConfigError if a sync cannot run with these settings."""
        if not self.owner or not self.repo:
            raise ConfigError("Repository not set. Use --repo or INPUT_REPO=owner/repo")
        if self.max_levels < 0:
            raise ConfigError(f"Max levels must be >= 0, got {self.max_levels}")

    def describe(self) -> List[str]:
        """Human-readable settings, without the token."""
        return [
            f"Repo: {self.repo}",
            f"Owner: {self.owner}",
            f"Sync days: {self.sync_days}",
            f"Max levels: {self.max_levels}",
            f"Dry run: {self.dry_run}",
            f"Add comments: {self.add_changelog}",
            f"Update closed: {self.update_closed}",
        ]
