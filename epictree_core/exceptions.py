"""Custom exceptions for Epictree."""

__all__ = [
    "EpictreeError",
    "RenderStop",
    "AlreadyRenderedError",
    "LevelTooDeepError",
    "SelfReferenceError",
    "CycleError",
    "ConfigError",
    "GitHubError",
    "LockError",
]


class EpictreeError(Exception):
    """Base class for Epictree errors."""

    pass


class RenderStop(EpictreeError):
    """Raised to stop a recursive render early. Never leaves the editor."""

    pass


class AlreadyRenderedError(RenderStop):
    """Raised when an issue was already rendered in the current pass."""

    pass


class LevelTooDeepError(RenderStop):
    """Raised when the next level would exceed the configured maximum."""

    pass


class SelfReferenceError(EpictreeError):
    """Raised when an issue declares itself as its own parent."""

    pass


class CycleError(EpictreeError):
    """Raised when parent declarations form a cycle."""

    pass


class ConfigError(EpictreeError):
    """Raised when settings are missing or malformed."""

    pass


class GitHubError(EpictreeError):
    """Raised when a GitHub API request fails."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class LockError(EpictreeError):
    """Raised when unable to acquire file lock."""

    pass
