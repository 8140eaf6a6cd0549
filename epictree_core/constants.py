"""Constants for Epictree - markers, formatting, and defaults."""

__all__ = [
    "SECTION_HEADER",
    "SPACES_PER_LEVEL",
    "PARENT_MARKERS",
    "MAX_ISSUE_DIGITS",
    "TRUTHY_FLAGS",
    "DEFAULT_SYNC_DAYS",
    "DEFAULT_MAX_LEVELS",
    "ISSUES_PER_PAGE",
    "GITHUB_API_URL",
    "REQUEST_TIMEOUT",
    "MAX_WORKERS",
    "STATUS_MARKERS",
]

# Generated section
SECTION_HEADER = "### Child issues:"
SPACES_PER_LEVEL = 2

# Parent declaration markers (compared lower-cased and trimmed)
PARENT_MARKERS = {"parent issue", "epic", "parent"}

# Ten digits of a 32-bit issue number
MAX_ISSUE_DIGITS = 10

# Environment flags
TRUTHY_FLAGS = {"1", "true", "y", "yes"}
DEFAULT_SYNC_DAYS = 1
DEFAULT_MAX_LEVELS = 0

# GitHub REST API
GITHUB_API_URL = "https://api.github.com"
ISSUES_PER_PAGE = 100
REQUEST_TIMEOUT = 30.0
MAX_WORKERS = 8

# Tree display
STATUS_MARKERS = {
    "open": "○",
    "locked": "⊘",
    "closed": "●",
}
