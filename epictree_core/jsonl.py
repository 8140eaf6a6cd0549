"""JSONL import/export for Epictree - offline issue snapshots."""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Union

from epictree_core.issues import Issue

__all__ = [
    "load_issues",
    "export_issues",
]

logger = logging.getLogger(__name__)


def load_issues(jsonl_path: Union[str, Path]) -> Tuple[List[Issue], Dict[str, int]]:
    """Load issues from a JSONL file.

    Args:
        jsonl_path: Path to JSONL file, one issue object per line

    Returns:
        Tuple of (issues, stats) where stats counts "loaded" and "errors"

    Notes:
        - Blank lines are ignored
        - Malformed lines are counted as errors and skipped
        - A missing file yields no issues
    """
    stats = {"loaded": 0, "errors": 0}
    issues: List[Issue] = []
    path = Path(jsonl_path)

    if not path.exists():
        return issues, stats

    with path.open("r", encoding="utf-8") as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue

            try:
                issues.append(Issue.from_dict(json.loads(line)))
            except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed issue. line=%s err=%s", line_num, e)
                stats["errors"] += 1
                continue

            stats["loaded"] += 1

    return issues, stats


def export_issues(issues: Iterable[Issue], jsonl_path: Union[str, Path]) -> None:
    """Write issues to a JSONL file, sorted by ID for stable diffs."""
    path = Path(jsonl_path)
    with path.open("w", encoding="utf-8") as f:
        for issue in sorted(issues, key=lambda i: i.id):
            f.write(json.dumps(issue.to_dict(), ensure_ascii=False) + "\n")
