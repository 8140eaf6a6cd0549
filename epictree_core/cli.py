"""CLI module for Epictree - typer app and all commands."""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer
from typing_extensions import Annotated

from epictree_core.config import Settings, split_repo
from epictree_core.constants import STATUS_MARKERS
from epictree_core.editor import Editor
from epictree_core.exceptions import EpictreeError
from epictree_core.github import GitHubClient
from epictree_core.issues import Issue
from epictree_core.jsonl import export_issues, load_issues
from epictree_core.service import build_parents, plan_updates, sync_repository
from epictree_core.tree import IssueTree
from epictree_core.utils import file_lock

__all__ = ["app", "main"]

# Create Typer app
app = typer.Typer(help="Epictree - Keep child issue checklists of parent issues in sync")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_jsonl(jsonl_path: Path) -> List[Issue]:
    if not jsonl_path.exists():
        print(f"Error: File {jsonl_path} not found")
        raise typer.Exit(code=1)

    issues, stats = load_issues(jsonl_path)
    if stats["errors"]:
        print(f"Warning: Skipped {stats['errors']} malformed line(s) in {jsonl_path}")
    return issues


@app.command()
def sync(
    repo: Annotated[Optional[str], typer.Option(help="Repository as owner/repo (default: INPUT_REPO)")] = None,
    token: Annotated[Optional[str], typer.Option(help="GitHub token (default: INPUT_TOKEN)")] = None,
    sync_days: Annotated[Optional[int], typer.Option(help="Only issues updated in the last N days (<= 0 for all)")] = None,
    max_levels: Annotated[Optional[int], typer.Option(help="Nesting levels to render (0 = unlimited)")] = None,
    dry_run: Annotated[Optional[bool], typer.Option("--dry-run/--no-dry-run", help="Compute updates without editing issues")] = None,
    add_changelog: Annotated[Optional[bool], typer.Option("--add-changelog/--no-add-changelog", help="Comment the change log on updated issues")] = None,
    update_closed: Annotated[Optional[bool], typer.Option("--update-closed/--no-update-closed", help="Also update closed parent issues")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show diagnostic logging")] = False,
):
    """Sync child issue sections of a GitHub repository."""
    _configure_logging(verbose)

    try:
        settings = Settings.from_env()
        # Command line options win over the environment
        if repo is not None:
            settings.owner, settings.repo = split_repo(repo)
        if token is not None:
            settings.token = token
        if sync_days is not None:
            settings.sync_days = sync_days
        if max_levels is not None:
            settings.max_levels = max_levels
        if dry_run is not None:
            settings.dry_run = dry_run
        if add_changelog is not None:
            settings.add_changelog = add_changelog
        if update_closed is not None:
            settings.update_closed = update_closed
        settings.validate()
    except EpictreeError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)

    client = GitHubClient(settings.owner, settings.repo, token=settings.token)

    try:
        report = sync_repository(settings, client)
    except EpictreeError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)

    for error in report.errors:
        print(f"Warning: {error}")

    for plan in report.plans:
        prefix = "Would update" if settings.dry_run else "Updated"
        print(f"{prefix} #{plan.issue.id}: {plan.issue.title}")
        for entry in plan.change_log:
            print(f"  - {entry}")

    count = len(report.plans) if settings.dry_run else len(report.updated)
    print(f"::set-output name=updatedIssues::{count}")


@app.command()
def render(
    jsonl_path: Annotated[Path, typer.Argument(help="JSONL file with one issue per line")],
    max_levels: Annotated[int, typer.Option(help="Nesting levels to render (0 = unlimited)")] = 0,
    add_missing: Annotated[bool, typer.Option("--add-missing/--no-add-missing", help="Append children missing from existing sections")] = True,
    update_closed: Annotated[bool, typer.Option("--update-closed/--no-update-closed", help="Also update closed parent issues")] = False,
    write: Annotated[bool, typer.Option("--write", help="Write updated bodies back to the file")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show diagnostic logging")] = False,
):
    """Sync child issue sections of a JSONL issue snapshot."""
    _configure_logging(verbose)

    lock_path = jsonl_path.with_name(jsonl_path.name + ".lock")

    with file_lock(lock_path):
        issues = _load_jsonl(jsonl_path)

        try:
            parents = build_parents(issues)
        except EpictreeError as e:
            print(f"Error: {e}")
            raise typer.Exit(code=1)

        editor = Editor(max_levels=max_levels, add_missing=add_missing)
        plans, errors = plan_updates(parents, editor, update_closed)

        for error in errors:
            print(f"Warning: {error}")

        if not plans:
            print("No changes")
            return

        for plan in plans:
            print(f"=== #{plan.issue.id}: {plan.issue.title}")
            for entry in plan.change_log:
                print(f"  - {entry}")
            if not write:
                print(plan.body)

        if write:
            for plan in plans:
                plan.issue.body = plan.body
            export_issues(issues, jsonl_path)
            print(f"Wrote {len(plans)} updated issue(s) to {jsonl_path}")


@app.command()
def tree(
    jsonl_path: Annotated[Path, typer.Argument(help="JSONL file with one issue per line")],
    issue_id: Annotated[Optional[int], typer.Argument(help="Root issue number (default: all roots)")] = None,
    max_depth: Annotated[int, typer.Option(help="Maximum depth to display")] = 10,
):
    """Show issue tree (parent-child hierarchy)."""
    issues = _load_jsonl(jsonl_path)

    try:
        issue_tree = IssueTree.build(issues)
        parents = issue_tree.parent_issues()
    except EpictreeError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)

    by_id: Dict[int, Issue] = issue_tree.issues

    if issue_id is not None:
        if issue_id not in by_id:
            print(f"Error: Issue #{issue_id} not found")
            raise typer.Exit(code=1)
        roots = [by_id[issue_id]]
    else:
        children_ids = {c.id for p in parents for c in p.children}
        roots = [p for p in parents if p.id not in children_ids]

    if not roots:
        print("No parent issues found")
        return

    def print_tree(issue: Issue, depth: int = 0, prefix: str = "", is_last: bool = True) -> None:
        """Recursively print issue tree."""
        if depth > max_depth:
            return

        status_marker = STATUS_MARKERS.get(issue.status.value, "?")

        connector = "└─ " if is_last else "├─ "
        if depth == 0:
            connector = ""

        print(f"{prefix}{connector}{status_marker} #{issue.id} - {issue.title} [{issue.status.value}]")

        if issue.children:
            child_prefix = prefix + ("   " if is_last or depth == 0 else "│  ")

            for i, child in enumerate(issue.children):
                print_tree(child, depth + 1, child_prefix, i == len(issue.children) - 1)

    for root in roots:
        print_tree(root)


def main():
    """Main CLI entry point."""
    app()
