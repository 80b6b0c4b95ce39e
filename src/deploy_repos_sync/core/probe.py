"""Inspect a local path without touching it."""

from pathlib import Path

from .vcs import VersionControl
from ..domain.models import UNKNOWN_BRANCH, RepoState


def probe_repo_state(path: Path, vcs: VersionControl) -> RepoState:
    """Report existence, working-copy status and current branch of ``path``.

    A failed branch lookup (detached HEAD, unreadable repo) yields
    ``UNKNOWN_BRANCH``; probing never raises for git trouble. Only a
    directory counts as present; a regular file at ``path`` is reported absent.
    """
    if not path.is_dir():
        return RepoState(exists=False)

    if not vcs.is_working_copy(path):
        return RepoState(exists=True, is_version_controlled=False)

    branch = vcs.current_branch(path) or UNKNOWN_BRANCH
    return RepoState(exists=True, is_version_controlled=True, current_branch=branch)
