"""Set uncommitted changes aside around an update and put them back afterwards."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from .vcs import SnapshotHandle, VcsResult, VersionControl
from ..infra.logger import log_success, log_warning

STASH_LABEL_PREFIX = "deploy-repos-sync"


@dataclass(frozen=True)
class SetAside:
    """Result of the set-aside step for one repository.

    ``handle`` is None when there was nothing to set aside; ``result`` is a
    failure when changes existed but could not be stashed.
    """

    result: VcsResult
    handle: Optional[SnapshotHandle] = None

    @property
    def ok(self) -> bool:
        return self.result.ok


def stash_label(name: str, now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    return f"{STASH_LABEL_PREFIX}: {name} before update {stamp}"


def set_aside_changes(name: str, path: Path, vcs: VersionControl) -> SetAside:
    """Stash working tree and index changes if there are any."""
    if not vcs.has_local_changes(path):
        return SetAside(VcsResult.success())

    log_warning(f"{name}: has uncommitted changes - stashing before pull")
    result, handle = vcs.set_aside_changes(path, stash_label(name))
    if not result.ok:
        log_warning(f"{name}: could not stash local changes ({result.describe()})")
    return SetAside(result, handle)


def restore_changes(name: str, path: Path, handle: Optional[SnapshotHandle], vcs: VersionControl) -> VcsResult:
    """Reapply a set-aside snapshot; on conflict the snapshot is kept."""
    if handle is None:
        return VcsResult.success()

    result = vcs.restore_changes(path, handle)
    if result.ok:
        log_success(f"{name}: restored local changes")
    else:
        log_warning(f"{name}: stash conflict - run: cd {path} && git stash pop")
    return result
