"""Per-repository clone/update/skip decisions, in declaration order."""

from typing import Callable, List, Optional, Sequence

from ..core.clone import clone_repository
from ..core.preserve import restore_changes, set_aside_changes
from ..core.probe import probe_repo_state
from ..core.process_control import raise_if_shutdown_requested
from ..core.update import update_working_copy
from ..core.vcs import VersionControl
from ..domain.models import RepositoryDescriptor, RunReport, SyncMode, SyncOutcome, SyncResult
from ..infra.logger import log_step, log_warning
from .status import aggregate

ProgressCallback = Callable[[int, int, SyncResult], None]


def sync_repository(descriptor: RepositoryDescriptor, mode: SyncMode, vcs: VersionControl) -> SyncResult:
    """Decide and apply the action for one descriptor; always returns a result."""
    path = descriptor.local_path
    state = probe_repo_state(path, vcs)

    if not state.exists:
        cloned, detail = clone_repository(descriptor, vcs)
        outcome = SyncOutcome.CLONED if cloned else SyncOutcome.CLONE_FAILED
        return SyncResult(descriptor, outcome, detail)

    if not state.is_version_controlled:
        log_warning(f"'{descriptor.name}' exists but is not a git repo. Skipping.")
        return SyncResult(
            descriptor,
            SyncOutcome.SKIPPED_NOT_VERSION_CONTROLLED,
            f"{path} exists but is not a git working copy",
        )

    log_step(f"-> {descriptor.name} (branch: {state.current_branch})")

    if not mode.pull_existing:
        log_warning(f"{descriptor.name}: already exists, skipping (--clone-only)")
        return SyncResult(descriptor, SyncOutcome.SKIPPED_BY_MODE, "already exists, not updated in clone-only mode")

    set_aside = set_aside_changes(descriptor.name, path, vcs)
    if not set_aside.ok:
        return SyncResult(
            descriptor,
            SyncOutcome.MANUAL_RESOLUTION_REQUIRED,
            f"could not stash local changes ({set_aside.result.describe()}); update not attempted",
        )

    update = update_working_copy(descriptor.name, path, vcs)

    restored = restore_changes(descriptor.name, path, set_aside.handle, vcs)
    if not restored.ok:
        return SyncResult(
            descriptor,
            SyncOutcome.MANUAL_RESOLUTION_REQUIRED,
            f"{update.detail}; stashed changes conflict on restore and remain in "
            f"{set_aside.handle.label!r} ({set_aside.handle.ref[:12]})",
        )

    detail = update.detail
    if set_aside.handle is not None:
        detail += "; local changes restored"
    return SyncResult(descriptor, update.outcome, detail)


def sync_repositories(
    descriptors: Sequence[RepositoryDescriptor],
    mode: SyncMode,
    vcs: VersionControl,
    progress_cb: Optional[ProgressCallback] = None,
) -> RunReport:
    """Process every descriptor sequentially and aggregate the run.

    A failure on one repository never stops the others. Raises SyncCancelled
    between repositories when shutdown was requested.
    """
    results: List[SyncResult] = []
    total = len(descriptors)

    for index, descriptor in enumerate(descriptors):
        raise_if_shutdown_requested()
        if index:
            print()
        result = sync_repository(descriptor, mode, vcs)
        results.append(result)
        if progress_cb:
            progress_cb(index + 1, total, result)

    return aggregate(results)
