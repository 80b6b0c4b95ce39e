"""Two-tier integration of upstream changes: fast-forward, then rebase."""

from dataclasses import dataclass
from pathlib import Path

from .process_control import is_shutdown_requested
from .vcs import VcsResult, VersionControl
from ..domain.models import SyncOutcome
from ..infra.logger import log_success, log_warning


@dataclass(frozen=True)
class UpdateResult:
    outcome: SyncOutcome
    detail: str


def update_working_copy(name: str, path: Path, vcs: VersionControl) -> UpdateResult:
    """Bring an existing working copy up to date with its upstream.

    Rebase is only attempted after a failed fast-forward; nothing else is
    retried.
    """
    fast_forward = vcs.fast_forward(path)
    if fast_forward.ok:
        log_success(f"{name}: pulled latest changes")
        return UpdateResult(SyncOutcome.UPDATED_FAST_FORWARD, "fast-forwarded to upstream")

    # a Ctrl-C killed the pull; do not start a second network call
    if is_shutdown_requested():
        log_warning(f"{name}: update canceled")
        return UpdateResult(
            SyncOutcome.MANUAL_RESOLUTION_REQUIRED,
            f"update canceled by operator; fast-forward: {fast_forward.describe()}",
        )

    rebase = vcs.rebase(path)
    if rebase.ok:
        log_success(f"{name}: pulled latest changes (rebased)")
        return UpdateResult(
            SyncOutcome.UPDATED_REBASE,
            f"rebased onto upstream (fast-forward failed: {fast_forward.reason})",
        )

    log_warning(f"{name}: could not pull - local changes may conflict")
    log_warning(f"  resolve manually: cd {path} && git pull")
    return UpdateResult(
        SyncOutcome.MANUAL_RESOLUTION_REQUIRED,
        _manual_detail(fast_forward, rebase),
    )


def _manual_detail(fast_forward: VcsResult, rebase: VcsResult) -> str:
    return (
        "needs operator attention (divergent history, unresolved conflicts or network failure); "
        f"fast-forward: {fast_forward.describe()}; rebase: {rebase.describe()}"
    )
