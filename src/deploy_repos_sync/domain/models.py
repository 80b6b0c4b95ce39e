"""Domain data structures."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Tuple

UNKNOWN_BRANCH = "unknown"


@dataclass(frozen=True)
class RepositoryDescriptor:
    """One externally hosted repository and where it lives locally."""

    name: str
    remote: str
    local_path: Path


@dataclass(frozen=True)
class RepoState:
    """Snapshot of a local path, derived fresh on every run."""

    exists: bool
    is_version_controlled: bool = False
    current_branch: str = UNKNOWN_BRANCH


@dataclass(frozen=True)
class SyncMode:
    """Run-wide mode: update existing working copies or only clone missing ones."""

    pull_existing: bool = True

    @property
    def label(self) -> str:
        return "clone or pull latest" if self.pull_existing else "clone only"


class SyncOutcome(Enum):
    CLONED = "cloned"
    UPDATED_FAST_FORWARD = "updated_fast_forward"
    UPDATED_REBASE = "updated_rebase"
    SKIPPED_NOT_VERSION_CONTROLLED = "skipped_not_version_controlled"
    SKIPPED_BY_MODE = "skipped_by_mode"
    MANUAL_RESOLUTION_REQUIRED = "manual_resolution_required"
    CLONE_FAILED = "clone_failed"

    @property
    def is_warning(self) -> bool:
        return self in (
            SyncOutcome.SKIPPED_NOT_VERSION_CONTROLLED,
            SyncOutcome.MANUAL_RESOLUTION_REQUIRED,
        )

    @property
    def is_failure(self) -> bool:
        return self is SyncOutcome.CLONE_FAILED


@dataclass(frozen=True)
class SyncResult:
    """The single outcome recorded for one descriptor in one run."""

    descriptor: RepositoryDescriptor
    outcome: SyncOutcome
    detail: str = ""


@dataclass(frozen=True)
class RunReport:
    """Ordered results plus the post-run readiness check."""

    results: Tuple[SyncResult, ...]
    all_present: bool
    missing: Tuple[RepositoryDescriptor, ...] = field(default_factory=tuple)

    @property
    def ready(self) -> List[SyncResult]:
        missing_names = {descriptor.name for descriptor in self.missing}
        return [result for result in self.results if result.descriptor.name not in missing_names]
