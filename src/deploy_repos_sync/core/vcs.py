"""Narrow version-control capability interface used by the sync core.

The orchestrator, the change preserver and the update strategy only talk
to this interface, so tests can substitute a fake without spawning git.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Tuple


@dataclass(frozen=True)
class VcsResult:
    """Success/failure of one capability call plus a short reason tag."""

    ok: bool
    reason: str = ""
    message: str = ""

    @classmethod
    def success(cls) -> "VcsResult":
        return cls(True)

    @classmethod
    def failure(cls, reason: str, message: str = "") -> "VcsResult":
        return cls(False, reason or "unknown", message)

    def describe(self) -> str:
        if self.ok:
            return "ok"
        if self.message:
            return f"{self.reason}: {self.message}"
        return self.reason


@dataclass(frozen=True)
class SnapshotHandle:
    """A recoverable set-aside of local changes (a stash commit)."""

    ref: str
    label: str


class VersionControl(Protocol):
    def clone(self, remote: str, path: Path) -> VcsResult:
        ...

    def is_working_copy(self, path: Path) -> bool:
        ...

    def current_branch(self, path: Path) -> Optional[str]:
        ...

    def has_local_changes(self, path: Path) -> bool:
        ...

    def set_aside_changes(self, path: Path, label: str) -> Tuple[VcsResult, Optional[SnapshotHandle]]:
        ...

    def restore_changes(self, path: Path, handle: SnapshotHandle) -> VcsResult:
        ...

    def fast_forward(self, path: Path) -> VcsResult:
        ...

    def rebase(self, path: Path) -> VcsResult:
        ...
