"""git subprocess layer implementing the version-control capability interface."""

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .clone import remove_partial_clone
from .errors import MissingDependencyError
from .process_control import KILL_GRACE, forget_process, kill_process_tree, start_process
from .vcs import SnapshotHandle, VcsResult
from ..infra.logger import log_warning

NETWORK_TIMEOUT = 600
LOCAL_TIMEOUT = 60


def classify_git_failure(stderr_text: str) -> str:
    """Map common git stderr to concise reason tags."""
    text = (stderr_text or "").lower()
    if not text:
        return "unknown"
    if "not a git repository" in text:
        return "not_git_repo"
    if "repository not found" in text or "does not appear to be a git repository" in text:
        return "repo_not_found"
    if "couldn't find remote ref" in text or "no such remote" in text:
        return "remote_ref_missing"
    if "your local changes" in text or "would be overwritten" in text:
        return "local_changes_conflict"
    if "fatal: refusing to merge unrelated histories" in text:
        return "unrelated_histories"
    if "not possible to fast-forward" in text or "cannot fast-forward" in text:
        return "not_fast_forward"
    if "could not resolve host" in text or "failed to connect" in text or "timed out" in text:
        return "network_error"
    if (
        "authentication failed" in text
        or "permission denied" in text
        or "could not read username" in text
        or "host key verification failed" in text
    ):
        return "auth_error"
    if "conflict" in text:
        return "conflict"
    if "no tracking information" in text or "no upstream" in text:
        return "no_upstream"
    return "unknown"


@dataclass(frozen=True)
class GitCommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def reason(self) -> str:
        if self.timed_out:
            return "timeout"
        return classify_git_failure(self.stderr)

    def first_error_line(self) -> str:
        for line in (self.stderr or "").splitlines():
            line = line.strip()
            if line:
                return line[:200]
        return ""

    def to_vcs_result(self) -> VcsResult:
        if self.ok:
            return VcsResult.success()
        return VcsResult.failure(self.reason, self.first_error_line())


def run_git(
    args: Sequence[str],
    cwd: Optional[Path] = None,
    timeout: float = LOCAL_TIMEOUT,
    env: Optional[Dict[str, str]] = None,
) -> GitCommandResult:
    """Run one git command synchronously, bounded by ``timeout`` seconds."""
    command: List[str] = ["git"]
    if cwd is not None:
        command += ["-C", str(cwd)]
    command += list(args)

    try:
        process = start_process(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            env=env,
        )
    except FileNotFoundError:
        return GitCommandResult(127, stderr="git executable not found")

    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        kill_process_tree(process)
        try:
            process.communicate(timeout=KILL_GRACE)
        except subprocess.TimeoutExpired:
            # an orphan that left the group still holds the pipe; give up on its output
            pass
        return GitCommandResult(-1, stderr=f"git {' '.join(args[:1])} timed out after {timeout}s", timed_out=True)
    finally:
        forget_process(process)

    return GitCommandResult(process.returncode, stdout or "", stderr or "")


def ensure_git_available() -> str:
    """Return ``git --version`` output or raise MissingDependencyError."""
    if shutil.which("git") is None:
        raise MissingDependencyError("git is not installed. Please install git first.")

    result = run_git(["--version"])
    if not result.ok:
        raise MissingDependencyError(f"git is not usable: {result.first_error_line() or result.reason}")
    return result.stdout.strip()


class GitCli:
    """VersionControl backed by the ``git`` executable."""

    def __init__(
        self,
        network_timeout: float = NETWORK_TIMEOUT,
        local_timeout: float = LOCAL_TIMEOUT,
        non_interactive: bool = False,
    ):
        self.network_timeout = network_timeout
        self.local_timeout = local_timeout
        self.non_interactive = non_interactive

    def _env(self) -> Optional[Dict[str, str]]:
        if not self.non_interactive:
            return None
        env = dict(os.environ)
        env["GIT_TERMINAL_PROMPT"] = "0"
        env.setdefault("GIT_SSH_COMMAND", "ssh -o BatchMode=yes")
        return env

    def _local(self, path: Path, *args: str) -> GitCommandResult:
        return run_git(args, cwd=path, timeout=self.local_timeout)

    def _network(self, path: Optional[Path], *args: str) -> GitCommandResult:
        return run_git(args, cwd=path, timeout=self.network_timeout, env=self._env())

    def clone(self, remote: str, path: Path) -> VcsResult:
        existed = path.exists()
        path.parent.mkdir(parents=True, exist_ok=True)
        result = self._network(None, "clone", remote, str(path))
        if not result.ok and not existed:
            remove_partial_clone(path)
        return result.to_vcs_result()

    def is_working_copy(self, path: Path) -> bool:
        # .git is a directory for clones and a file for worktrees/submodules
        return (path / ".git").exists()

    def current_branch(self, path: Path) -> Optional[str]:
        result = self._local(path, "branch", "--show-current")
        branch = result.stdout.strip()
        if not result.ok or not branch:
            return None
        return branch

    def has_local_changes(self, path: Path) -> bool:
        unstaged = self._local(path, "diff", "--quiet")
        if not unstaged.ok:
            return True
        staged = self._local(path, "diff", "--cached", "--quiet")
        return not staged.ok

    def _stash_head(self, path: Path) -> Optional[str]:
        result = self._local(path, "rev-parse", "-q", "--verify", "refs/stash")
        sha = result.stdout.strip()
        return sha if result.ok and sha else None

    def set_aside_changes(self, path: Path, label: str) -> Tuple[VcsResult, Optional[SnapshotHandle]]:
        before = self._stash_head(path)
        result = self._local(path, "stash", "push", "--quiet", "-m", label)
        if not result.ok:
            return result.to_vcs_result(), None

        after = self._stash_head(path)
        if after is None or after == before:
            return VcsResult.success(), None
        return VcsResult.success(), SnapshotHandle(ref=after, label=label)

    def _stash_entry(self, path: Path, ref: str) -> Optional[str]:
        listing = self._local(path, "stash", "list", "--format=%gd %H")
        if not listing.ok:
            return None
        for line in listing.stdout.splitlines():
            parts = line.split()
            if len(parts) == 2 and parts[1] == ref:
                return parts[0]
        return None

    def restore_changes(self, path: Path, handle: SnapshotHandle) -> VcsResult:
        result = self._local(path, "stash", "apply", "--quiet", handle.ref)
        if not result.ok:
            return VcsResult.failure("restore_conflict", result.first_error_line())

        entry = self._stash_entry(path, handle.ref)
        if entry is not None:
            dropped = self._local(path, "stash", "drop", "--quiet", entry)
            if not dropped.ok:
                log_warning(f"restored changes but could not drop {entry} in {path}")
        return VcsResult.success()

    def fast_forward(self, path: Path) -> VcsResult:
        return self._network(
            path, "pull", "--ff-only", "--no-rebase", "--no-stat", "--no-progress"
        ).to_vcs_result()

    def _rebase_in_progress(self, path: Path) -> bool:
        result = self._local(path, "rev-parse", "--git-dir")
        if not result.ok:
            return False
        git_dir = Path(result.stdout.strip())
        if not git_dir.is_absolute():
            git_dir = path / git_dir
        return (git_dir / "rebase-merge").exists() or (git_dir / "rebase-apply").exists()

    def rebase(self, path: Path) -> VcsResult:
        result = self._network(path, "pull", "--rebase", "--no-progress")
        if result.ok:
            return VcsResult.success()

        if self._rebase_in_progress(path):
            aborted = self._local(path, "rebase", "--abort")
            if not aborted.ok:
                log_warning(f"could not abort the failed rebase in {path}")
        return result.to_vcs_result()
