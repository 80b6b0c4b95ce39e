"""Application service running one full workspace sync."""

from pathlib import Path
from typing import Optional, Sequence

from ..core.connectivity import check_ssh_access
from ..core.git import GitCli, ensure_git_available
from ..core.process_control import clear_shutdown_request
from ..core.vcs import VersionControl
from ..domain.descriptors import build_descriptors, ssh_hosts
from ..domain.models import RepositoryDescriptor, RunReport, SyncMode
from ..infra.logger import log_info, log_success, log_warning, print_banner, print_rule
from .orchestrator import sync_repositories
from .status import print_report

TITLE = "PhishSight Deployment Setup"


def check_access(descriptors: Sequence[RepositoryDescriptor]) -> None:
    """Advisory SSH check; never blocks the run."""
    for host in ssh_hosts(descriptors):
        log_info(f"Checking SSH access to {host}...")
        ok, summary = check_ssh_access(host)
        if ok:
            log_success(f"SSH access to {host} confirmed")
        else:
            log_warning(f"Could not verify SSH access to {host} ({summary}). Continuing anyway...")
            log_warning("  If cloning fails, ensure your SSH key is added to the hosting account.")


def run_workspace_sync(
    workspace_dir: Path,
    mode: SyncMode,
    vcs: Optional[VersionControl] = None,
    descriptors: Optional[Sequence[RepositoryDescriptor]] = None,
    ssh_check: bool = True,
) -> RunReport:
    """Check preconditions, sync every repository and print the report.

    Raises MissingDependencyError before touching anything when git is absent.
    """
    clear_shutdown_request()
    print_banner(TITLE)

    git_version = ensure_git_available()
    log_info(f"using {git_version}")

    if descriptors is None:
        descriptors = build_descriptors(workspace_dir)
    if vcs is None:
        vcs = GitCli()

    if ssh_check:
        check_access(descriptors)

    print()
    log_info(f"Setting up repositories in {workspace_dir} ({mode.label})...")
    print_rule()

    report = sync_repositories(descriptors, mode, vcs)

    print()
    print_report(report)
    return report
