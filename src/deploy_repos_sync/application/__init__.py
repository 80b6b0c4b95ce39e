"""Application services orchestrating domain and core capabilities."""

from .execution import run_workspace_sync
from .orchestrator import sync_repositories, sync_repository
from .status import aggregate, print_report

__all__ = [
    "aggregate",
    "print_report",
    "run_workspace_sync",
    "sync_repositories",
    "sync_repository",
]
