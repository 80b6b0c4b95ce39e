"""Domain models and the static repository set."""

from .descriptors import DEFAULT_REPOSITORIES, build_descriptors, ssh_hosts
from .models import (
    UNKNOWN_BRANCH,
    RepoState,
    RepositoryDescriptor,
    RunReport,
    SyncMode,
    SyncOutcome,
    SyncResult,
)

__all__ = [
    "DEFAULT_REPOSITORIES",
    "UNKNOWN_BRANCH",
    "RepoState",
    "RepositoryDescriptor",
    "RunReport",
    "SyncMode",
    "SyncOutcome",
    "SyncResult",
    "build_descriptors",
    "ssh_hosts",
]
