"""The static set of repositories the deployment needs."""

from pathlib import Path
from typing import List, Sequence, Tuple

from .models import RepositoryDescriptor

# (directory name, remote) in processing order
DEFAULT_REPOSITORIES: Tuple[Tuple[str, str], ...] = (
    ("phishsight-app-backend", "git@github.com:OsamaMahmood/phishsight-app-backend.git"),
    ("phishsight-site", "git@github.com:OsamaMahmood/phishsight-site.git"),
    ("phishsight-app", "git@github.com:OsamaMahmood/phishsight-app.git"),
)


def build_descriptors(
    workspace_dir: Path,
    repositories: Sequence[Tuple[str, str]] = DEFAULT_REPOSITORIES,
) -> List[RepositoryDescriptor]:
    """Materialize descriptors under ``workspace_dir``, keeping declaration order."""
    seen = set()
    descriptors: List[RepositoryDescriptor] = []
    for name, remote in repositories:
        if name in seen:
            raise ValueError(f"duplicate repository name: {name}")
        seen.add(name)
        descriptors.append(
            RepositoryDescriptor(name=name, remote=remote, local_path=Path(workspace_dir) / name)
        )
    return descriptors


def ssh_hosts(descriptors: Sequence[RepositoryDescriptor]) -> List[str]:
    """Distinct ``user@host`` targets of scp-style or ssh:// remotes, in order."""
    hosts: List[str] = []
    for descriptor in descriptors:
        host = _ssh_host(descriptor.remote)
        if host and host not in hosts:
            hosts.append(host)
    return hosts


def _ssh_host(remote: str) -> str:
    if remote.startswith("ssh://"):
        authority = remote[len("ssh://"):].split("/", 1)[0]
        return authority.rsplit(":", 1)[0] if authority.count(":") == 1 else authority
    if "://" in remote:
        return ""
    if ":" in remote and "@" in remote.split(":", 1)[0]:
        return remote.split(":", 1)[0]
    return ""
