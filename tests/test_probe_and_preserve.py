from deploy_repos_sync.core.preserve import (
    STASH_LABEL_PREFIX,
    restore_changes,
    set_aside_changes,
    stash_label,
)
from deploy_repos_sync.core.probe import probe_repo_state
from deploy_repos_sync.domain.models import UNKNOWN_BRANCH, RepoState


def test_probe_missing_path_does_no_git_checks(fake_vcs, tmp_path):
    state = probe_repo_state(tmp_path / "absent", fake_vcs)

    assert state == RepoState(exists=False)
    assert fake_vcs.calls == []


def test_probe_plain_directory(fake_vcs, tmp_path):
    (tmp_path / "plain").mkdir()

    state = probe_repo_state(tmp_path / "plain", fake_vcs)

    assert state.exists is True
    assert state.is_version_controlled is False
    assert "current_branch" not in [op for op, _ in fake_vcs.calls]


def test_probe_reports_branch(fake_vcs, tmp_path):
    (tmp_path / "repo" / ".git").mkdir(parents=True)

    state = probe_repo_state(tmp_path / "repo", fake_vcs)

    assert state == RepoState(exists=True, is_version_controlled=True, current_branch="main")


def test_probe_detached_head_is_unknown(fake_vcs, tmp_path):
    path = tmp_path / "repo"
    (path / ".git").mkdir(parents=True)
    fake_vcs.detached.add(path)

    state = probe_repo_state(path, fake_vcs)

    assert state.is_version_controlled is True
    assert state.current_branch == UNKNOWN_BRANCH


def test_clean_tree_is_not_stashed(fake_vcs, tmp_path):
    set_aside = set_aside_changes("repo", tmp_path, fake_vcs)

    assert set_aside.ok is True
    assert set_aside.handle is None
    assert fake_vcs.mutations() == []


def test_dirty_tree_is_stashed_with_a_named_snapshot(fake_vcs, tmp_path):
    fake_vcs.dirty.add(tmp_path)

    set_aside = set_aside_changes("repo", tmp_path, fake_vcs)

    assert set_aside.ok is True
    assert set_aside.handle is not None
    assert set_aside.handle.label.startswith(f"{STASH_LABEL_PREFIX}: repo")
    assert tmp_path not in fake_vcs.dirty


def test_restore_without_snapshot_is_a_no_op(fake_vcs, tmp_path):
    result = restore_changes("repo", tmp_path, None, fake_vcs)

    assert result.ok is True
    assert fake_vcs.calls == []


def test_restore_conflict_keeps_the_snapshot(fake_vcs, tmp_path):
    fake_vcs.dirty.add(tmp_path)
    fake_vcs.restore_conflicts.add(tmp_path)
    handle = set_aside_changes("repo", tmp_path, fake_vcs).handle

    result = restore_changes("repo", tmp_path, handle, fake_vcs)

    assert result.ok is False
    assert result.reason == "restore_conflict"
    assert fake_vcs.stashes[tmp_path] == [handle]


def test_stash_label_is_timestamped():
    from datetime import datetime

    label = stash_label("site", datetime(2024, 5, 1, 12, 30, 0))

    assert label == "deploy-repos-sync: site before update 20240501-123000"


def test_probe_regular_file_is_absent(fake_vcs, tmp_path):
    (tmp_path / "repo").write_text("x", encoding="utf-8")

    state = probe_repo_state(tmp_path / "repo", fake_vcs)

    assert state == RepoState(exists=False)
    assert fake_vcs.calls == []
