from pathlib import Path

import pytest

from deploy_repos_sync.application.orchestrator import sync_repositories, sync_repository
from deploy_repos_sync.core.process_control import SyncCancelled, request_shutdown
from deploy_repos_sync.core.vcs import VcsResult
from deploy_repos_sync.domain.descriptors import build_descriptors
from deploy_repos_sync.domain.models import SyncMode, SyncOutcome
from fakes import FakeVcs

PULL = SyncMode(pull_existing=True)
CLONE_ONLY = SyncMode(pull_existing=False)

REPOS = (
    ("backend", "git@example.com:org/backend.git"),
    ("site", "git@example.com:org/site.git"),
    ("app", "git@example.com:org/app.git"),
)


@pytest.fixture
def descriptors(tmp_path):
    return build_descriptors(tmp_path, REPOS)


def make_working_copy(path: Path) -> None:
    (path / ".git").mkdir(parents=True)


def test_absent_repository_is_cloned(fake_vcs, descriptors):
    backend = descriptors[0]

    result = sync_repository(backend, PULL, fake_vcs)

    assert result.outcome is SyncOutcome.CLONED
    assert backend.local_path.exists()
    assert fake_vcs.is_working_copy(backend.local_path)


def test_clean_copy_is_fast_forwarded(fake_vcs, descriptors):
    backend = descriptors[0]
    make_working_copy(backend.local_path)

    result = sync_repository(backend, PULL, fake_vcs)

    assert result.outcome is SyncOutcome.UPDATED_FAST_FORWARD
    assert fake_vcs.mutations() == [("fast_forward", backend.local_path)]


def test_rebase_is_only_tried_after_fast_forward_fails(fake_vcs, descriptors):
    backend = descriptors[0]
    make_working_copy(backend.local_path)
    fake_vcs.fast_forward_results[backend.local_path] = VcsResult.failure("not_fast_forward")

    result = sync_repository(backend, PULL, fake_vcs)

    assert result.outcome is SyncOutcome.UPDATED_REBASE
    assert [op for op, _ in fake_vcs.mutations()] == ["fast_forward", "rebase"]


def test_diverged_dirty_copy_needs_manual_resolution(fake_vcs, descriptors):
    backend = descriptors[0]
    path = backend.local_path
    make_working_copy(path)
    fake_vcs.dirty.add(path)
    fake_vcs.fast_forward_results[path] = VcsResult.failure("not_fast_forward")
    fake_vcs.rebase_results[path] = VcsResult.failure("conflict")

    report = sync_repositories([backend], PULL, fake_vcs)

    assert report.results[0].outcome is SyncOutcome.MANUAL_RESOLUTION_REQUIRED
    assert "operator attention" in report.results[0].detail
    assert [op for op, _ in fake_vcs.mutations()] == [
        "set_aside_changes",
        "fast_forward",
        "rebase",
        "restore_changes",
    ]
    assert path.exists()
    assert report.all_present is True


def test_local_changes_come_back_after_update(fake_vcs, descriptors):
    path = descriptors[0].local_path
    make_working_copy(path)
    fake_vcs.dirty.add(path)

    result = sync_repository(descriptors[0], PULL, fake_vcs)

    assert result.outcome is SyncOutcome.UPDATED_FAST_FORWARD
    assert "local changes restored" in result.detail
    assert path in fake_vcs.dirty
    assert fake_vcs.stashes[path] == []


def test_restore_conflict_overrides_update_outcome(fake_vcs, descriptors):
    path = descriptors[0].local_path
    make_working_copy(path)
    fake_vcs.dirty.add(path)
    fake_vcs.restore_conflicts.add(path)

    result = sync_repository(descriptors[0], PULL, fake_vcs)

    assert result.outcome is SyncOutcome.MANUAL_RESOLUTION_REQUIRED
    assert "conflict on restore" in result.detail
    assert len(fake_vcs.stashes[path]) == 1


def test_failed_stash_skips_the_update(fake_vcs, descriptors):
    path = descriptors[0].local_path
    make_working_copy(path)
    fake_vcs.dirty.add(path)
    fake_vcs.stash_fails.add(path)

    result = sync_repository(descriptors[0], PULL, fake_vcs)

    assert result.outcome is SyncOutcome.MANUAL_RESOLUTION_REQUIRED
    assert "update not attempted" in result.detail
    assert [op for op, _ in fake_vcs.mutations()] == ["set_aside_changes"]


def test_plain_directory_is_skipped_untouched(fake_vcs, descriptors):
    path = descriptors[0].local_path
    path.mkdir()
    (path / "notes.txt").write_text("keep me", encoding="utf-8")

    result = sync_repository(descriptors[0], PULL, fake_vcs)

    assert result.outcome is SyncOutcome.SKIPPED_NOT_VERSION_CONTROLLED
    assert fake_vcs.mutations() == []
    assert sorted(p.name for p in path.iterdir()) == ["notes.txt"]


def test_clone_only_never_touches_existing_copies(fake_vcs, descriptors):
    for descriptor in descriptors[:2]:
        make_working_copy(descriptor.local_path)
        fake_vcs.dirty.add(descriptor.local_path)
        fake_vcs.fast_forward_results[descriptor.local_path] = VcsResult.failure("not_fast_forward")

    report = sync_repositories(descriptors, CLONE_ONLY, fake_vcs)

    assert [r.outcome for r in report.results] == [
        SyncOutcome.SKIPPED_BY_MODE,
        SyncOutcome.SKIPPED_BY_MODE,
        SyncOutcome.CLONED,
    ]
    assert fake_vcs.mutations() == [("clone", descriptors[2].local_path)]


def test_clone_failure_does_not_stop_the_batch(fake_vcs, descriptors):
    fake_vcs.failing_clones.add(descriptors[0].remote)

    report = sync_repositories(descriptors, PULL, fake_vcs)

    assert [r.outcome for r in report.results] == [
        SyncOutcome.CLONE_FAILED,
        SyncOutcome.CLONED,
        SyncOutcome.CLONED,
    ]
    assert "SSH access" in report.results[0].detail
    assert report.all_present is False
    assert [d.name for d in report.missing] == ["backend"]


def test_results_follow_declaration_order(fake_vcs, descriptors):
    make_working_copy(descriptors[1].local_path)
    descriptors[2].local_path.mkdir()

    report = sync_repositories(descriptors, PULL, fake_vcs)

    assert [r.descriptor.name for r in report.results] == ["backend", "site", "app"]
    assert [r.outcome for r in report.results] == [
        SyncOutcome.CLONED,
        SyncOutcome.UPDATED_FAST_FORWARD,
        SyncOutcome.SKIPPED_NOT_VERSION_CONTROLLED,
    ]


def test_each_descriptor_only_touches_its_own_path(fake_vcs, descriptors):
    for descriptor in descriptors:
        make_working_copy(descriptor.local_path)

    sync_repositories(descriptors, PULL, fake_vcs)

    for descriptor in descriptors:
        own = fake_vcs.ops(descriptor.local_path)
        assert own.count("fast_forward") == 1
    touched = {path for _, path in fake_vcs.calls}
    assert touched == {d.local_path for d in descriptors}


def test_progress_callback_reports_each_result(fake_vcs, descriptors):
    seen = []

    sync_repositories(
        descriptors,
        PULL,
        fake_vcs,
        progress_cb=lambda done, total, result: seen.append((done, total, result.descriptor.name)),
    )

    assert seen == [(1, 3, "backend"), (2, 3, "site"), (3, 3, "app")]


def test_shutdown_request_stops_between_repositories(fake_vcs, descriptors):
    def cancel_after_first(done, total, result):
        request_shutdown()

    with pytest.raises(SyncCancelled):
        sync_repositories(descriptors, PULL, fake_vcs, progress_cb=cancel_after_first)

    assert fake_vcs.mutations() == [("clone", descriptors[0].local_path)]


def test_regular_file_at_repo_path_is_not_present(fake_vcs, descriptors):
    backend = descriptors[0]
    backend.local_path.write_text("not a checkout", encoding="utf-8")

    report = sync_repositories([backend], PULL, fake_vcs)

    assert report.results[0].outcome is SyncOutcome.CLONE_FAILED
    assert report.all_present is False
    assert backend.local_path.read_text(encoding="utf-8") == "not a checkout"


def test_clone_without_working_copy_is_removed(fake_vcs, descriptors):
    backend = descriptors[0]
    fake_vcs.bare_clones.add(backend.remote)

    report = sync_repositories([backend], PULL, fake_vcs)

    assert report.results[0].outcome is SyncOutcome.CLONE_FAILED
    assert not backend.local_path.exists()
    assert report.all_present is False


class InterruptedFastForward(FakeVcs):
    """Operator presses Ctrl-C while the fast-forward pull is running."""

    def fast_forward(self, path):
        super().fast_forward(path)
        request_shutdown()
        return VcsResult.failure("unknown", "killed")


def test_interrupt_during_fast_forward_skips_rebase_but_restores_changes(descriptors):
    vcs = InterruptedFastForward()
    path = descriptors[0].local_path
    make_working_copy(path)
    vcs.dirty.add(path)

    with pytest.raises(SyncCancelled):
        sync_repositories(descriptors, PULL, vcs)

    assert [op for op, _ in vcs.mutations()] == [
        "set_aside_changes",
        "fast_forward",
        "restore_changes",
    ]
    assert path in vcs.dirty
    assert vcs.stashes[path] == []


def test_interrupted_update_is_reported_for_manual_attention(descriptors):
    vcs = InterruptedFastForward()
    make_working_copy(descriptors[0].local_path)

    result = sync_repository(descriptors[0], PULL, vcs)

    assert result.outcome is SyncOutcome.MANUAL_RESOLUTION_REQUIRED
    assert "canceled" in result.detail
