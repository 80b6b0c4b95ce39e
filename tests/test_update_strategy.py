from deploy_repos_sync.core.update import update_working_copy
from deploy_repos_sync.core.vcs import VcsResult
from deploy_repos_sync.domain.models import SyncOutcome


def test_fast_forward_success_skips_rebase(fake_vcs, tmp_path):
    result = update_working_copy("repo", tmp_path, fake_vcs)

    assert result.outcome is SyncOutcome.UPDATED_FAST_FORWARD
    assert [op for op, _ in fake_vcs.calls] == ["fast_forward"]


def test_rebase_detail_mentions_fast_forward_reason(fake_vcs, tmp_path):
    fake_vcs.fast_forward_results[tmp_path] = VcsResult.failure("not_fast_forward")

    result = update_working_copy("repo", tmp_path, fake_vcs)

    assert result.outcome is SyncOutcome.UPDATED_REBASE
    assert "not_fast_forward" in result.detail


def test_both_tiers_failing_is_not_fatal(fake_vcs, tmp_path):
    fake_vcs.fast_forward_results[tmp_path] = VcsResult.failure("network_error", "Could not resolve host")
    fake_vcs.rebase_results[tmp_path] = VcsResult.failure("network_error", "Could not resolve host")

    result = update_working_copy("repo", tmp_path, fake_vcs)

    assert result.outcome is SyncOutcome.MANUAL_RESOLUTION_REQUIRED
    assert "fast-forward: network_error: Could not resolve host" in result.detail
    assert [op for op, _ in fake_vcs.calls] == ["fast_forward", "rebase"]
