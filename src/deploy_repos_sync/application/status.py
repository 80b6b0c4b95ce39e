"""Post-run readiness check and the final report."""

from pathlib import Path
from typing import Callable, List, Sequence

from ..domain.models import RepositoryDescriptor, RunReport, SyncOutcome, SyncResult
from ..infra.logger import (
    COLOR_ERROR,
    COLOR_RESET,
    COLOR_STEP,
    COLOR_SUCCESS,
    COLOR_WARNING,
    colorize,
    log_error,
    log_info,
    log_success,
    log_warning,
    print_banner,
    print_rule,
    supports_color,
)

OUTCOME_LABELS = {
    SyncOutcome.CLONED: "cloned",
    SyncOutcome.UPDATED_FAST_FORWARD: "updated (fast-forward)",
    SyncOutcome.UPDATED_REBASE: "updated (rebased)",
    SyncOutcome.SKIPPED_NOT_VERSION_CONTROLLED: "skipped (not a git repo)",
    SyncOutcome.SKIPPED_BY_MODE: "skipped (clone-only)",
    SyncOutcome.MANUAL_RESOLUTION_REQUIRED: "needs manual resolution",
    SyncOutcome.CLONE_FAILED: "clone failed",
}

NEXT_STEPS = """\
  1. Copy the environment file:
     {cmd}cp .env.dev.example .env{reset}  (for development)
     {cmd}cp .env.prod.example .env{reset} (for production)

  2. Edit .env and configure your settings

  3. Start the services:
     {cmd}docker compose -f docker-compose.yml up --build{reset}  (development)
     {cmd}docker compose -f docker-compose.yml up --build -d{reset} (production)

Services will be available at:
  • API:      http://localhost:3001
  • App:      http://localhost:3002 (dev) / http://localhost:3000 (prod)
  • Site:     http://localhost:3003
  • API Docs: http://localhost:3001/api/docs
"""


def aggregate(
    results: Sequence[SyncResult],
    exists: Callable[[Path], bool] = Path.is_dir,
) -> RunReport:
    """Re-check that every descriptor's directory exists; outcomes alone are not trusted."""
    missing: List[RepositoryDescriptor] = [
        result.descriptor for result in results if not exists(result.descriptor.local_path)
    ]
    return RunReport(results=tuple(results), all_present=not missing, missing=tuple(missing))


def format_result_line(result: SyncResult) -> str:
    label = OUTCOME_LABELS[result.outcome]
    line = f"{result.descriptor.name}: {label}"
    if result.detail:
        line += f" - {result.detail}"
    return line


def render_next_steps() -> str:
    if supports_color():
        return NEXT_STEPS.format(cmd=COLOR_WARNING, reset=COLOR_RESET)
    return NEXT_STEPS.format(cmd="", reset="")


def print_report(report: RunReport) -> None:
    """Print the per-repository summary, then the ready/not-ready verdict."""
    print_rule()
    log_info("Summary:")
    for result in report.results:
        line = format_result_line(result)
        if result.outcome.is_failure:
            log_error(line)
        elif result.outcome.is_warning:
            log_warning(line)
        else:
            log_success(line)

    for descriptor in report.missing:
        log_error(f"Missing: {descriptor.local_path.name}")

    log_info(f"Ready: {len(report.ready)}, missing: {len(report.missing)}")

    if report.all_present:
        print_banner("✓ All repositories are ready!", COLOR_SUCCESS)
        print(colorize("Next steps:", COLOR_STEP))
        print()
        print(render_next_steps())
    else:
        print_banner("✗ Some repositories could not be cloned", COLOR_ERROR)
        print("Please check your SSH access and try again.")
