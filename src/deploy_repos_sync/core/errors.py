"""Run-level errors. Per-repository failures are folded into outcomes instead."""


class MissingDependencyError(RuntimeError):
    """A required host tool (git) is not installed; nothing can be processed."""
