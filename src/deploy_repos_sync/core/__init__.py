"""Git-facing capabilities: probe, preserve, update, clone."""
