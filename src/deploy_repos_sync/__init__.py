"""Keep the deployment's source repositories present and up to date."""

__version__ = "1.0.0"
