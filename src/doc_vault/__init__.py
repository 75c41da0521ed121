"""doc-vault: PDF document storage behind a small REST API."""

__version__ = "0.1.0"
