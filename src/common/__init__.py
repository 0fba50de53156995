"""Shared helpers (logging) used by the CLI and the provider."""
