"""Command-line interface for Smk."""
