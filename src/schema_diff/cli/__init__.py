"""Command-line interface for Schema Diff."""
