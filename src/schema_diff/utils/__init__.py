"""Shared utilities for Schema Diff."""
