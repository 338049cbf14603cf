"""Deduplication and file output."""
