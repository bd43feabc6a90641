"""Command line interface for tagver."""
