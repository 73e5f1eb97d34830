"""Command-line interface for firebreak."""
