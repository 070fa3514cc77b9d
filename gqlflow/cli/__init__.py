"""Command-line interface for gqlflow."""
