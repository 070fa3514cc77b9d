"""gqlflow - resumable runner for multi-step GraphQL request sequences."""

__version__ = "0.1.0"
