"""Command-line client for submitting credential campaigns to an orchestrator."""

__version__ = "0.1.0"
