"""Command-line interface for K-Notes."""
