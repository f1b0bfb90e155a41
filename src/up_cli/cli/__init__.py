"""Command line interface for up-cli."""
