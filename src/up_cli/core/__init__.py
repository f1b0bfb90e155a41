"""Core up-cli functionality."""
