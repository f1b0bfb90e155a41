"""Version information for up-cli."""

__version__ = "0.4.0"
