"""Command-line client for Universal Crossplane and Upbound Cloud."""

from up_cli.__version__ import __version__

__all__ = ["__version__"]
