"""Sync git repositories between machines using git bundle files over ssh and scp."""

__version__ = "0.1.0"
__all__ = ["__version__"]