"""aliaslookup: resolve golinks and SSH keys from a self-refreshing cache."""

from aliaslookup.version import __version__

__all__ = ["__version__"]
