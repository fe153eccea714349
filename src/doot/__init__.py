"""doot: sync dotfiles between a repository and the filesystem."""

__version__ = "0.3.0"
