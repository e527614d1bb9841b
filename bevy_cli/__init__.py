"""Command-line tooling for creating, running, serving and linting Bevy projects."""

__version__ = "0.1.0.dev0"