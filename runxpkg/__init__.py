"""Install and run command-line tools from GitHub releases, with small error and cache helpers."""

__version__ = "0.1.0"