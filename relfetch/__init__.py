"""relfetch — install a project's pre-built release binary from GitHub."""

__version__ = "0.1.0"
