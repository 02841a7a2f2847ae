"""Permalinks for the selection in an acme window."""

__all__ = [
    "acme",
    "cli",
    "config",
    "errors",
    "lines",
    "permalink",
    "repo",
    "runtime",
]

__version__ = "0.1.0"
