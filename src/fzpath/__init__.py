"""fzpath - local file-path index with parallel substring search."""

__version__ = "0.1.0"
