"""fzpath command-line interface."""
