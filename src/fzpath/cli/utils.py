"""CLI utilities."""

from __future__ import annotations

import click
from rich.markup import escape

from fzpath.files.ops import printable
from fzpath.index.ops import PathIndex


def get_index(ctx: click.Context) -> PathIndex:
    """The PathIndex the top-level group built from the loaded config."""
    obj = ctx.find_root().obj or {}
    index = obj.get("index")
    if index is None:
        raise click.UsageError("fzp subcommands must run under the fzp group")
    return index


def shown(path: str) -> str:
    """``path`` made safe for a rich status line."""
    return escape(printable(path))
