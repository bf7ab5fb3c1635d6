"""fzp create-index command - create an empty index."""

import click
from rich.markup import escape

from fzpath.cli.utils import get_index
from fzpath.core.progress import status


@click.command()
@click.pass_context
def create_command(ctx: click.Context) -> None:
    """Create an empty index in the per-user data directory.

    Fails if an index already exists; use clear-index to reset it.
    """
    db_path = get_index(ctx).create()
    status(f"Created index at {escape(str(db_path))}", style="success")
    status("Run 'fzp update-index' in a directory to index it", style="info")
