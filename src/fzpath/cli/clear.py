"""fzp clear-index command - empty or remove the index."""

import click
from rich.markup import escape

from fzpath.cli.utils import get_index
from fzpath.core.progress import status


@click.command()
@click.option(
    "--delete",
    "-d",
    is_flag=True,
    help="Remove the whole data directory instead of emptying the index",
)
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="With --delete, remove the directory even if it holds other files",
)
@click.pass_context
def clear_command(ctx: click.Context, delete: bool, force: bool) -> None:
    """Remove every entry from the index.

    By default the index file is deleted and an empty one created in its
    place. With --delete the data directory itself is removed; a later
    create-index starts from scratch.
    """
    if force and not delete:
        raise click.UsageError("--force only applies together with --delete")

    result = get_index(ctx).clear(delete=delete, force=force)

    if result.deleted_dir:
        for path in result.removed:
            status(f"Removed {escape(path)}", style="success")
    else:
        status(f"Cleared index at {escape(result.db_path)}", style="success")
