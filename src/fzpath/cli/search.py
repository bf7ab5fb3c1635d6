"""fzp search command - find indexed paths under the working directory."""

import click

from fzpath.cli.utils import get_index, shown
from fzpath.core.progress import status
from fzpath.index.ops import working_prefix


@click.command()
@click.argument("terms", nargs=-1, required=True)
@click.pass_context
def search_command(ctx: click.Context, terms: tuple[str, ...]) -> None:
    """Print indexed paths under the current directory containing TERMS.

    Matching is a case-insensitive substring test; with several terms a path
    must contain all of them. Paths are printed relative to the current
    directory, one per line, in no particular order.
    """
    prefix = working_prefix()
    results = get_index(ctx).search(prefix, list(terms))

    if not results:
        query = " ".join(terms)
        status(f"No matches for '{shown(query)}' under {shown(prefix)}", style="warning")
        return

    for path in results:
        click.echo(path)
