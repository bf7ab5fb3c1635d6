"""fzp update-index command - index everything under the working directory."""

import click

from fzpath.cli.utils import get_index, shown
from fzpath.core.progress import pluralize, spinner, status
from fzpath.index.ops import working_prefix


@click.command()
@click.pass_context
def update_command(ctx: click.Context) -> None:
    """Rebuild the index entries under the current directory.

    Entries under the current directory are replaced by what is on disk now;
    entries elsewhere are left alone. Directories that cannot be read are
    reported and keep their previous entries. Names that are not valid UTF-8
    are reported and left out.
    """
    index = get_index(ctx)
    prefix = working_prefix()

    with spinner(f"Indexing {shown(prefix)}"):
        report = index.update(prefix)

    for skipped in report.skipped_dirs:
        status(f"Skipped {shown(skipped)} (access denied)", style="warning", indent=2)
    for name in report.unencodable:
        status(f"Skipped {shown(name)} (name is not valid UTF-8)", style="warning", indent=2)

    summary = f"Indexed {pluralize(report.entries_written, 'entry', 'entries')}"
    if report.dirs_skipped:
        summary += f", {pluralize(report.dirs_skipped, 'directory', 'directories')} skipped"
    if report.unencodable:
        summary += f", {pluralize(len(report.unencodable), 'name', 'names')} not indexable"
    status(f"{summary} ({report.duration_seconds:.1f}s)", style="success")

    total = index.count(prefix)
    if total != report.entries_written:
        status(f"{pluralize(total, 'entry', 'entries')} now indexed under {shown(prefix)}")
