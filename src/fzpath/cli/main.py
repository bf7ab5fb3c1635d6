"""fzpath CLI - fzp command.

Exit codes:
    0  success
    1  user error (missing index, bad config, unreadable directory, ...)
    2  command-line usage error or unexpected internal failure
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
import structlog

from fzpath import __version__
from fzpath.cli.clear import clear_command
from fzpath.cli.create import create_command
from fzpath.cli.search import search_command
from fzpath.cli.update import update_command
from fzpath.config.loader import load_config
from fzpath.core.errors import FzPathError, InternalError
from fzpath.core.logging import configure_logging, end_run, log_file, start_run
from fzpath.index.ops import PathIndex

logger = structlog.get_logger()

EXIT_INTERNAL_ERROR = 2


class FzPathGroup(click.Group):
    """Click group translating domain errors into exit codes."""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except FzPathError as e:
            logger.debug("command_failed", **e.to_dict())
            raise click.ClickException(e.message) from e
        except (click.ClickException, click.exceptions.Exit, click.Abort):
            raise
        except Exception as e:
            err = InternalError.unexpected(str(e), exception=type(e).__name__)
            logger.error("command_crashed", exc_info=True, **err.to_dict())
            click.echo(f"Error: {err.message}", err=True)
            if (path := log_file()) is not None:
                click.echo(f"See {path} for the traceback.", err=True)
            ctx.exit(EXIT_INTERNAL_ERROR)


@click.group(cls=FzPathGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="fzp")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file layered over ~/.config/fzpath/config.yaml",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """fzpath - index the paths under a directory and search them by substring.

    Every command works on the current working directory: update-index
    indexes everything beneath it, search looks only at paths beneath it.
    """
    ctx.ensure_object(dict)
    # Defaults until the config file has been read
    configure_logging(level="DEBUG" if verbose else "WARNING")
    config = load_config(config_path)
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    start_run()
    ctx.call_on_close(end_run)

    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config
    ctx.obj["index"] = PathIndex(config)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@click.command()
@click.pass_context
def help_command(ctx: click.Context) -> None:
    """Show this message and exit."""
    click.echo(ctx.find_root().get_help())


cli.add_command(create_command, name="create-index")
cli.add_command(update_command, name="update-index")
cli.add_command(clear_command, name="clear-index")
cli.add_command(search_command, name="search")
cli.add_command(help_command, name="help")


if __name__ == "__main__":
    cli()
