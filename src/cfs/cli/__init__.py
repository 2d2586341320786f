"""cfs command-line interface."""

import click

from .. import __version__


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, message="%(version)s")
def cli() -> None:
    """Distribute content-addressed buckets of files.

    A LOCATION is either a tag (resolved through the remote store) or the
    hash of a bucket manifest.
    """


@cli.command(hidden=True)
def help() -> None:
    """Show usage information."""
    click.echo('Use "cfs --help" to list the commands.')
    click.echo('Use "cfs <command> --help" for help on a specific command.')


@cli.command("version")
def version_cmd() -> None:
    """Print the version number."""
    click.echo(__version__)


# Register subcommands (must be after cli is defined)
from . import exists as _exists  # noqa: E402, F401
from . import fetch as _fetch  # noqa: E402, F401
from . import pack as _pack  # noqa: E402, F401
from . import resolve as _resolve  # noqa: E402, F401
from . import sync as _sync  # noqa: E402, F401
