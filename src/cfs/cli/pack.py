"""Pack command group."""

import click

from .. import pack as packfile
from ..filter import filter_pack_file
from . import cli
from .interceptor import Interceptor
from .options import exit_on_failure


@cli.group()
def pack() -> None:
    """Inspect pack files."""


@pack.command("ls")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--filter", "filter_cmd", default="", help="Command selecting the paths to list")
def ls(path: str, filter_cmd: str) -> None:
    """List the entries of the pack file at PATH."""
    interceptor = Interceptor()
    with interceptor:
        with open(path, "rb") as filep:
            pak = packfile.parse(filep)
        pak = filter_pack_file(filter_cmd, pak)
        for entry in pak.entries:
            click.echo(f"{entry.hash} {entry.pos:>10} {entry.size:>10} {entry.path}")
    exit_on_failure(interceptor)
