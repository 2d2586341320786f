"""Exists command."""

import click
from rich.console import Console
from rich.table import Table

from ..filter import filter_bucket
from . import cli
from .interceptor import Interceptor
from .options import client_options, exit_on_failure, make_downloader


@cli.command()
@click.argument("location")
@click.option("--filter", "filter_cmd", default="", help="Command selecting the paths to check")
@click.option("-a", "--all", "show_all", is_flag=True, help="Include blobs present on the remote")
@client_options
def exists(location: str, filter_cmd: str, show_all: bool, **options) -> None:
    """Check that every blob of the bucket named by LOCATION exists remotely.

    Exits with status 1 when at least one blob is missing.
    """
    downloader = make_downloader(**options)
    interceptor = Interceptor()
    missing = 0
    with interceptor:
        bucket = filter_bucket(filter_cmd, downloader.load_bucket(location))
        result = downloader.exists_all(bucket)
        table = Table()
        table.add_column("State")
        table.add_column("Path", style="cyan")
        table.add_column("Hash")
        for content in sorted(bucket, key=lambda c: c.path):
            ok = result.get(content.path, False)
            if not ok:
                missing += 1
            if ok and not show_all:
                continue
            state = "[green]ok[/]" if ok else "[red]missing[/]"
            table.add_row(state, content.path, content.hash)
        if table.row_count:
            Console().print(table)
        click.echo(f"{len(bucket) - missing}/{len(bucket)} blob(s) available.")
    exit_on_failure(interceptor)
    if missing:
        raise SystemExit(1)
