"""Sync command."""

import time

import click
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from ..filter import filter_bucket
from . import cli
from .interceptor import Interceptor
from .options import client_options, exit_on_failure, make_downloader


@cli.command()
@click.argument("location")
@click.argument("target_dir", type=click.Path(file_okay=False))
@click.option("--filter", "filter_cmd", default="", help="Command selecting the paths to sync")
@client_options
def sync(location: str, target_dir: str, filter_cmd: str, **options) -> None:
    """Materialize the bucket named by LOCATION into TARGET_DIR.

    Files are written one at a time, each one atomically. On failure,
    the files written so far are left in place.
    """
    downloader = make_downloader(**options)
    interceptor = Interceptor()
    t0 = time.monotonic()
    with interceptor:
        bucket = filter_bucket(filter_cmd, downloader.load_bucket(location))
        with Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
        ) as progress:
            task_id = progress.add_task("syncing", total=len(bucket))
            downloader.sync(
                bucket,
                target_dir,
                on_done=lambda _: progress.advance(task_id),
            )
        elapsed = time.monotonic() - t0
        click.echo(f"Synced {len(bucket)} file(s) in {elapsed:.1f}s.")
    exit_on_failure(interceptor)
