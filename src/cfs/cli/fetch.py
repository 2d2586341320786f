"""Fetch command."""

import time

import click
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from ..filter import filter_bucket
from . import cli
from .interceptor import Interceptor
from .options import client_options, exit_on_failure, make_downloader


@cli.command()
@click.argument("location")
@click.option("--filter", "filter_cmd", default="", help="Command selecting the paths to fetch")
@client_options
def fetch(location: str, filter_cmd: str, **options) -> None:
    """Download the blobs of the bucket named by LOCATION into the cache."""
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
            task_id = progress.add_task("fetching", total=len(bucket))
            downloader.fetch_all(bucket, on_done=lambda _: progress.advance(task_id))
        elapsed = time.monotonic() - t0
        click.echo(f"Fetched {len(bucket)} blob(s) in {elapsed:.1f}s.")
    exit_on_failure(interceptor)
