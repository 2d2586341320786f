"""Resolve command."""

import click

from . import cli
from .interceptor import Interceptor
from .options import client_options, exit_on_failure, make_downloader


@cli.command()
@click.argument("location")
@client_options
def resolve(location: str, **options) -> None:
    """Print the bucket manifest hash that LOCATION (a tag or hash) names."""
    downloader = make_downloader(**options)
    interceptor = Interceptor()
    with interceptor:
        click.echo(downloader.resolve(location))
    exit_on_failure(interceptor)
