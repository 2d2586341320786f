"""Options shared by the cfs subcommands."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click

from ..config import Config
from ..downloader import Downloader
from ..errors import CFSError
from ..tagfile import tag_file_from_file
from .interceptor import Interceptor
from .logger import configure_logging


_CLIENT_OPTIONS = [
    click.option(
        "--base-url",
        envvar="CFS_BASE_URL",
        default=None,
        help="Base URL of the remote store (env: CFS_BASE_URL)",
    ),
    click.option(
        "--cache-dir",
        envvar="CFS_CACHE_DIR",
        default=None,
        help="Local cache directory (default: ~/.cfs/cache)",
    ),
    click.option(
        "--tag-file",
        default=None,
        type=click.Path(exists=True, dir_okay=False),
        help="JSON tag file providing the encryption key and IV",
    ),
    click.option("--verify", is_flag=True, help="Check downloaded blobs against their hash"),
    click.option("-v", "--verbose", is_flag=True, help="Run in verbose mode"),
]


def client_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the options needed to build a Downloader to a command."""
    for option in reversed(_CLIENT_OPTIONS):
        func = option(func)
    return func


def make_downloader(
    *,
    base_url: str | None,
    cache_dir: str | None,
    tag_file: str | None,
    verify: bool,
    verbose: bool,
) -> Downloader:
    """Configure logging and build a Downloader, exiting with 2 on bad usage."""
    configure_logging(verbose)
    if not base_url:
        raise click.UsageError("missing --base-url (or CFS_BASE_URL)")
    try:
        config = Config.from_env(
            base_url=base_url,
            cache_dir=cache_dir,
            verify=verify or None,
            verbose=verbose,
        )
        if tag_file is not None:
            config = config.with_tag_file(tag_file_from_file(tag_file))
    except (ValueError, CFSError) as exc:
        raise click.UsageError(str(exc)) from exc
    return Downloader(config)


def exit_on_failure(interceptor: Interceptor) -> None:
    """Report the intercepted error, if any, and exit with status 1."""
    if interceptor.failed:
        click.echo(f"error: {interceptor.error}", err=True)
        raise SystemExit(1)
