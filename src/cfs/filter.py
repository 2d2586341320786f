"""Select a subset of entries by piping their paths through a command."""

from __future__ import annotations

import logging
import re
import shlex
import subprocess
from collections.abc import Sequence

from .bucket import Bucket
from .errors import FilterError
from .pack import PackFile

log = logging.getLogger("cfs/filter")

_LINE_BREAK = re.compile(r"\r\n|\n\r|\n|\r")


def run_filter(command: str, paths: Sequence[str]) -> list[str]:
    """
    Write paths to the stdin of command, one per line, and return the
    lines it prints on stdout.

    Raises:
        FilterError: if the command cannot be started or fails.
    """
    argv = shlex.split(command)
    if not argv:
        raise FilterError("empty filter command")
    log.debug("running filter %s on %d paths", argv, len(paths))
    try:
        completed = subprocess.run(
            argv,
            input="\n".join(paths),
            stdout=subprocess.PIPE,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise FilterError(f"cannot run filter {argv[0]}: {exc}") from exc
    out = completed.stdout
    if completed.returncode != 0:
        if not out:
            raise FilterError("no output from filter")
        raise FilterError(f"filter {argv[0]} exited with status {completed.returncode}")
    return _LINE_BREAK.split(out.rstrip("\n"))


def filter_bucket(command: str, bucket: Bucket) -> Bucket:
    """Return a new bucket containing only the paths accepted by command."""
    if not command:
        return bucket
    survivors = run_filter(command, bucket.paths())
    filtered = bucket.select(survivors)
    log.info("filter kept %d of %d entries", len(filtered), len(bucket))
    return filtered


def filter_pack_file(command: str, pack: PackFile) -> PackFile:
    """Return a new pack file containing only the paths accepted by command."""
    if not command:
        return pack
    keep = set(run_filter(command, pack.paths()))
    entries = [entry for entry in pack.entries if entry.path in keep]
    log.info("filter kept %d of %d entries", len(entries), len(pack.entries))
    return PackFile(version=pack.version, entries=entries)
