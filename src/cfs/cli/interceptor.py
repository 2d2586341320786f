"""Log cfs errors and convert them to exit codes."""

from __future__ import annotations

import logging

from ..errors import CFSError

log = logging.getLogger("cfs/cli")


class Interceptor:
    """
    Context manager to intercept cfs and filesystem errors.

    Use as a context manager:

        interceptor = Interceptor()
        with interceptor:
            downloader.sync(bucket, target)
        raise SystemExit(interceptor.exitcode())

    CFSError and OSError are suppressed and recorded in the error field,
    with the traceback logged at DEBUG. Anything else (bugs,
    KeyboardInterrupt) propagates.
    """

    def __init__(self):
        self.failed = False
        self.error: BaseException | None = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None:
            return False
        if not issubclass(exc_type, (CFSError, OSError)):
            return False
        # The command reports the error itself; keep the traceback for -v
        log.debug("operation failed: %s", exc_value, exc_info=(exc_type, exc_value, traceback))
        self.failed = True
        self.error = exc_value
        return True  # suppress the exception

    def exitcode(self) -> int:
        """
        Return the exitcode to pass to sys.exit.

        Zero on success, 1 on failure.
        """
        return int(self.failed)
