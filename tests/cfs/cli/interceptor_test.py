"""Tests for the cfs.cli.interceptor module."""

from unittest.mock import patch

import pytest

from cfs.cli.interceptor import Interceptor
from cfs.errors import FetchError


class TestInterceptor:
    """Tests for Interceptor."""

    def test_no_exception(self) -> None:
        interceptor = Interceptor()

        with patch("cfs.cli.interceptor.log") as log, interceptor:
            pass

        assert interceptor.failed is False
        assert interceptor.exitcode() == 0
        log.error.assert_not_called()

    def test_cfs_error_sets_failed_and_logs_at_debug(self) -> None:
        interceptor = Interceptor()
        exc = FetchError("boom", url="https://example.com/x")

        with patch("cfs.cli.interceptor.log") as log, interceptor:
            raise exc

        assert interceptor.failed is True
        assert interceptor.error is exc
        assert interceptor.exitcode() == 1
        log.error.assert_not_called()
        log.debug.assert_called_once()
        assert log.debug.call_args[0][0] == "operation failed: %s"
        assert log.debug.call_args[1]["exc_info"][1] is exc

    def test_os_error_is_intercepted(self) -> None:
        interceptor = Interceptor()
        with interceptor:
            raise PermissionError("denied")
        assert interceptor.exitcode() == 1

    def test_other_errors_propagate(self) -> None:
        interceptor = Interceptor()
        with pytest.raises(KeyError):
            with interceptor:
                raise KeyError("bug")
        assert interceptor.failed is False
