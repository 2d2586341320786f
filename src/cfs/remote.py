"""Access to the remote content store over HTTP."""

from __future__ import annotations

import logging
from urllib.parse import quote, urljoin

import requests

from .errors import FetchError

log = logging.getLogger("cfs/remote")


class RemoteStore:
    """
    Remote store layout and transport.

    The store exposes:

        <base>/tag/<name>                    text body containing a hash
        <base>/data/<hash[0:2]>/<hash[2:]>   raw blob bytes

    Sharding blobs by their first two hex digits bounds the number of
    entries in any single remote directory.
    """

    def __init__(self, base_url: str, session: requests.Session | None = None) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.session = session if session is not None else requests.Session()

    def tag_url(self, name: str) -> str:
        return urljoin(self.base_url, "tag/" + quote(name))

    def data_url(self, hash_: str) -> str:
        return urljoin(self.base_url, f"data/{hash_[0:2]}/{hash_[2:]}")

    def get(self, url: str) -> bytes:
        """
        Return the body of url.

        Raises:
            FetchError: on transport errors or when status >= 400.
        """
        log.debug("GET %s... start", url)
        try:
            resp = self.session.get(url)
        except requests.RequestException as exc:
            log.debug("GET %s... failure: %s", url, exc)
            raise FetchError(f"cannot fetch {url}: {exc}", url=url) from exc
        if resp.status_code >= 400:
            log.debug("GET %s... status %d", url, resp.status_code)
            raise FetchError(
                f"bad response status code {resp.status_code} from {url}",
                url=url,
                status=resp.status_code,
            )
        log.debug("GET %s... ok", url)
        return resp.content

    def head(self, url: str) -> int:
        """
        Return the HEAD status code for url; transport errors propagate.

        Redirects are followed, as get() does.
        """
        resp = self.session.head(url, allow_redirects=True)
        return resp.status_code
