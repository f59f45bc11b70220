"""Pieces shared by the sync and async origin clients.

The puzzle site authenticates with a single ``session`` cookie, so both
clients start from the same cookie jar (:func:`session_cookies`), build
URLs the same way (:meth:`OriginClientBase.build_url`) and judge responses
with the same rules (:meth:`OriginClientBase._check_response`). Only the
I/O differs.
"""

from __future__ import annotations

import time
from http.cookiejar import Cookie
from typing import Any, Optional, Union
from urllib.parse import quote

import httpx

from aocfetch.exceptions import (
    ConstructionError,
    OriginTransportError,
    RequestBuildError,
    status_error,
)
from aocfetch.models import OriginConfig
from aocfetch.output import debug


def session_cookies(session: str, origin: OriginConfig) -> httpx.Cookies:
    """Build a cookie jar holding only the session cookie for the origin host.

    The cookie is scoped to the host of ``origin.base_url`` (path ``/``),
    so it is never sent to any other host, redirects included. When
    ``origin.cookie_max_age`` is set the jar drops the cookie after that
    many seconds.

    Raises:
        ConstructionError: If the session is blank or the base URL has no
            host.
    """
    if not session or not session.strip():
        raise ConstructionError("session cookie must be set to fetch inputs")
    try:
        host = httpx.URL(origin.base_url).host
    except httpx.InvalidURL as exc:
        raise ConstructionError(f"failed to parse origin url {origin.base_url!r}: {exc}") from exc
    if not host:
        raise ConstructionError(f"origin url {origin.base_url!r} has no host")
    # cookiejar matches dotless hosts such as localhost as "<host>.local"
    domain = host if "." in host else f"{host}.local"

    expires: Optional[int] = None
    if origin.cookie_max_age is not None:
        expires = int(time.time()) + origin.cookie_max_age

    cookie = Cookie(
        version=0,
        name=origin.cookie_name,
        value=session.strip(),
        port=None,
        port_specified=False,
        domain=domain,
        domain_specified=True,
        domain_initial_dot=False,
        path="/",
        path_specified=True,
        secure=False,
        expires=expires,
        discard=expires is None,
        comment=None,
        comment_url=None,
        rest={"HttpOnly": ""},
        rfc2109=False,
    )
    cookies = httpx.Cookies()
    cookies.jar.set_cookie(cookie)
    return cookies


class OriginClientBase:
    """URL building and response checking shared by both origin clients.

    Args:
        session: Session cookie value.
        config: Origin settings; defaults to the public puzzle site.
    """

    def __init__(self, session: str, config: Optional[OriginConfig] = None) -> None:
        self._config = config or OriginConfig()
        self._cookies = session_cookies(session, self._config)

    @property
    def config(self) -> OriginConfig:
        return self._config

    def _client_kwargs(self) -> dict[str, Any]:
        return {
            "cookies": self._cookies,
            "timeout": self._config.timeout,
            "verify": self._config.verify_ssl,
            "follow_redirects": True,
            "headers": {"User-Agent": self._config.user_agent},
        }

    def build_url(self, key: str) -> httpx.URL:
        """Return the input URL for *key*.

        The key is percent-encoded with no safe characters before it is
        substituted, so keys containing ``/``, ``?`` or ``#`` stay inside
        their path segment.

        Raises:
            RequestBuildError: If the template has an unknown placeholder
                or the result is not a valid URL.
        """
        try:
            path = self._config.url_template.format(
                year=self._config.year, key=quote(str(key), safe="")
            )
        except (KeyError, IndexError, ValueError) as exc:
            raise RequestBuildError(
                f"failed to expand url template {self._config.url_template!r}: {exc}"
            ) from exc

        base = self._config.base_url.rstrip("/")
        try:
            return httpx.URL(f"{base}/{path.lstrip('/')}")
        except httpx.InvalidURL as exc:
            raise RequestBuildError(f"failed to create http request: {exc}") from exc

    def _prepare(
        self,
        client: Union[httpx.Client, httpx.AsyncClient],
        key: str,
        timeout: Optional[float],
    ) -> httpx.Request:
        url = self.build_url(key)
        debug(f"fetching input from {url}")
        try:
            request = client.build_request("GET", url)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, ValueError) as exc:
            raise RequestBuildError(f"failed to create http request: {exc}") from exc
        if timeout is not None:
            request.extensions["timeout"] = httpx.Timeout(timeout).as_dict()
        return request

    @staticmethod
    def _check_response(
        response: httpx.Response, read_error: Optional[Exception]
    ) -> str:
        """Turn a fully-read response into a document or a typed error."""
        if read_error is not None:
            body = f"<failed to read response body: {read_error}>"
        else:
            body = response.text

        if response.status_code != httpx.codes.OK:
            raise status_error(response.status_code, body, str(response.request.url))
        if read_error is not None:
            raise OriginTransportError(
                f"failed to read response body: {read_error}"
            ) from read_error
        return body
