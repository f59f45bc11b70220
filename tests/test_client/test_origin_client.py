"""Tests for the synchronous origin client."""

from __future__ import annotations

from typing import Iterator

import httpx
import pytest

from aocfetch.client import OriginClient, session_cookies
from aocfetch.exceptions import (
    AuthError,
    ConstructionError,
    NotFoundError,
    OriginStatusError,
    OriginTransportError,
    RequestBuildError,
    ServerError,
)
from aocfetch.models import OriginConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _BrokenStream(httpx.SyncByteStream):
    """Response body that fails part-way through."""

    def __iter__(self) -> Iterator[bytes]:
        yield b"partial"
        raise httpx.ReadError("connection reset by peer")


def _client(session: str, handler, **config) -> OriginClient:
    return OriginClient(
        session,
        OriginConfig(**config),
        transport=httpx.MockTransport(handler),
    )


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    @pytest.mark.parametrize("session", ["", "   "])
    def test_blank_session_rejected(self, session: str) -> None:
        with pytest.raises(ConstructionError, match="session"):
            OriginClient(session)

    def test_base_url_without_host_rejected(self, session: str) -> None:
        with pytest.raises(ConstructionError):
            OriginClient(session, OriginConfig(base_url="not a url"))

    def test_context_manager_closes_client(self, session: str) -> None:
        with OriginClient(session) as client:
            inner = client._client
            assert not inner.is_closed
        assert inner.is_closed

    def test_default_config(self, session: str) -> None:
        with OriginClient(session) as client:
            assert client.config.base_url == "https://adventofcode.com"
            assert client.config.cookie_name == "session"


# ---------------------------------------------------------------------------
# Session cookie
# ---------------------------------------------------------------------------


class TestSessionCookie:
    def test_cookie_scoped_to_origin_host(self, session: str) -> None:
        cookies = session_cookies(session, OriginConfig())
        [cookie] = list(cookies.jar)
        assert cookie.name == "session"
        assert cookie.value == session
        assert cookie.domain == "adventofcode.com"
        assert cookie.path == "/"
        assert cookie.expires is None

    def test_max_age_sets_expiry(self, session: str) -> None:
        cookies = session_cookies(session, OriginConfig(cookie_max_age=300))
        [cookie] = list(cookies.jar)
        assert cookie.expires is not None

    def test_cookie_sent_with_request(self, session: str, fake_origin) -> None:
        fake_origin.inputs["1"] = "1000\n2000\n"
        with OriginClient(session, transport=fake_origin.transport()) as client:
            assert client.fetch("1") == "1000\n2000\n"
        assert fake_origin.requests[0].headers["cookie"] == f"session={session}"

    def test_cookie_sent_on_every_request(self, session: str, fake_origin) -> None:
        fake_origin.inputs.update({"1": "a", "2": "b"})
        with OriginClient(session, transport=fake_origin.transport()) as client:
            client.fetch("1")
            client.fetch("2")
        assert [r.headers["cookie"] for r in fake_origin.requests] == [f"session={session}"] * 2

    def test_custom_cookie_name(self, session: str) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["cookie"] = request.headers.get("cookie")
            return httpx.Response(200, text="ok")

        with _client(session, handler, cookie_name="sid") as client:
            client.fetch("1")
        assert seen["cookie"] == f"sid={session}"

    def test_expired_cookie_not_sent(self, session: str, fake_origin) -> None:
        fake_origin.inputs["1"] = "data"
        config = OriginConfig(cookie_max_age=0)
        with OriginClient(session, config, transport=fake_origin.transport()) as client:
            with pytest.raises(AuthError):
                client.fetch("1")
        assert "cookie" not in fake_origin.requests[0].headers

    def test_cookie_not_sent_to_other_hosts(self, session: str) -> None:
        seen: dict[str, object] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "adventofcode.com":
                return httpx.Response(302, headers={"Location": "https://elsewhere.example/x"})
            seen["cookie"] = request.headers.get("cookie")
            return httpx.Response(200, text="moved")

        with _client(session, handler) as client:
            assert client.fetch("1") == "moved"
        assert seen["cookie"] is None

    def test_cookie_sent_to_dotless_host(self, session: str) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["cookie"] = request.headers.get("cookie")
            return httpx.Response(200, text="ok")

        with _client(session, handler, base_url="http://localhost:8080") as client:
            client.fetch("1")
        assert seen["cookie"] == f"session={session}"

    def test_user_agent_header(self, session: str) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["ua"] = request.headers.get("user-agent")
            return httpx.Response(200, text="ok")

        with _client(session, handler, user_agent="me@example.com") as client:
            client.fetch("1")
        assert seen["ua"] == "me@example.com"


# ---------------------------------------------------------------------------
# URL building
# ---------------------------------------------------------------------------


class TestBuildUrl:
    def test_default_template(self, session: str) -> None:
        with OriginClient(session) as client:
            assert str(client.build_url("3")) == "https://adventofcode.com/2022/day/3/input"

    def test_year_substituted(self, session: str) -> None:
        with OriginClient(session, OriginConfig(year=2023)) as client:
            assert client.build_url("25").path == "/2023/day/25/input"

    def test_trailing_slash_on_base_url(self, session: str) -> None:
        config = OriginConfig(base_url="http://localhost:8080/")
        with OriginClient(session, config) as client:
            assert str(client.build_url("1")) == "http://localhost:8080/2022/day/1/input"

    def test_custom_template(self, session: str) -> None:
        config = OriginConfig(url_template="/inputs/{key}.txt?year={year}")
        with OriginClient(session, config) as client:
            url = client.build_url("7")
        assert url.path == "/inputs/7.txt"
        assert url.params["year"] == "2022"

    def test_reserved_characters_percent_encoded(self, session: str) -> None:
        with OriginClient(session) as client:
            url = client.build_url("a/b c?d#e")
        assert url.raw_path == b"/2022/day/a%2Fb%20c%3Fd%23e/input"
        assert url.query == b""
        assert url.fragment == ""

    def test_unknown_placeholder_rejected(self, session: str) -> None:
        config = OriginConfig(url_template="/{year}/day/{day}/input")
        with OriginClient(session, config) as client:
            with pytest.raises(RequestBuildError):
                client.build_url("1")

    def test_request_uses_built_url(self, session: str, fake_origin) -> None:
        fake_origin.inputs["12"] = "x"
        with OriginClient(session, transport=fake_origin.transport()) as client:
            client.fetch("12")
        request = fake_origin.requests[0]
        assert request.method == "GET"
        assert str(request.url) == "https://adventofcode.com/2022/day/12/input"


# ---------------------------------------------------------------------------
# Response handling
# ---------------------------------------------------------------------------


class TestFetchResponses:
    def test_success_returns_full_body(self, session: str) -> None:
        body = "".join(f"{i}\n" for i in range(5000))

        with _client(session, lambda r: httpx.Response(200, text=body)) as client:
            assert client.fetch("1") == body

    @pytest.mark.parametrize("status", [400, 401, 403])
    def test_auth_statuses(self, session: str, status: int) -> None:
        handler = lambda r: httpx.Response(status, text="Please log in")  # noqa: E731
        with _client(session, handler) as client:
            with pytest.raises(AuthError) as exc_info:
                client.fetch("1")
        assert exc_info.value.status_code == status
        assert exc_info.value.body == "Please log in"
        assert exc_info.value.exit_code == 3

    def test_not_found(self, session: str, fake_origin) -> None:
        with OriginClient(session, transport=fake_origin.transport()) as client:
            with pytest.raises(NotFoundError) as exc_info:
                client.fetch("25")
        assert exc_info.value.status_code == 404
        assert "unlocks" in exc_info.value.body

    @pytest.mark.parametrize("status", [500, 502, 503, 418, 201, 204])
    def test_other_statuses_are_server_errors(self, session: str, status: int) -> None:
        with _client(session, lambda r: httpx.Response(status, text="nope")) as client:
            with pytest.raises(ServerError) as exc_info:
                client.fetch("1")
        assert exc_info.value.status_code == status

    def test_status_error_message_has_code_and_body(self, session: str) -> None:
        with _client(session, lambda r: httpx.Response(500, text="oops")) as client:
            with pytest.raises(OriginStatusError, match="got status 500, wanted 200. body: oops"):
                client.fetch("1")

    def test_status_error_records_url(self, session: str) -> None:
        with _client(session, lambda r: httpx.Response(500)) as client:
            with pytest.raises(ServerError) as exc_info:
                client.fetch("4")
        assert exc_info.value.url == "https://adventofcode.com/2022/day/4/input"

    def test_unreadable_body_placeholder_on_error_status(self, session: str) -> None:
        handler = lambda r: httpx.Response(500, stream=_BrokenStream())  # noqa: E731
        with _client(session, handler) as client:
            with pytest.raises(ServerError) as exc_info:
                client.fetch("1")
        assert exc_info.value.body.startswith("<failed to read response body:")
        assert "connection reset" in exc_info.value.body

    def test_unreadable_body_on_success_is_transport_error(self, session: str) -> None:
        handler = lambda r: httpx.Response(200, stream=_BrokenStream())  # noqa: E731
        with _client(session, handler) as client:
            with pytest.raises(OriginTransportError, match="failed to read response body"):
                client.fetch("1")

    def test_single_attempt_no_retry(self, session: str) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        with _client(session, handler) as client:
            with pytest.raises(ServerError):
                client.fetch("1")
        assert len(calls) == 1


# ---------------------------------------------------------------------------
# Transport failures and deadlines
# ---------------------------------------------------------------------------


class TestTransportErrors:
    @pytest.mark.parametrize(
        "exc",
        [
            httpx.ConnectError("connection refused"),
            httpx.ReadTimeout("timed out"),
            httpx.ConnectTimeout("timed out"),
            httpx.RemoteProtocolError("bad response"),
        ],
    )
    def test_transport_failures_mapped(self, session: str, exc: Exception) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc

        with _client(session, handler) as client:
            with pytest.raises(OriginTransportError) as exc_info:
                client.fetch("1")
        assert exc_info.value.__cause__ is exc
        assert exc_info.value.exit_code == 6

    def test_redirect_loop_is_transport_error(self, session: str) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(302, headers={"Location": str(request.url)})

        with _client(session, handler) as client:
            with pytest.raises(OriginTransportError, match="failed to perform http request") as exc_info:
                client.fetch("3")
        assert isinstance(exc_info.value.__cause__, httpx.TooManyRedirects)
        assert exc_info.value.exit_code == 6
        assert len(calls) > 1

    def test_per_call_timeout_applied_to_request(self, session: str) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["timeout"] = request.extensions["timeout"]
            return httpx.Response(200, text="ok")

        with _client(session, handler, timeout=30) as client:
            client.fetch("1", timeout=2.5)
        assert seen["timeout"]["read"] == 2.5
        assert seen["timeout"]["connect"] == 2.5

    def test_config_timeout_used_by_default(self, session: str) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["timeout"] = request.extensions["timeout"]
            return httpx.Response(200, text="ok")

        with _client(session, handler, timeout=30) as client:
            client.fetch("1")
        assert seen["timeout"]["read"] == 30

    def test_no_timeout_by_default(self, session: str) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["timeout"] = request.extensions["timeout"]
            return httpx.Response(200, text="ok")

        with _client(session, handler) as client:
            client.fetch("1")
        assert seen["timeout"]["read"] is None
