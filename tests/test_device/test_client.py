"""Tests for SessionClient — response classification, re-login, cookie persistence."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch
from urllib.parse import parse_qs

import httpx
import pytest

from nascheck.core.config import CheckConfig, DeviceConfig, SessionConfig, Settings
from nascheck.core.types import CheckType
from nascheck.device.client import SessionClient, classify_response
from nascheck.device.exceptions import (
    AuthenticationFailed,
    AuthorizationExpired,
    ClientError,
    DecodeError,
    ServerError,
    SessionConflict,
    TransportFailure,
)
from nascheck.device.response import DeviceResponse
from nascheck.device.session_store import CookieStore

SYS_STATUS = "/adm/getmain.php?fun=systatus"
LOGOUT_PAGE = "<html><script>top.location='/adm/logout.php';</script></html>"

# ── Helpers ─────────────────────────────────────────────────────


def _response(
    status_code: int = 200,
    text: str | None = None,
    json_data: object | None = None,
    url: str = "http://nas.local/adm/getmain.php?fun=systatus",
) -> httpx.Response:
    """Build a completed httpx.Response for a given final URL."""
    request = httpx.Request("GET", url)
    if json_data is not None:
        return httpx.Response(status_code, json=json_data, request=request)
    return httpx.Response(status_code, text=text or "", request=request)


def _client(
    tmp_path: Path,
    handler: Callable[[httpx.Request], httpx.Response] | None = None,
) -> SessionClient:
    transport = httpx.MockTransport(handler) if handler else None
    return SessionClient(
        hostname="nas.local",
        username="admin",
        password="secret",
        cookie_store=CookieStore(tmp_path / "cookies.txt"),
        transport=transport,
    )


class Device:
    """Scripted device: answers each path with the next queued response."""

    def __init__(self, **routes: list[httpx.Response]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = request.url.path.rsplit("/", 1)[-1].split(".")[0]
        return self.routes[key].pop(0)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


# ── classify_response ───────────────────────────────────────────


class TestClassifyResponse:
    def test_success(self) -> None:
        result = classify_response(_response(json_data={"cpu_loading": "5"}), SYS_STATUS)
        assert result == DeviceResponse({"cpu_loading": "5"})

    def test_4xx_is_client_error(self) -> None:
        with pytest.raises(ClientError) as exc_info:
            classify_response(_response(404, text=LOGOUT_PAGE), SYS_STATUS)
        assert exc_info.value.status_code == 404

    def test_5xx_is_server_error(self) -> None:
        with pytest.raises(ServerError):
            classify_response(_response(503), SYS_STATUS)

    def test_logout_marker_needs_login(self) -> None:
        with pytest.raises(AuthorizationExpired, match="Not authorized"):
            classify_response(_response(text=LOGOUT_PAGE), SYS_STATUS)

    def test_logout_marker_beats_redirect_markers(self) -> None:
        resp = _response(text=LOGOUT_PAGE, url="http://nas.local/unauth.htm")
        with pytest.raises(AuthorizationExpired):
            classify_response(resp, SYS_STATUS)

    def test_unauth_page_is_login_failure(self) -> None:
        resp = _response(text="<html>denied</html>", url="http://nas.local/unauth.htm")
        with pytest.raises(AuthenticationFailed, match="Thecus login failed"):
            classify_response(resp, SYS_STATUS)

    def test_in_use_page_is_session_conflict(self) -> None:
        resp = _response(text="<html>busy</html>", url="http://nas.local/adm/inuse.htm")
        with pytest.raises(SessionConflict, match="already logged in"):
            classify_response(resp, SYS_STATUS)

    def test_empty_body_is_decode_error(self) -> None:
        with pytest.raises(DecodeError, match="Empty response"):
            classify_response(_response(text="  \n"), SYS_STATUS)

    def test_invalid_json_is_decode_error(self) -> None:
        with pytest.raises(DecodeError, match="Invalid JSON"):
            classify_response(_response(text="<html>hello</html>"), SYS_STATUS)


# ── SessionClient ───────────────────────────────────────────────


class TestRequest:
    def test_success_does_not_login(self, tmp_path: Path) -> None:
        device = Device(getmain=[_response(json_data={"cpu_loading": "12"})])
        with _client(tmp_path, device) as client:
            result = client.request(SYS_STATUS)
        assert result.get("cpu_loading") == "12"
        assert client.login_attempts == 0

    def test_expired_session_logs_in_once_and_replays(self, tmp_path: Path) -> None:
        device = Device(
            getmain=[_response(text=LOGOUT_PAGE), _response(json_data={"cpu_loading": "12"})],
            login=[_response(json_data={"success": True})],
        )
        with _client(tmp_path, device) as client:
            result = client.request(SYS_STATUS)

        assert result.get("cpu_loading") == "12"
        assert client.login_attempts == 1
        assert device.paths() == ["/adm/getmain.php", "/adm/login.php", "/adm/getmain.php"]

    def test_second_expiry_propagates(self, tmp_path: Path) -> None:
        device = Device(
            getmain=[_response(text=LOGOUT_PAGE), _response(text=LOGOUT_PAGE)],
            login=[_response(json_data={"success": "true"})],
        )
        with _client(tmp_path, device) as client, pytest.raises(AuthorizationExpired):
            client.request(SYS_STATUS)
        assert client.login_attempts == 1
        assert len(device.requests) == 3

    def test_no_auto_login(self, tmp_path: Path) -> None:
        device = Device(getmain=[_response(text=LOGOUT_PAGE)])
        with _client(tmp_path, device) as client, pytest.raises(AuthorizationExpired):
            client.request(SYS_STATUS, auto_login=False)
        assert client.login_attempts == 0

    def test_server_error_via_patched_get(self, tmp_path: Path) -> None:
        client = _client(tmp_path)
        client.connect()
        with patch.object(client._http, "get", return_value=_response(500)) as mock_get:  # type: ignore[union-attr]
            with pytest.raises(ServerError):
                client.request(SYS_STATUS)
            mock_get.assert_called_once_with(SYS_STATUS)
        client.close()

    def test_transport_failure(self, tmp_path: Path) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with _client(tmp_path, handler) as client, pytest.raises(TransportFailure, match="nas.local"):
            client.request(SYS_STATUS)

    def test_redirect_to_unauth_page(self, tmp_path: Path) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/unauth.htm":
                return httpx.Response(200, text="<html>login required</html>")
            return httpx.Response(302, headers={"location": "/unauth.htm"})

        with _client(tmp_path, handler) as client, pytest.raises(AuthenticationFailed):
            client.request(SYS_STATUS)


class TestLogin:
    def test_posts_credentials_form(self, tmp_path: Path) -> None:
        device = Device(login=[_response(json_data={"success": True})])
        with _client(tmp_path, device) as client:
            client.login()

        request = device.requests[0]
        assert request.method == "POST"
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        form = parse_qs(request.content.decode())
        assert form["username"] == ["admin"]
        assert form["pwd"] == ["secret"]
        assert form["p_user"] == ["admin"]
        assert form["p_pass"] == ["secret"]
        assert form["option"] == ["com_extplorer"]

    def test_rejected_login_uses_device_message(self, tmp_path: Path) -> None:
        device = Device(login=[_response(json_data={"success": False, "errormsg": {"msg": "Wrong password"}})])
        with _client(tmp_path, device) as client, pytest.raises(AuthenticationFailed, match="Wrong password"):
            client.login()

    def test_rejected_login_default_message(self, tmp_path: Path) -> None:
        device = Device(login=[_response(json_data={"success": "false"})])
        with _client(tmp_path, device) as client, pytest.raises(AuthenticationFailed, match="Thecus login failed"):
            client.login()

    def test_login_endpoint_error_is_authentication_failure(self, tmp_path: Path) -> None:
        device = Device(login=[_response(404)])
        with _client(tmp_path, device) as client, pytest.raises(AuthenticationFailed):
            client.login()

    def test_login_answered_with_logout_page_is_authentication_failure(self, tmp_path: Path) -> None:
        device = Device(login=[_response(text=LOGOUT_PAGE)])
        with _client(tmp_path, device) as client, pytest.raises(AuthenticationFailed, match="Not authorized"):
            client.login()

    def test_failed_relogin_propagates(self, tmp_path: Path) -> None:
        device = Device(
            getmain=[_response(text=LOGOUT_PAGE)],
            login=[_response(json_data={"success": False})],
        )
        with _client(tmp_path, device) as client, pytest.raises(AuthenticationFailed):
            client.request(SYS_STATUS)
        assert client.login_attempts == 1


class TestCookiePersistence:
    def test_stored_cookie_is_sent(self, tmp_path: Path) -> None:
        CookieStore(tmp_path / "cookies.txt").save({"PHPSESSID": "stored"})
        device = Device(getmain=[_response(json_data={"ok": 1})])
        with _client(tmp_path, device) as client:
            client.request(SYS_STATUS)
        assert "PHPSESSID=stored" in device.requests[0].headers["cookie"]

    def test_device_cookie_replaces_stored_one(self, tmp_path: Path) -> None:
        store = CookieStore(tmp_path / "cookies.txt")
        store.save({"PHPSESSID": "old"})

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"ok": 1}, headers={"set-cookie": "PHPSESSID=new; path=/"})

        with _client(tmp_path, handler) as client:
            client.request(SYS_STATUS)
        assert store.load() == {"PHPSESSID": "new"}

    def test_next_run_reuses_saved_session(self, tmp_path: Path) -> None:
        def login_handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"success": True}, headers={"set-cookie": "PHPSESSID=fresh; path=/"})

        with _client(tmp_path, login_handler) as client:
            client.login()

        device = Device(getmain=[_response(json_data={"ok": 1})])
        with _client(tmp_path, device) as client:
            client.request(SYS_STATUS)
        assert "PHPSESSID=fresh" in device.requests[0].headers["cookie"]

    def test_cookie_file_is_private(self, tmp_path: Path) -> None:
        device = Device(getmain=[_response(json_data={"ok": 1})])
        with _client(tmp_path, device) as client:
            client.request(SYS_STATUS)
        assert ((tmp_path / "cookies.txt").stat().st_mode & 0o777) == 0o600

    def test_logout_clears_cookies(self, tmp_path: Path) -> None:
        store = CookieStore(tmp_path / "cookies.txt")
        store.save({"PHPSESSID": "abc"})
        device = Device(logout=[httpx.Response(200, text="bye")])
        with _client(tmp_path, device) as client:
            client.logout()
        assert device.paths() == ["/adm/logout.html"]
        assert store.load() == {}


class TestFromSettings:
    def test_builds_cookie_path_from_settings(self, tmp_path: Path) -> None:
        settings = Settings(
            device=DeviceConfig(hostname="nas.local", username="admin", password="pw", scheme="https"),
            check=CheckConfig(type=CheckType.CPU),
            session=SessionConfig(cookie_dir=tmp_path),
        )
        client = SessionClient.from_settings(settings)
        assert client._base_url == "https://nas.local"
        assert client._store.path == tmp_path / "check_thecus_nas-nas.local-admin-cookie.txt"
        assert not client.connected
