"""Session-authenticated HTTP client for the NAS web management interface."""

from __future__ import annotations

from types import TracebackType
from urllib.parse import urlencode

import httpx
import structlog

from nascheck.core.config import Settings
from nascheck.device.endpoints import (
    IN_USE_PATH,
    LOGIN_FORM_FIELDS,
    LOGIN_PATH,
    LOGOUT_PATH,
    LOGOUT_REDIRECT_MARKER,
    UNAUTHENTICATED_PATH,
)
from nascheck.device.exceptions import (
    AuthenticationFailed,
    AuthorizationExpired,
    ClientError,
    DecodeError,
    DeviceError,
    EndpointError,
    ServerError,
    SessionConflict,
    TransportFailure,
)
from nascheck.device.response import DeviceResponse
from nascheck.device.session_store import CookieStore

logger = structlog.stdlib.get_logger()

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def classify_response(response: httpx.Response, path: str) -> DeviceResponse:
    """Turn a completed HTTP exchange into data or a classified error.

    Checks run in a fixed order: status code, session markers, then JSON
    decoding.

    Raises:
        ClientError: 4xx status.
        ServerError: 5xx status.
        AuthorizationExpired: The body carries the logout redirect.
        AuthenticationFailed: Redirected to the unauthenticated landing page.
        SessionConflict: Redirected to the "admin already logged in" page.
        DecodeError: Empty or malformed JSON body.
    """
    status = response.status_code
    if 400 <= status < 500:
        raise ClientError(status, path)
    if status >= 500:
        raise ServerError(status, path)

    body = response.text
    final_path = response.url.path
    if LOGOUT_REDIRECT_MARKER in body:
        raise AuthorizationExpired("Not authorized")
    if final_path.endswith(UNAUTHENTICATED_PATH):
        raise AuthenticationFailed("Thecus login failed")
    if final_path.endswith(IN_USE_PATH):
        raise SessionConflict("Admin has already logged in from another host")

    if not body.strip():
        raise DecodeError(f"Empty response from {path}")
    try:
        data = response.json()
    except ValueError as exc:
        raise DecodeError(f"Invalid JSON from {path}") from exc
    return DeviceResponse(data)


class SessionClient:
    """Issues requests against one device, keeping its admin session alive.

    The session cookie is loaded from the cookie store on first use and
    written back after every call. When the device reports the session as
    expired, the client logs in once and replays the request once.

    Usage::

        with SessionClient("nas.local", "admin", "secret", store) as client:
            status = client.request("/adm/getmain.php?fun=systatus")
    """

    def __init__(
        self,
        hostname: str,
        username: str,
        password: str,
        cookie_store: CookieStore,
        scheme: str = "http",
        timeout_secs: float = 10.0,
        transport: httpx.BaseTransport | None = None,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._hostname = hostname
        self._username = username
        self._password = password
        self._store = cookie_store
        self._base_url = f"{scheme}://{hostname}"
        self._timeout_secs = timeout_secs
        self._transport = transport
        self._log = (log or logger).bind(host=hostname)
        self._http: httpx.Client | None = None
        self._login_attempts = 0

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cookie_store: CookieStore | None = None,
        transport: httpx.BaseTransport | None = None,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> SessionClient:
        device = settings.device
        store = cookie_store or CookieStore.for_device(
            settings.session.cookie_dir, device.hostname, device.username,
        )
        return cls(
            hostname=device.hostname,
            username=device.username,
            password=device.password.get_secret_value(),
            cookie_store=store,
            scheme=device.scheme,
            timeout_secs=device.timeout_secs,
            transport=transport,
            log=log,
        )

    @property
    def connected(self) -> bool:
        return self._http is not None and not self._http.is_closed

    @property
    def login_attempts(self) -> int:
        """Number of logins performed by this client."""
        return self._login_attempts

    def connect(self) -> None:
        """Create the httpx client, seeded with the stored session cookies."""
        if self.connected:
            return
        self._store.ensure()
        self._http = httpx.Client(
            base_url=self._base_url,
            cookies=self._store.load(),
            timeout=httpx.Timeout(self._timeout_secs),
            follow_redirects=True,
            transport=self._transport,
        )

    def close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> SessionClient:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # ── Requests ─────────────────────────────────────────────────

    def request(
        self,
        path: str,
        body: str | None = None,
        auto_login: bool = True,
    ) -> DeviceResponse:
        """GET (or POST when *body* is given) *path* and decode the JSON answer.

        Raises:
            DeviceError: A classified failure; see ``classify_response``.
        """
        try:
            return self._request_once(path, body)
        except AuthorizationExpired:
            if not auto_login:
                raise
            self._log.info("device_session_expired", path=path)
            self.login()
            return self.request(path, body, auto_login=False)

    def login(self) -> DeviceResponse:
        """Submit the credentials to the login form.

        Raises:
            AuthenticationFailed: The device rejected the login or answered
                with something that isn't a login result.
        """
        self._login_attempts += 1
        self._log.info("device_login_attempted", username=self._username)
        form = {
            "username": self._username,
            "pwd": self._password,
            "p_user": self._username,
            "p_pass": self._password,
            **LOGIN_FORM_FIELDS,
        }
        try:
            response = self.request(LOGIN_PATH, urlencode(form), auto_login=False)
        except (EndpointError, AuthorizationExpired) as exc:
            raise AuthenticationFailed(f"Thecus login failed: {exc}") from exc

        if str(response.get("success", "")).lower() != "true":
            message = response.child("errormsg").get("msg") or "Thecus login failed"
            self._log.warning("device_login_rejected", reason=message)
            raise AuthenticationFailed(str(message))
        return response

    def logout(self) -> None:
        """End the admin session and forget the stored cookies."""
        try:
            self._send(LOGOUT_PATH, None)
        finally:
            self._store.clear()
            if self._http is not None:
                self._http.cookies.clear()
        self._log.debug("device_logged_out")

    def _request_once(self, path: str, body: str | None) -> DeviceResponse:
        response = self._send(path, body)
        try:
            result = classify_response(response, path)
        except DeviceError as exc:
            self._log.debug(
                "device_request_classified",
                path=path,
                status=response.status_code,
                outcome=type(exc).__name__,
            )
            raise
        self._log.debug(
            "device_request_classified",
            path=path,
            status=response.status_code,
            outcome="Success",
        )
        return result

    def _send(self, path: str, body: str | None) -> httpx.Response:
        self.connect()
        if self._http is None:
            raise TransportFailure(f"No connection to {self._hostname}")
        method = "GET" if body is None else "POST"
        self._log.debug("device_request_issued", method=method, path=path)
        try:
            if body is None:
                return self._http.get(path)
            return self._http.post(
                path,
                content=body,
                headers={"content-type": _FORM_CONTENT_TYPE},
            )
        except httpx.HTTPError as exc:
            raise TransportFailure(f"Request to {self._hostname} failed: {exc}") from exc
        finally:
            self._save_cookies()

    def _save_cookies(self) -> None:
        """Persist the current cookies, preferring ones the device just set."""
        if self._http is None:
            return
        jar = self._http.cookies.jar
        device_set = {c.name for c in jar if c.domain}
        for cookie in list(jar):
            # seeded cookies carry no domain; drop them once the device replaces them
            if not cookie.domain and cookie.name in device_set:
                jar.clear(cookie.domain, cookie.path, cookie.name)
        try:
            self._store.save({c.name: c.value or "" for c in jar})
        except OSError:
            self._log.warning("cookie_store_write_failed", path=str(self._store.path))
