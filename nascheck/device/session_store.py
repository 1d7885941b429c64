"""On-disk session cookie persistence, one file per (host, user)."""

from __future__ import annotations

import json
import os
from pathlib import Path

import structlog

logger = structlog.stdlib.get_logger()

_FILE_MODE = 0o600


def cookie_filename(cookie_dir: Path, hostname: str, username: str) -> Path:
    """Path of the cookie file for one host/user pair."""
    return Path(cookie_dir) / f"check_thecus_nas-{hostname}-{username}-cookie.txt"


class CookieStore:
    """Reads and writes the session cookies of one device login.

    The file holds an administrator session, so it is created readable by
    the invoking user only.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @classmethod
    def for_device(cls, cookie_dir: Path, hostname: str, username: str) -> CookieStore:
        return cls(cookie_filename(cookie_dir, hostname, username))

    @property
    def path(self) -> Path:
        return self._path

    def ensure(self) -> None:
        """Create the file if needed and restrict it to the owner."""
        self._path.touch(mode=_FILE_MODE, exist_ok=True)
        os.chmod(self._path, _FILE_MODE)

    def read_bytes(self) -> bytes:
        try:
            return self._path.read_bytes()
        except FileNotFoundError:
            return b""

    def write_bytes(self, data: bytes) -> None:
        self.ensure()
        self._path.write_bytes(data)

    def load(self) -> dict[str, str]:
        """Stored cookies; a missing or corrupt file yields no cookies."""
        data = self.read_bytes()
        if not data.strip():
            return {}
        try:
            cookies = json.loads(data)
        except ValueError:
            logger.warning("cookie_store_corrupt", path=str(self._path))
            return {}
        if not isinstance(cookies, dict):
            return {}
        return {str(k): str(v) for k, v in cookies.items()}

    def save(self, cookies: dict[str, str]) -> None:
        self.write_bytes(json.dumps(cookies, sort_keys=True).encode())

    def clear(self) -> None:
        self.save({})
