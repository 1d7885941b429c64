"""Known paths of the NAS web management interface.

Each logical query lists its candidate URIs in preference order; later
entries cover older firmware that names the same data differently.
"""

from __future__ import annotations

from urllib.parse import quote

LOGIN_PATH = "/adm/login.php"
LOGOUT_PATH = "/adm/logout.html"

# Response markers used to classify an otherwise successful HTTP exchange
LOGOUT_REDIRECT_MARKER = "/adm/logout.php"
UNAUTHENTICATED_PATH = "/unauth.htm"
IN_USE_PATH = "/adm/inuse.htm"

# Placeholder the device returns for fields that don't apply to a unit
PLACEHOLDER_VALUE = "N/A"

# Fixed form fields the login form submits alongside the credentials
LOGIN_FORM_FIELDS: dict[str, str] = {
    "action": "login",
    "option": "com_extplorer",
    "eplang": "english",
}

SYS_STATUS: list[str] = [
    "/adm/getmain.php?fun=systatus&update=1",
    "/adm/getmain.php?fun=systatus",
]

NAS_STATUS: list[str] = [
    "/adm/getmain.php?fun=nasstatus",
]

RAID_LIST: list[str] = [
    "/adm/getmain.php?fun=raid&action=getraidlist",
]

RAID_ACCESS_STATUS: list[str] = [
    "/adm/getmain.php?fun=raid&action=getAccessStatus",
]

DISKS: list[str] = [
    "/adm/getmain.php?fun=disks&update=1",
    "/adm/getmain.php?fun=disks",
]

SMART: list[str] = [
    "/adm/getmain.php?fun=smart&diskno={diskno}&trayno={trayno}",
    "/adm/getmain.php?fun=smart&disk_no={diskno}&tray_no={trayno}",
]


def smart_candidates(diskno: str, trayno: str) -> list[str]:
    """SMART candidate URIs for one disk."""
    params = {"diskno": quote(diskno, safe=""), "trayno": quote(trayno, safe="")}
    return [uri.format(**params) for uri in SMART]
