"""Worker agent: identifying the worker and syncing deployment confs from the server."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import requests

from landkit.common import get_hostname
from landkit.traefik import ConfItem

log = logging.getLogger(__name__)

IPINFO_LINK = "https://ipinfo.io/json"
CONFS_FILE = "confs.json"
_TIMEOUT = 30.0


class SyncError(Exception):
    """Raised when the server rejects a sync or answers with a bad body."""


@dataclass
class IPInfo:
    """Network identity of a worker."""

    ip: str = ""
    city: str = ""
    region: str = ""
    country: str = ""
    loc: str = ""
    org: str = ""
    timezone: str = ""
    hostname: str | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> IPInfo:
        """Build from decoded JSON; every field but hostname is required."""
        if not isinstance(raw, dict):
            raise ValueError("ip info must be an object")
        values: dict[str, Any] = {}
        for f in fields(cls):
            if f.name in raw:
                values[f.name] = raw[f.name]
            elif f.name != "hostname":
                raise ValueError(f"missing field `{f.name}`")
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def fetch_ip_info(
    ip: str | None = None, session: requests.Session | None = None
) -> IPInfo:
    """Return the worker's identity: the given ip, or one looked up online."""
    if ip is not None:
        return IPInfo(ip=ip)
    http = session if session is not None else requests.Session()
    resp = http.get(IPINFO_LINK, timeout=_TIMEOUT)
    resp.raise_for_status()
    info = IPInfo.from_dict(resp.json())
    info.hostname = get_hostname()
    log.info("IP info: %s", info)
    return info


def _conf_item(raw: Any) -> ConfItem:
    if not isinstance(raw, dict):
        raise SyncError("invalid response: item must be an object")
    try:
        return ConfItem(**{f.name: raw[f.name] for f in fields(ConfItem)})
    except KeyError as exc:
        raise SyncError(f"invalid response: missing field {exc.args[0]!r}") from None


def sync_once(
    addr: str,
    token: str,
    directory: str | os.PathLike[str],
    ipinfo: IPInfo,
    session: requests.Session | None = None,
) -> list[ConfItem] | None:
    """Report to the server and store the confs it returns.

    Returns None when the server reports no change, otherwise the items
    written to ``confs.json`` in ``directory``.
    """
    http = session if session is not None else requests.Session()
    resp = http.post(
        f"{addr}/worker-api/sync",
        headers={"Authorization": f"Bearer {token}", "X-Md5": ""},
        json=ipinfo.to_dict(),
        timeout=_TIMEOUT,
    )
    status_code = resp.status_code
    if status_code == 304:
        return None
    if status_code >= 400:
        raise SyncError(f"Bad status:{status_code}, Error:{resp.text}")

    try:
        body = resp.json()
    except ValueError as exc:
        raise SyncError(f"invalid response: {exc}") from exc
    if not isinstance(body, dict) or not all(k in body for k in ("status", "message", "data")):
        raise SyncError("invalid response: missing status, message or data")
    if not isinstance(body["data"], list):
        raise SyncError("invalid response: data must be a list")
    items = [_conf_item(raw) for raw in body["data"]]
    if body["status"] != "ok":
        raise SyncError(f"sync error: {body['message']}")

    content = json.dumps(
        [asdict(item) for item in items], separators=(",", ":"), ensure_ascii=False
    )
    (Path(directory) / CONFS_FILE).write_text(content, encoding="utf-8")
    return items