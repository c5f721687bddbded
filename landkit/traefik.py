"""Deployment configuration items and the Traefik routing files built from them."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any

import yaml


@dataclass
class ConfItem:
    """One deployed module as announced to workers."""

    user_id: int
    project_id: int
    deploy_id: int
    task_id: str
    file_name: str
    download_url: str
    file_hash: str
    domain: str

    @classmethod
    def from_json(cls, text: str) -> ConfItem:
        """Parse an item from JSON text."""
        raw = json.loads(text)
        try:
            return cls(**{name: raw[name] for name in cls.__dataclass_fields__})
        except KeyError as exc:
            raise ValueError(f"missing field {exc.args[0]!r}") from None

    def to_json(self) -> str:
        """Serialize the item to compact JSON."""
        return json.dumps(asdict(self), separators=(",", ":"), ensure_ascii=False)


@dataclass
class Router:
    """A Traefik HTTP router."""

    middlewares: list[str]
    service: str
    rule: str


@dataclass
class TraefikConfs:
    """Traefik dynamic HTTP configuration: middlewares and routers."""

    middlewares: dict[str, dict[str, str]] = field(default_factory=dict)
    routers: dict[str, Router] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as plain data, keys sorted."""
        middlewares = {
            name: {"headers": {"customRequestHeaders": dict(sorted(headers.items()))}}
            for name, headers in sorted(self.middlewares.items())
        }
        routers = {
            name: {
                "middlewares": list(router.middlewares),
                "service": router.service,
                "rule": router.rule,
            }
            for name, router in sorted(self.routers.items())
        }
        return {"http": {"middlewares": middlewares, "routers": routers}}

    def to_yaml(self) -> str:
        """Return the configuration as YAML."""
        return yaml.safe_dump(self.to_dict(), sort_keys=False)


def build(item: ConfItem, service_name: str) -> TraefikConfs:
    """Build the Traefik configuration routing ``item``'s domain to the service."""
    middleware_name = f"m-{item.task_id}"
    headers = {
        "x-land-m": item.file_name,
        "x-land-uid": str(item.user_id),
        "x-land-pid": str(item.project_id),
        "x-land-did": str(item.deploy_id),
    }
    router = Router(
        middlewares=[middleware_name],
        service=service_name,
        rule=f"Host(`{item.domain}`)",
    )
    return TraefikConfs(
        middlewares={middleware_name: headers},
        routers={f"r-{item.task_id}": router},
    )