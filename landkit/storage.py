"""Storage backend settings: local filesystem and S3, and the current choice."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, MutableMapping

from landkit.common import obj_hash

log = logging.getLogger(__name__)

CURRENT_SETTINGS = "storage-current"
FS_SETTINGS = "storage-fs"
S3_SETTINGS = "storage-s3"


class StorageError(Exception):
    """Raised when storage settings are missing or unsupported."""


@dataclass
class FsSettings:
    """Local filesystem storage settings."""

    local_path: str = "./data"
    local_url: str = "/download/{name}"

    def build_url(self, name: str) -> str:
        """Return the download URL of the stored file ``name``."""
        return self.local_url.replace("{name}", name)


@dataclass
class S3Settings:
    """S3 storage settings."""

    bucket: str = ""
    region: str = ""
    endpoint: str = ""
    access_key: str = ""
    secret_key: str = ""
    directory: str | None = None
    url: str | None = None

    def build_url(self, name: str) -> str:
        """Return the public URL of the stored object ``name``."""
        base = self.url
        if base is None:
            base = f"{self.endpoint.rstrip('/')}/{self.bucket}"
        base = base.rstrip("/")
        if self.directory is not None:
            base += "/" + self.directory.rstrip("/")
        return f"{base}/{name}"


@dataclass
class StorageForm:
    """Submitted storage settings form."""

    checked: str
    endpoint: str | None = None
    bucket: str | None = None
    region: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    directory: str | None = None
    access_url: str | None = None


def _load(cls: type, raw: Any) -> Any:
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in dict(raw).items() if k in names})


class StorageConfig:
    """Storage settings kept in a key-value settings store."""

    def __init__(self, store: MutableMapping[str, Any] | None = None) -> None:
        self.store: MutableMapping[str, Any] = {} if store is None else store

    def init_defaults(self) -> None:
        """Store default settings for every entry that is missing."""
        if self.store.get(CURRENT_SETTINGS) is None:
            self.store[CURRENT_SETTINGS] = {"current": "fs"}
            log.debug("init storage current: fs")
        if self.store.get(FS_SETTINGS) is None:
            self.store[FS_SETTINGS] = asdict(FsSettings())
            log.debug("init fs storage settings")
        if self.store.get(S3_SETTINGS) is None:
            self.store[S3_SETTINGS] = asdict(S3Settings())
            log.debug("init s3 storage settings")

    def current(self) -> str:
        """Return the name of the backend in use."""
        raw = self.store.get(CURRENT_SETTINGS)
        if raw is None:
            raise StorageError("storage current not found")
        return raw["current"]

    def set_current(self, name: str) -> None:
        """Select the backend in use."""
        self.store[CURRENT_SETTINGS] = {"current": name}

    def fs_settings(self) -> FsSettings:
        """Return the filesystem settings."""
        raw = self.store.get(FS_SETTINGS)
        if raw is None:
            raise StorageError("fs storage settings not found")
        return _load(FsSettings, raw)

    def s3_settings(self) -> S3Settings:
        """Return the S3 settings."""
        raw = self.store.get(S3_SETTINGS)
        if raw is None:
            raise StorageError("s3 storage settings not found")
        return _load(S3Settings, raw)

    def update_by_form(self, form: StorageForm) -> str:
        """Apply a settings form and return the key of the backend now in use."""
        if form.checked == "s3":
            self.store[S3_SETTINGS] = asdict(
                S3Settings(
                    endpoint=form.endpoint or "",
                    bucket=form.bucket or "",
                    region=form.region or "",
                    access_key=form.access_key or "",
                    secret_key=form.secret_key or "",
                    directory=form.directory,
                    url=form.access_url,
                )
            )
            self.set_current("s3")
        elif form.checked == "fs":
            self.store[FS_SETTINGS] = asdict(
                FsSettings(
                    local_path=form.directory or "",
                    local_url=form.access_url or "",
                )
            )
            self.set_current("fs")
        return self.key()

    def build_url(self, name: str) -> str:
        """Return the URL of ``name`` in the backend in use."""
        current = self.current()
        if current == "fs":
            return self.fs_settings().build_url(name)
        if current == "s3":
            return self.s3_settings().build_url(name)
        raise StorageError(f"storage {current} not supported")

    def key(self) -> str:
        """Return a key that changes whenever the backend or its settings change."""
        current = self.current()
        if current == "fs":
            return f"fs-{obj_hash(self.fs_settings())}"
        if current == "s3":
            return f"s3-{obj_hash(self.s3_settings())}"
        raise StorageError(f"{current} not supported")

    def vars(self) -> dict[str, Any]:
        """Return the current choice and both backends' settings as plain data."""
        return {
            "current": self.current(),
            "fs": asdict(self.fs_settings()),
            "s3": asdict(self.s3_settings()),
        }