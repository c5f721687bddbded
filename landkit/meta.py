"""Project metadata stored in ``land.toml``."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from typing import Any

import tomli_w

VERSION = "0.5"
DEFAULT_FILE = "land.toml"


@dataclass
class BuildData:
    """Build section of the metadata."""

    main: str
    cmd: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"main": self.main}
        if self.cmd is not None:
            data["cmd"] = self.cmd
        return data


def _require(data: dict[str, Any], key: str, where: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}` in {where}") from None


@dataclass
class Data:
    """Project metadata."""

    name: str
    description: str
    language: str
    version: str
    build: BuildData = field(default_factory=lambda: BuildData(main=""))

    @classmethod
    def new_js(cls) -> Data:
        """Return default metadata for a JavaScript project."""
        return cls(
            name="js",
            description="JavaScript",
            language="javascript",
            version=VERSION,
            build=BuildData(main="src/index.js"),
        )

    @classmethod
    def from_file(cls, file: str | os.PathLike[str]) -> Data:
        """Read metadata from a TOML file."""
        with open(file, "rb") as fh:
            raw = tomllib.load(fh)
        build = _require(raw, "build", "metadata")
        if not isinstance(build, dict):
            raise ValueError("field `build` must be a table")
        return cls(
            name=_require(raw, "name", "metadata"),
            description=_require(raw, "description", "metadata"),
            language=_require(raw, "language", "metadata"),
            version=_require(raw, "version", "metadata"),
            build=BuildData(main=_require(build, "main", "build"), cmd=build.get("cmd")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "language": self.language,
            "version": self.version,
            "build": self.build.to_dict(),
        }

    def to_file(self, file: str | os.PathLike[str]) -> None:
        """Write metadata to a TOML file."""
        with open(file, "wb") as fh:
            tomli_w.dump(self.to_dict(), fh)

    def target_wasm_path(self) -> str:
        """Return the path of the built wasm module."""
        if self.language == "js":
            return f"dist/{self.name}.wasm"
        return self.build.main