"""Built-in project templates and their extraction."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from landkit import meta

log = logging.getLogger(__name__)


@dataclass
class Item:
    """A project template."""

    link: str
    title: str
    description: str
    asset_content: str
    lang: str

    def __str__(self) -> str:
        return f"{self.title} ({self.description})"

    def get_source(self, assets_dir: str | os.PathLike[str]) -> str | None:
        """Return the template's main source text, or None if it is absent."""
        path = Path(assets_dir) / self.asset_content
        if not path.is_file():
            return None
        return path.read_bytes().decode("utf-8")

    def extract(
        self, assets_dir: str | os.PathLike[str], dir: str | os.PathLike[str], desc: str
    ) -> None:
        """Copy the template's files into ``dir`` and refresh its metadata."""
        assets = Path(assets_dir)
        target_root = os.fspath(dir)
        if not (assets / self.link / meta.DEFAULT_FILE).is_file():
            raise FileNotFoundError("Meta file not found")

        for path in sorted(p for p in assets.rglob("*") if p.is_file()):
            rel = path.relative_to(assets).as_posix()
            if not rel.startswith(self.link):
                continue
            target = Path(f"{target_root}{rel.replace(self.link, '')}")
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(path.read_bytes())
            log.debug("Extract file: %s", target)

        _refresh_toml(target_root, desc or self.description)


def _refresh_toml(dir: str, desc: str) -> None:
    toml_file = f"{dir}/{meta.DEFAULT_FILE}"
    data = meta.Data.from_file(toml_file)
    data.name = dir
    data.description = desc
    data.to_file(toml_file)


def defaults() -> list[Item]:
    """Return the list of default templates."""
    return [
        Item(
            link="js-hello",
            title="Hello World - JavaScript",
            description="a simple hello world example by http trigger and return hello world string",
            asset_content="js-hello/src/index.js",
            lang="javascript",
        )
    ]


def get(name: str) -> Item | None:
    """Return the default template whose link is ``name``."""
    return next((item for item in defaults() if item.link == name), None)