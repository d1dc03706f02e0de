"""
Reading reference data from disk or over HTTP.

``DataSource.load`` is async: the blocking read runs in a worker thread and
concurrent loads of the same path share one in-flight task.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Optional

import requests

from .config import TaggerConfig, get_config
from .errors import LoadError
from .registry import Registries, RegistryBuilder
from .store import TaggingStore

logger = logging.getLogger(__name__)


def is_url(path: str) -> bool:
    return path.startswith("http://") or path.startswith("https://")


def load_text(path: str, timeout: float = 10.0) -> str:
    """Read a local file or an http(s) URL as text."""
    if is_url(path):
        try:
            resp = requests.get(path, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise LoadError(path, str(exc)) from exc
        return resp.text
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise LoadError(path, exc.strerror or str(exc)) from exc


class DataSource:
    """Async text loader with per-path sharing of in-flight reads."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout
        self._pending: Dict[str, asyncio.Task] = {}

    async def _read(self, path: str) -> str:
        try:
            logger.debug("Loading %s", path)
            return await asyncio.to_thread(load_text, path, self.timeout)
        finally:
            self._pending.pop(path, None)

    async def load(self, path: str) -> str:
        task = self._pending.get(path)
        if task is None:
            task = asyncio.ensure_future(self._read(path))
            self._pending[path] = task
        return await asyncio.shield(task)


async def load_registries(
    config: Optional[TaggerConfig] = None, source: Optional[DataSource] = None
) -> Registries:
    """
    Load every reference file named by ``config`` and build the registries.

    Tag definitions and tag metadata are read first; families, embeddings and
    rules follow. Any failed read raises ``LoadError``.
    """
    config = config or get_config()
    source = source or DataSource(timeout=config.http_timeout)

    definitions, metadata = await asyncio.gather(
        source.load(config.resolve(config.tag_definitions)),
        source.load(config.resolve(config.tags_metadata)),
    )
    family_data, embeddings, rules = await asyncio.gather(
        source.load(config.resolve(config.family_data)),
        source.load(config.resolve(config.embeddings)),
        source.load(config.resolve(config.tag_rules)),
    )
    registries = (
        RegistryBuilder()
        .with_tag_definitions(definitions, config.tag_definitions)
        .with_tag_metadata(metadata)
        .with_family_data(family_data, config.family_data)
        .with_embeddings(embeddings, config.embeddings)
        .with_rules(rules)
        .build()
    )
    logger.info(
        "Loaded %d tags, %d families, %d rules",
        len(registries.tags),
        len(registries.fonts),
        len(registries.rules),
    )
    return registries


async def load_store(
    config: Optional[TaggerConfig] = None, source: Optional[DataSource] = None
) -> TaggingStore:
    """Registries plus the tagging CSV. A missing local tagging file leaves the store empty."""
    config = config or get_config()
    source = source or DataSource(timeout=config.http_timeout)
    store = TaggingStore(await load_registries(config, source))

    taggings_path = config.resolve(config.taggings)
    if not is_url(taggings_path) and not Path(taggings_path).exists():
        logger.info("No tagging file at %s; starting empty", taggings_path)
        return store
    store.import_csv(await source.load(taggings_path))
    return store
