"""
Infrastructure adapter: JSON file on disk → IConfigStore.

All filesystem details are confined here. Reads run in a worker thread;
writes go to a temp file in the same directory followed by os.replace, so
readers never see a half-written document produced by this process. A
hand edit that leaves the file unparseable is tolerated: load() serves the
last good configuration until the file parses again.
"""

import asyncio
import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from tickerboard.domain.entities.dashboard_config import DashboardConfig
from tickerboard.domain.errors import ConfigStoreError
from tickerboard.domain.ports.config_store_port import IConfigStore

logger = logging.getLogger(__name__)

_MISSING = object()
_CORRUPT = object()


class JsonFileConfigStore(IConfigStore):
    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._last_good: Optional[DashboardConfig] = None

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> DashboardConfig:
        document = await asyncio.to_thread(self._read_document)
        if document is _MISSING:
            logger.info("Config file %s not found - creating it with defaults", self._path)
            config = DashboardConfig()
            await self.save(config)
            return config
        if document is _CORRUPT:
            return self._last_good or DashboardConfig()
        try:
            config = DashboardConfig.from_dict(document)
        except (TypeError, ValueError) as exc:
            logger.warning("Config file %s has an invalid shape: %s", self._path, exc)
            return self._last_good or DashboardConfig()
        self._last_good = config
        return config

    async def save(self, config: DashboardConfig) -> None:
        try:
            await asyncio.to_thread(self._write_document, config.to_dict())
        except OSError as exc:
            raise ConfigStoreError(f"Failed to save configuration: {exc}") from exc
        self._last_good = config

    async def content_hash(self) -> Optional[str]:
        document = await asyncio.to_thread(self._read_document)
        if document is _MISSING or document is _CORRUPT:
            return None
        return canonical_hash(document)

    def modified_at(self) -> Optional[int]:
        try:
            return self._path.stat().st_mtime_ns
        except FileNotFoundError:
            return None

    # ------------------------------------------------------------------
    # Private helpers (run in worker threads)
    # ------------------------------------------------------------------

    def _read_document(self) -> Any:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return _MISSING
        except OSError as exc:
            logger.warning("Could not read config file %s: %s", self._path, exc)
            return _CORRUPT
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("Config file %s is not valid JSON: %s", self._path, exc)
            return _CORRUPT

    def _write_document(self, document: dict) -> None:
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, indent=2)
                fh.write("\n")
            os.replace(tmp_path, self._path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise


def canonical_hash(document: Any) -> str:
    """SHA-256 of the document with sorted keys and no insignificant whitespace."""
    canonical = json.dumps(document, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

