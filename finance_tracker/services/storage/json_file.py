"""
JSON File Record Store

DESIGN DECISION: Each collection lives in one JSON file (`<data_dir>/<name>.json`)
holding a list of records. This is enough for a personal finance tracker:
1. No database setup required
2. Files are human readable and trivially backed up
3. The full collection is small enough to read and rewrite on every call

TRADEOFFS:
- Not suitable for large datasets (we're fine for personal use)
- Within one process, writers to a file are serialized by an asyncio.Lock
  (FIFO) owned by this store instance and keyed by event loop and file path
- Across processes only the atomic rename protects readers; concurrent
  writers from different processes race (last write wins)

Writes go to a temporary file in the same directory which is then
renamed over the target, so a reader sees either the old or the new
content, never a torn write.
"""

import asyncio
import json
import os
import re
from datetime import date
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union
from uuid import uuid4
from weakref import WeakKeyDictionary

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.config import get_settings
from finance_tracker.services.storage.interface import (
    Mutator,
    RawRecord,
    RecordStoreInterface,
    StorageCorruptionError,
    StorageError,
    T,
)


COLLECTION_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_-]{0,63}$")


def _encode(value: Any) -> Any:
    """json.dumps fallback for the non-JSON types records may carry."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonFileRecordStore(RecordStoreInterface):
    """
    File-backed implementation of the record store.
    
    One instance owns the lock registry; every repository sharing
    the instance shares the locks.
    """
    
    def __init__(
        self,
        data_dir: Optional[Union[str, Path]] = None,
        indent: Optional[int] = None,
        retry_attempts: Optional[int] = None,
    ):
        settings = get_settings().storage
        self._data_dir = Path(data_dir if data_dir is not None else settings.data_dir).resolve()
        self._indent = settings.json_indent if indent is None else indent
        self._retry_attempts = retry_attempts or settings.write_retry_attempts
        self._locks: WeakKeyDictionary[asyncio.AbstractEventLoop, dict[Path, asyncio.Lock]] = (
            WeakKeyDictionary()
        )
        self._logger = structlog.get_logger(__name__)
    
    @property
    def data_dir(self) -> Path:
        return self._data_dir
    
    def path_for(self, collection: str) -> Path:
        """Resolve the file holding a collection."""
        if not COLLECTION_NAME_PATTERN.match(collection):
            raise ValueError(f"Invalid collection name: {collection!r}")
        return self._data_dir / f"{collection}.json"
    
    def _lock_for(self, path: Path) -> asyncio.Lock:
        """The lock for a path, scoped to the running event loop."""
        loop = asyncio.get_running_loop()
        loop_locks = self._locks.get(loop)
        if loop_locks is None:
            loop_locks = {}
            self._locks[loop] = loop_locks
        lock = loop_locks.get(path)
        if lock is None:
            lock = asyncio.Lock()
            loop_locks[path] = lock
        return lock
    
    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------
    
    async def read_all(self, collection: str) -> list[RawRecord]:
        """Read a collection, creating it empty on first access."""
        path = self.path_for(collection)
        if not path.exists():
            async with self._lock_for(path):
                await asyncio.to_thread(self._ensure_file, path)
        return await asyncio.to_thread(self._read_file, path)
    
    async def replace_all(self, collection: str, records: list[RawRecord]) -> None:
        """Atomically replace a collection."""
        path = self.path_for(collection)
        async with self._lock_for(path):
            await asyncio.to_thread(self._ensure_directory, path)
            await asyncio.to_thread(self._write_file, path, records)
    
    async def modify(self, collection: str, mutator: Mutator[T]) -> T:
        """Read, mutate and write a collection while holding its lock."""
        path = self.path_for(collection)
        async with self._lock_for(path):
            await asyncio.to_thread(self._ensure_file, path)
            records = await asyncio.to_thread(self._read_file, path)
            next_records, result = mutator(records)
            await asyncio.to_thread(self._write_file, path, next_records)
            return result
    
    # -------------------------------------------------------------------------
    # Blocking file operations (run in a worker thread)
    # -------------------------------------------------------------------------
    
    def _ensure_directory(self, path: Path) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create data directory {path.parent}: {e}")
    
    def _ensure_file(self, path: Path) -> None:
        """Create the directory and an empty collection if missing. Caller holds the lock."""
        self._ensure_directory(path)
        if not path.exists():
            self._write_file(path, [])
            self._logger.debug("collection_initialized", path=str(path))
    
    def _read_file(self, path: Path) -> list[RawRecord]:
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            self._logger.error("collection_corrupted", path=str(path), error=str(e))
            raise StorageCorruptionError(f"Collection {path.name} is not valid UTF-8")
        except OSError as e:
            raise StorageError(f"Failed to read {path.name}: {e}")
        
        try:
            parsed = json.loads(content, parse_float=Decimal)
        except json.JSONDecodeError as e:
            self._logger.error("collection_corrupted", path=str(path), error=str(e))
            raise StorageCorruptionError(f"Collection {path.name} is not valid JSON: {e}")
        
        if not isinstance(parsed, list) or not all(isinstance(item, dict) for item in parsed):
            self._logger.error("collection_corrupted", path=str(path), error="not a list of objects")
            raise StorageCorruptionError(f"Collection {path.name} is not a list of records")
        
        return parsed
    
    def _write_file(self, path: Path, records: list[RawRecord]) -> None:
        try:
            payload = json.dumps(
                records,
                indent=self._indent or None,
                ensure_ascii=False,
                default=_encode,
            )
        except (TypeError, ValueError) as e:
            raise StorageError(f"Failed to serialize {path.name}: {e}")
        
        temp_path = path.with_name(f"{path.name}.{uuid4().hex}.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            self._replace(temp_path, path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {path.name}: {e}")
        
        self._logger.debug("collection_written", path=str(path), record_count=len(records))
    
    def _replace(self, source: Path, target: Path) -> None:
        """Atomic rename, retried while another handle briefly holds the target."""
        for attempt in Retrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=0.05, max=1),
            retry=retry_if_exception_type(PermissionError),
            reraise=True,
        ):
            with attempt:
                os.replace(source, target)
