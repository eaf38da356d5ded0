"""JSON-file-backed UnitOfWork.

All transactions against one data directory are serialized by a lock
held from ``__enter__`` to ``__exit__``, which makes every
``lock_product`` call trivially satisfied. Two layers make up that
lock: a re-entrant thread lock for callers inside one process, and an
OS-level lock on ``.catalog.lock`` in the data directory for separate
processes (each CLI invocation is one). The three table files are
copied on entry and written back on rollback.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from filelock import FileLock

from catalog.domain.repository.unit_of_work import UnitOfWork
from catalog.infrastructure.persistence.json_component_repository import (
    JsonComponentRepository,
)
from catalog.infrastructure.persistence.json_file import JsonTable
from catalog.infrastructure.persistence.json_order_item_repository import (
    JsonOrderItemRepository,
)
from catalog.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)

logger = logging.getLogger(__name__)

LOCK_FILE = ".catalog.lock"

_registry_lock = threading.Lock()
_directory_locks: dict[Path, tuple[threading.RLock, FileLock]] = {}


def _locks_for(data_dir: Path) -> tuple[threading.RLock, FileLock]:
    key = data_dir.resolve()
    with _registry_lock:
        if key not in _directory_locks:
            key.mkdir(parents=True, exist_ok=True)
            _directory_locks[key] = (threading.RLock(), FileLock(str(key / LOCK_FILE)))
        return _directory_locks[key]


class JsonUnitOfWork(UnitOfWork):

    PRODUCTS_FILE = "products.json"
    COMPONENTS_FILE = "product_components.json"
    ORDER_ITEMS_FILE = "order_items.json"

    def __init__(self, data_dir: Path, lock_timeout: float = -1) -> None:
        self.products = JsonProductRepository(data_dir / self.PRODUCTS_FILE)
        self.components = JsonComponentRepository(data_dir / self.COMPONENTS_FILE)
        self.order_items = JsonOrderItemRepository(data_dir / self.ORDER_ITEMS_FILE)
        self._thread_lock, self._file_lock = _locks_for(data_dir)
        self._lock_timeout = lock_timeout
        self._backup: dict[str, bytes] | None = None
        self.locked_ids: set[str] = set()

    @property
    def _tables(self) -> dict[str, JsonTable]:
        return {
            "products": self.products.table,
            "components": self.components.table,
            "order_items": self.order_items.table,
        }

    def __enter__(self) -> JsonUnitOfWork:
        self._acquire()
        try:
            self._backup = {name: t.read_bytes() for name, t in self._tables.items()}
        except BaseException:
            self._release()
            raise
        self.locked_ids = set()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        finally:
            self._release()

    def lock_product(self, product_id: str) -> None:
        self.locked_ids.add(product_id)

    def commit(self) -> None:
        self._backup = None

    def rollback(self) -> None:
        if self._backup is None:
            return
        for name, table in self._tables.items():
            table.restore_bytes(self._backup[name])
        self._backup = None
        logger.debug("Rolled back uncommitted changes")

    # --- Locking --------------------------------------------------------------

    def _acquire(self) -> None:
        # A thread-lock timeout of -1 means wait forever, as for FileLock.
        if not self._thread_lock.acquire(timeout=self._lock_timeout):
            raise TimeoutError(f"Could not lock {self._file_lock.lock_file}")
        try:
            self._file_lock.acquire(timeout=self._lock_timeout)
        except BaseException:
            self._thread_lock.release()
            raise

    def _release(self) -> None:
        try:
            self._file_lock.release()
        finally:
            self._thread_lock.release()
