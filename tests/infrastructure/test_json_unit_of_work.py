"""Tests for JsonUnitOfWork commit / rollback semantics and locking."""

import os
import subprocess
import sys
from pathlib import Path

import pytest
from filelock import FileLock, Timeout

from catalog.application.add_product import AddProductHandler
from catalog.application.manage_components import AddComponentHandler
from catalog.domain.exceptions import ValidationError
from catalog.infrastructure.persistence.json_file import JsonTable
from catalog.infrastructure.persistence.json_unit_of_work import LOCK_FILE, JsonUnitOfWork
from tests.fakes import make_product

SRC_DIR = Path(__file__).resolve().parents[2] / "src"


class TestJsonUnitOfWork:

    def test_commit_keeps_writes(self, tmp_path):
        with JsonUnitOfWork(tmp_path) as uow:
            uow.products.save(make_product("a"))
            uow.commit()
        assert JsonUnitOfWork(tmp_path).products.get_by_id("a") is not None

    def test_leaving_without_commit_discards_writes(self, tmp_path):
        with JsonUnitOfWork(tmp_path) as uow:
            uow.products.save(make_product("a"))
        assert JsonUnitOfWork(tmp_path).products.get_by_id("a") is None

    def test_exception_rolls_back_every_table(self, tmp_path):
        uow = JsonUnitOfWork(tmp_path)
        with pytest.raises(RuntimeError):
            with uow:
                uow.products.save(make_product("a"))
                uow.order_items.table.persist([{"order_id": "x"}])
                raise RuntimeError("boom")
        fresh = JsonUnitOfWork(tmp_path)
        assert fresh.products.list_all() == []
        assert fresh.order_items.table.load() == []

    def test_handlers_against_json_store(self, tmp_path):
        AddProductHandler(JsonUnitOfWork(tmp_path)).handle("kit", "SKU-KIT", "Kit", "100")
        AddProductHandler(JsonUnitOfWork(tmp_path)).handle("bolt", "SKU-BOLT", "Bolt", "1")
        AddComponentHandler(JsonUnitOfWork(tmp_path)).handle("kit", "bolt", quantity=4)

        with pytest.raises(ValidationError, match="circular"):
            AddComponentHandler(JsonUnitOfWork(tmp_path)).handle("bolt", "kit")

        uow = JsonUnitOfWork(tmp_path)
        assert uow.components.get("kit", "bolt").quantity == 4
        assert uow.components.get("bolt", "kit") is None

    def test_lock_records_ids(self, tmp_path):
        with JsonUnitOfWork(tmp_path) as uow:
            uow.lock_products("b", "a", "b")
            assert uow.locked_ids == {"a", "b"}


class TestJsonUnitOfWorkLocking:

    def test_directory_lock_held_for_whole_transaction(self, tmp_path):
        other = FileLock(str(tmp_path / LOCK_FILE))
        with JsonUnitOfWork(tmp_path) as uow:
            uow.lock_product("widget")
            with pytest.raises(Timeout):
                other.acquire(timeout=0)
        other.acquire(timeout=0)
        other.release()

    def test_second_process_waits_for_first(self, tmp_path):
        script = (
            "import sys\n"
            "from pathlib import Path\n"
            "from filelock import Timeout\n"
            "from catalog.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork\n"
            "try:\n"
            "    with JsonUnitOfWork(Path(sys.argv[1]), lock_timeout=0.2):\n"
            "        pass\n"
            "except Timeout:\n"
            "    sys.exit(3)\n"
        )
        pythonpath = [str(SRC_DIR), os.environ.get("PYTHONPATH", "")]
        env = {**os.environ, "PYTHONPATH": os.pathsep.join(filter(None, pythonpath))}

        def run_other_process():
            return subprocess.run(
                [sys.executable, "-c", script, str(tmp_path)], env=env, timeout=60
            ).returncode

        with JsonUnitOfWork(tmp_path) as uow:
            uow.lock_product("widget")
            assert run_other_process() == 3
        assert run_other_process() == 0

    def test_failed_backup_releases_lock(self, tmp_path, monkeypatch):
        uow = JsonUnitOfWork(tmp_path)

        def unreadable(self):
            raise PermissionError("unreadable")

        monkeypatch.setattr(JsonTable, "read_bytes", unreadable)
        with pytest.raises(PermissionError):
            with uow:
                pass
        monkeypatch.undo()

        other = FileLock(str(tmp_path / LOCK_FILE))
        other.acquire(timeout=0)
        other.release()
        with JsonUnitOfWork(tmp_path) as again:
            again.products.save(make_product("a"))
            again.commit()
        assert JsonUnitOfWork(tmp_path).products.get_by_id("a") is not None
