import importlib
from unittest.mock import MagicMock

import pytest

REQUIRED_ENVIRONMENT = {
    "LOGFILE": "catalog_sync.log",
    "SYSTEM_A_SECRET_KEY": "secret-a",
    "SYSTEM_A_COMPANY_ID": "1",
    "SYSTEM_B_SECRET_KEY": "secret-b",
    "SYSTEM_B_COMPANY_ID": "2",
}


@pytest.fixture
def main_module(monkeypatch):
    for name, value in REQUIRED_ENVIRONMENT.items():
        monkeypatch.setenv(name, value)
    return importlib.import_module("catalog_sync.main")


def test_stock_job_copies_system_b_warehouses_into_system_a(
        main_module, monkeypatch):
    monkeypatch.setattr(
        main_module.settings, "system_b_warehouse_ids", ["11", "12"])
    monkeypatch.setattr(main_module.settings, "system_a_warehouse_id", "22")
    sync_warehouse_stock = MagicMock()
    monkeypatch.setattr(
        main_module, "sync_warehouse_stock", sync_warehouse_stock)
    creaglobe, t4a = MagicMock(), MagicMock()

    main_module.sync_stock(creaglobe, t4a)

    sync_warehouse_stock.assert_called_once_with(
        t4a, creaglobe, ["11", "12"], "22")


def test_stock_job_requires_warehouse_ids(main_module, monkeypatch):
    monkeypatch.setattr(main_module.settings, "system_b_warehouse_ids", [])
    monkeypatch.setattr(main_module.settings, "system_a_warehouse_id", "22")
    sync_warehouse_stock = MagicMock()
    monkeypatch.setattr(
        main_module, "sync_warehouse_stock", sync_warehouse_stock)

    with pytest.raises(SystemExit):
        main_module.sync_stock(MagicMock(), MagicMock())

    sync_warehouse_stock.assert_not_called()
