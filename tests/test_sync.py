from unittest.mock import MagicMock

import pytest

from catalog_sync.entities import ApplyPhase, Side
from catalog_sync.metakocka import MetakockaError
from catalog_sync.sync import SyncSystem, run_product_sync, sync_warehouse_stock

CREAGLOBE_PRODUCTS = [
    {"count_code": "A-1", "code": "CH-1", "name": "Chair", "weight": "4,5",
     "sales": "true"},
    {"count_code": "A-2", "code": "TB-1", "name": "Table"},
]
T4A_PRODUCTS = [
    {"count_code": "B-1", "code": "CH-1", "name": "Stool", "sales": "false"},
    {"count_code": "B-9", "code": "LA-1", "name": "Lamp"},
]


def make_system(name, raw_products):
    client = MagicMock()
    client.get_products.return_value = raw_products
    client.update_product.return_value = {"opr_code": "0"}
    client.add_product.return_value = {"opr_code": "0"}
    return SyncSystem(name, client)


@pytest.fixture
def creaglobe():
    return make_system("Creaglobe", CREAGLOBE_PRODUCTS)


@pytest.fixture
def t4a():
    return make_system("T4A", T4A_PRODUCTS)


def test_run_product_sync_applies_every_phase(creaglobe, t4a):
    delta_files = MagicMock()
    mailer = MagicMock()

    phase_results = run_product_sync(
        creaglobe, t4a, delta_files, mailer, page_size=50)

    creaglobe.client.get_products.assert_called_once_with(50)
    delta_files.dump.assert_called_once()
    assert [result.phase for result in phase_results] == [
        ApplyPhase.UPDATE_A, ApplyPhase.UPDATE_B,
        ApplyPhase.ADD_TO_A, ApplyPhase.ADD_TO_B]

    t4a.client.update_product.assert_called_once_with({
        "code": "CH-1", "count_code": "B-1", "name": "Chair", "weight": 4.5,
        "sales": "true"
    })
    creaglobe.client.add_product.assert_called_once_with(
        {"code": "LA-1", "name": "Lamp"})
    t4a.client.add_product.assert_called_once_with(
        {"code": "TB-1", "name": "Table"})
    creaglobe.client.update_product.assert_not_called()
    mailer.send_report.assert_not_called()


def test_failures_are_reported_per_phase(creaglobe, t4a):
    t4a.client.update_product.side_effect = MetakockaError(
        "product_update", {"opr_code": "2", "opr_desc": "Locked"})
    mailer = MagicMock()

    phase_results = run_product_sync(creaglobe, t4a, mailer=mailer)

    update_b = phase_results[1]
    assert update_b.phase is ApplyPhase.UPDATE_B
    assert update_b.attempted == 1
    assert update_b.succeeded == 0
    mailer.send_report.assert_called_once_with(
        ApplyPhase.UPDATE_B, "Creaglobe", "T4A", update_b.failures)
    creaglobe.client.add_product.assert_called_once()
    t4a.client.add_product.assert_called_once()


def test_dry_run_does_not_apply(creaglobe, t4a):
    delta_files = MagicMock()

    phase_results = run_product_sync(creaglobe, t4a, delta_files, dry_run=True)

    assert phase_results == []
    delta_files.dump.assert_called_once()
    t4a.client.update_product.assert_not_called()
    t4a.client.add_product.assert_not_called()


def test_subordinate_authoritative(creaglobe, t4a):
    run_product_sync(creaglobe, t4a, authoritative=Side.B)

    creaglobe.client.update_product.assert_called_once_with({
        "code": "CH-1", "count_code": "A-1", "name": "Stool", "sales": "false"
    })
    t4a.client.update_product.assert_called_once_with({
        "code": "CH-1", "count_code": "B-1", "weight": 4.5, "sales": "false"
    })


def test_sync_warehouse_stock(creaglobe, t4a):
    creaglobe.client.get_warehouse_stock.return_value = [
        {"code": "CH-1", "amount": 3, "name": "Chair"}]
    t4a.client.sync_stock.return_value = {
        "opr_code": "0", "opr_desc": "Sync successful"}

    sync_warehouse_stock(creaglobe, t4a, ["11"], "22")

    creaglobe.client.get_warehouse_stock.assert_called_once_with(["11"])
    t4a.client.sync_stock.assert_called_once_with(
        [{"product_code": "CH-1", "amount": 3, "warehouse_id": "22"}])


def test_sync_warehouse_stock_rejected(creaglobe, t4a):
    creaglobe.client.get_warehouse_stock.return_value = []
    t4a.client.sync_stock.return_value = {"opr_code": "0", "opr_desc": "?"}

    with pytest.raises(MetakockaError):
        sync_warehouse_stock(creaglobe, t4a, ["11"], "22")
