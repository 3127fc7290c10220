from dataclasses import dataclass
from typing import Any, Sequence

from loguru import logger

from catalog_sync.applier import DeltaApplier
from catalog_sync.entities import (
    ApplyPhase, MergeResult, PhaseResult, Product, Side)
from catalog_sync.merge import merge
from catalog_sync.metakocka import MetakockaClient, MetakockaError
from catalog_sync.normalizer import normalize_products
from catalog_sync.report import SyncReportMailer
from catalog_sync.storage import DeltaFileManager

SYNC_SUCCESSFUL_DESCRIPTION = "Sync successful"


@dataclass(slots=True)
class SyncSystem:
    name: str
    client: MetakockaClient


def fetch_catalog(system: SyncSystem, page_size: int = 100) -> Sequence[Product]:
    logger.info(f"Fetching the product catalog of {system.name}")
    raw_products = system.client.get_products(page_size)
    return normalize_products(raw_products)


def run_product_sync(
        system_a: SyncSystem,
        system_b: SyncSystem,
        delta_files: DeltaFileManager | None = None,
        mailer: SyncReportMailer | None = None,
        *,
        authoritative: Side = Side.A,
        strict: bool = True,
        purchasing_from_subordinate: bool = False,
        page_size: int = 100,
        dry_run: bool = False
) -> list[PhaseResult]:
    catalog_a = fetch_catalog(system_a, page_size)
    catalog_b = fetch_catalog(system_b, page_size)

    result = merge(
        catalog_a, catalog_b, authoritative,
        strict=strict,
        purchasing_from_subordinate=purchasing_from_subordinate
    )

    if delta_files is not None:
        delta_files.dump(result)

    if dry_run:
        logger.info("Dry run, the merge result is not applied")
        return []

    if result.is_empty():
        logger.info(f"{system_a.name} and {system_b.name} are in sync")
        return []

    systems = {Side.A: system_a, Side.B: system_b}
    phase_results = []
    for phase, products in _phases(result):
        target = systems[phase.target]
        source = systems[phase.target.other]
        applier = DeltaApplier(target.client, target.name)

        if phase in (ApplyPhase.UPDATE_A, ApplyPhase.UPDATE_B):
            failures = applier.update_products(products)
        else:
            failures = applier.add_products(products)

        phase_results.append(PhaseResult(phase, len(products), failures))

        if failures:
            _report_failures(mailer, phase, source.name, target.name, failures)

    return phase_results


def _phases(result: MergeResult) -> list[tuple[ApplyPhase, list[Product]]]:
    return [
        (ApplyPhase.UPDATE_A, result.changes_a),
        (ApplyPhase.UPDATE_B, result.changes_b),
        (ApplyPhase.ADD_TO_A, result.new_in_a),
        (ApplyPhase.ADD_TO_B, result.new_in_b),
    ]


def _report_failures(mailer, phase, from_system, to_system, failures):
    if mailer is None:
        logger.warning(f"Phase {phase} had {len(failures)} failures and no "
                       f"report recipient is configured")
        return
    mailer.send_report(phase, from_system, to_system, failures)


def sync_warehouse_stock(
        source: SyncSystem,
        target: SyncSystem,
        source_warehouse_ids: Sequence[str],
        target_warehouse_id: str
) -> dict[str, Any]:
    stock_list = source.client.get_warehouse_stock(source_warehouse_ids)
    prepared_stock_list = [
        {
            "product_code": item["code"],
            "amount": item["amount"],
            "warehouse_id": target_warehouse_id
        }
        for item in stock_list
    ]

    response = target.client.sync_stock(prepared_stock_list)
    if response.get("opr_desc") != SYNC_SUCCESSFUL_DESCRIPTION:
        raise MetakockaError("sync_stock", response)

    logger.info(f"Synced {len(prepared_stock_list)} stock items from "
                f"{source.name} to {target.name}")

    return response
