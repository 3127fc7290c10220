import argparse
import sys

from loguru import logger

from catalog_sync.config import settings
from catalog_sync.metakocka import MetakockaClient
from catalog_sync.report import SyncReportMailer
from catalog_sync.storage import DeltaFileManager
from catalog_sync.sync import SyncSystem, run_product_sync, sync_warehouse_stock


def get_system(name: str, secret_key: str, company_id: str) -> SyncSystem:
    client = MetakockaClient(
        settings.metakocka_base_url, secret_key, company_id,
        timeout=settings.request_timeout
    )
    return SyncSystem(name, client)


def get_report_mailer() -> SyncReportMailer | None:
    if not (settings.smtp_host and settings.report_email_to):
        return None

    return SyncReportMailer(
        settings.smtp_host,
        settings.smtp_port,
        settings.smtp_username,
        settings.smtp_password,
        sender=settings.report_email_from or settings.smtp_username or "",
        recipient=settings.report_email_to
    )


def sync_products(system_a: SyncSystem, system_b: SyncSystem, dry_run: bool):
    phase_results = run_product_sync(
        system_a,
        system_b,
        DeltaFileManager(settings.delta_directory),
        get_report_mailer(),
        authoritative=settings.authoritative_system,
        strict=settings.strict_sequence_matching,
        purchasing_from_subordinate=settings.legacy_purchasing_carry_through,
        page_size=settings.products_page_size,
        dry_run=dry_run
    )

    for phase_result in phase_results:
        logger.info(f"Phase {phase_result.phase}: {phase_result.succeeded} of "
                    f"{phase_result.attempted} products applied")


def sync_stock(system_a: SyncSystem, system_b: SyncSystem):
    if not (settings.system_b_warehouse_ids and
            settings.system_a_warehouse_id):
        logger.error("Warehouse ids of both systems are required to sync "
                     "stock")
        sys.exit(1)

    sync_warehouse_stock(
        system_b, system_a,
        settings.system_b_warehouse_ids,
        settings.system_a_warehouse_id
    )


def main():
    parser = argparse.ArgumentParser(
        description="Synchronize products between two Metakocka companies")
    parser.add_argument(
        "job", nargs="?", choices=["products", "stock"], default="products")
    parser.add_argument(
        "--dry-run", action="store_true",
        help="write delta files without applying them")
    args = parser.parse_args()

    logger.add(settings.logfile, rotation="10 MB", encoding="utf-8")

    system_a = get_system(
        settings.system_a_name, settings.system_a_secret_key,
        settings.system_a_company_id)
    system_b = get_system(
        settings.system_b_name, settings.system_b_secret_key,
        settings.system_b_company_id)

    if args.job == "stock":
        sync_stock(system_a, system_b)
    else:
        sync_products(system_a, system_b, args.dry_run)


if __name__ == '__main__':
    main()
