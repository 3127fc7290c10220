from typing import Any, Callable, Sequence

import requests
from loguru import logger

from catalog_sync.entities import ApplyFailure, Product
from catalog_sync.metakocka import MetakockaClient, MetakockaError


class DeltaApplier:
    def __init__(self, client: MetakockaClient, system_name: str):
        self._client = client
        self._system_name = system_name

    def update_products(
            self, products: Sequence[Product]) -> list[ApplyFailure]:
        logger.info(f"Updating {len(products)} products in "
                    f"{self._system_name}")
        return self._apply(products, self._client.update_product, "update")

    def add_products(self, products: Sequence[Product]) -> list[ApplyFailure]:
        logger.info(f"Adding {len(products)} products to {self._system_name}")
        return self._apply(products, self._client.add_product, "add")

    def _apply(
            self,
            products: Sequence[Product],
            send: Callable[[dict[str, Any]], dict[str, Any]],
            action: str
    ) -> list[ApplyFailure]:
        failures = []

        for product in products:
            payload = product.to_payload()
            try:
                send(payload)
            except MetakockaError as error:
                logger.error(f"Failed to {action} product {product.code} in "
                             f"{self._system_name}: {error}")
                failures.append(ApplyFailure(payload, error.response))
            except (requests.RequestException, ValueError) as error:
                logger.error(f"Failed to {action} product {product.code} in "
                             f"{self._system_name}: {error}")
                failures.append(ApplyFailure(payload, str(error)))

        logger.info(f"Finished to {action} products in {self._system_name}: "
                    f"{len(products) - len(failures)} succeeded, "
                    f"{len(failures)} failed")

        return failures
