from typing import Any, Iterable

import requests
from loguru import logger

PRODUCT_LIST_PATH = "product_list"
PRODUCT_UPDATE_PATH = "product_update"
PRODUCT_ADD_PATH = "product_add"
WAREHOUSE_STOCK_PATH = "warehouse_stock"
SYNC_STOCK_PATH = "sync_stock"

SUCCESS_OPR_CODE = "0"


class MetakockaError(Exception):
    def __init__(self, path: str, response: dict[str, Any]):
        self.path = path
        self.response = response
        super().__init__(
            f"Metakocka call {path} failed with opr_code "
            f"{response.get('opr_code')}: {response.get('opr_desc')}")


class MetakockaClient:
    def __init__(
            self, base_url: str, secret_key: str, company_id: str,
            timeout: float = 30.0
    ):
        if not base_url.endswith("/"):
            base_url += "/"
        self._base_url = base_url
        self._secret_key = secret_key
        self._company_id = company_id
        self._timeout = timeout

    @property
    def company_id(self):
        return self._company_id

    def get_products(self, page_size: int = 100) -> list[dict]:
        logger.info(f"Getting the product list of company "
                    f"{self._company_id}")

        products = []
        offset = 0
        while True:
            response = self._post(PRODUCT_LIST_PATH, {
                "offset": offset,
                "limit": page_size,
                "return_category": "true"
            })
            page = response.get("product_list") or []
            products += page

            if len(page) < page_size:
                break
            offset += page_size

        logger.info(f"Retrieved {len(products)} products of company "
                    f"{self._company_id}")

        return products

    def update_product(self, product: dict[str, Any]) -> dict[str, Any]:
        return self._post(PRODUCT_UPDATE_PATH, product)

    def add_product(self, product: dict[str, Any]) -> dict[str, Any]:
        return self._post(PRODUCT_ADD_PATH, product)

    def get_warehouse_stock(self, warehouse_ids: Iterable[str]) -> list[dict]:
        warehouse_id_list = ",".join(warehouse_ids)
        logger.info(f"Getting the stock of warehouses {warehouse_id_list} of "
                    f"company {self._company_id}")

        response = self._post(
            WAREHOUSE_STOCK_PATH, {"wh_id_list": warehouse_id_list})
        return response.get("stock_list") or []

    def sync_stock(self, stock_list: list[dict]) -> dict[str, Any]:
        logger.info(f"Syncing {len(stock_list)} stock items to company "
                    f"{self._company_id}")
        return self._post(SYNC_STOCK_PATH, {"stock_list": stock_list})

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        body = {
            "secret_key": self._secret_key,
            "company_id": self._company_id,
            **payload
        }

        response = requests.post(
            self._base_url + path, json=body, timeout=self._timeout)

        try:
            response.raise_for_status()
        except requests.HTTPError as error:
            logger.error(f"Metakocka call {path} for company "
                         f"{self._company_id} failed with HTTP status "
                         f"{response.status_code}")
            raise error

        data = response.json()
        if str(data.get("opr_code")) != SUCCESS_OPR_CODE:
            raise MetakockaError(path, data)

        return data
