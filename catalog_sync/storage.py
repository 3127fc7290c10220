import json
import math
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

from loguru import logger

from catalog_sync.entities import MergeResult, Product

CHANGES_A_FILENAME = "changesA.json"
CHANGES_B_FILENAME = "changesB.json"
NEW_IN_A_FILENAME = "newInA.json"
NEW_IN_B_FILENAME = "newInB.json"


class DeltaFileManager:
    def __init__(
            self, save_to: Path | str,
            dirname_format: str = "delta_{datetime}"
    ):
        self._directory = None
        self._save_to = Path(save_to)
        self._dirname_format = dirname_format

    @property
    def directory(self):
        return self._directory

    def dump(self, result: MergeResult) -> Path:
        current_datetime = datetime.now().strftime("%Y%m%d_%H%M%S")
        dirname = self._dirname_format.format(datetime=current_datetime)
        self._directory = self._save_to / dirname
        self._directory.mkdir(parents=True, exist_ok=True)

        logger.info(f"Start writing delta files to {self._directory}")

        self._write_file(CHANGES_A_FILENAME, result.changes_a)
        self._write_file(CHANGES_B_FILENAME, result.changes_b)
        self._write_file(NEW_IN_A_FILENAME, result.new_in_a)
        self._write_file(NEW_IN_B_FILENAME, result.new_in_b)

        logger.info(f"Delta files were written to {self._directory}")

        return self._directory

    def _write_file(self, filename: str, products: Sequence[Product]):
        path = self._directory / filename
        payloads = [_without_non_finite(product.to_payload())
                    for product in products]
        with path.open(mode="w", encoding="utf-8") as file:
            json.dump(payloads, file, indent=2, ensure_ascii=False,
                      allow_nan=False)


def _without_non_finite(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _without_non_finite(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_without_non_finite(item) for item in value]
    return value
