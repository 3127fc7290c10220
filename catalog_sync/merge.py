from dataclasses import replace
from typing import Any, Sequence

from loguru import logger

from catalog_sync.comparator import are_equal
from catalog_sync.entities import (
    PRODUCT_FIELDS, UNSET, MergeResult, Product, Side)

EXEMPT_FIELDS = frozenset(
    ["count_code", "sales", "service", "purchasing", "code"])
DIFFED_FIELDS = tuple(
    name for name in PRODUCT_FIELDS if name not in EXEMPT_FIELDS)


def merge(
        system_a: Sequence[Product],
        system_b: Sequence[Product],
        authoritative: Side = Side.A,
        *,
        strict: bool = True,
        purchasing_from_subordinate: bool = False
) -> MergeResult:
    if authoritative is Side.A:
        result = _merge(
            system_a, system_b, strict, purchasing_from_subordinate)
    else:
        swapped = _merge(
            system_b, system_a, strict, purchasing_from_subordinate)
        result = MergeResult(
            changes_a=swapped.changes_b,
            changes_b=swapped.changes_a,
            new_in_a=swapped.new_in_b,
            new_in_b=swapped.new_in_a
        )

    logger.debug(f"Merge with system {authoritative} authoritative: "
                 f"{len(result.changes_a)} updates and {len(result.new_in_a)} "
                 f"new products for A, {len(result.changes_b)} updates and "
                 f"{len(result.new_in_b)} new products for B")
    return result


def _merge(
        leading: Sequence[Product],
        following: Sequence[Product],
        strict: bool,
        purchasing_from_subordinate: bool
) -> MergeResult:
    leading_by_code = {product.code: product for product in leading}
    following_by_code = {product.code: product for product in following}

    result = MergeResult()

    for leading_product in leading:
        following_product = following_by_code.get(leading_product.code)

        if following_product is None:
            result.new_in_b.append(_without_count_code(leading_product))
            continue

        leading_update, following_update = _diff(
            leading_product, following_product, strict)

        if following_update:
            result.changes_b.append(_build_update(
                following_update,
                count_code=following_product.count_code,
                service=following_product.service,
                purchasing=following_product.purchasing,
                sales=leading_product.sales,
                code=following_product.code
            ))

        if leading_update:
            purchasing_source = (following_product
                                 if purchasing_from_subordinate
                                 else leading_product)
            result.changes_a.append(_build_update(
                leading_update,
                count_code=leading_product.count_code,
                sales=leading_product.sales,
                service=leading_product.service,
                purchasing=purchasing_source.purchasing,
                code=leading_product.code
            ))

    for following_product in following:
        if following_product.code not in leading_by_code:
            result.new_in_a.append(_without_count_code(following_product))

    return result


def _diff(
        leading_product: Product,
        following_product: Product,
        strict: bool
) -> tuple[dict[str, Any], dict[str, Any]]:
    leading_update = {}
    following_update = {}

    for name in DIFFED_FIELDS:
        leading_value = getattr(leading_product, name)
        following_value = getattr(following_product, name)

        if leading_value is UNSET and following_value is UNSET:
            continue
        if are_equal(leading_value, following_value, strict):
            continue

        if leading_value is UNSET:
            leading_update[name] = following_value
        else:
            following_update[name] = leading_value

    return leading_update, following_update


def _build_update(changed: dict[str, Any], **carried: Any) -> Product:
    values = dict(changed)
    for name, value in carried.items():
        if value is not UNSET:
            values[name] = value
    return Product(**values)


def _without_count_code(product: Product) -> Product:
    return replace(product, count_code=UNSET)
