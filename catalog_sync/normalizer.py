import math
from typing import Any, Iterable, Sequence

from loguru import logger

from catalog_sync.entities import PRODUCT_FIELDS, UNSET, Product, Unset

NUMERIC_FIELDS = frozenset(
    ["height", "width", "depth", "weight", "gross_weight"])

CATEGORY_TREE_FIELD = "category_tree_list"
CATEGORY_LABEL_FIELD = "tree_node_label"
CATEGORY_CHILDREN_FIELD = "tree_node_list"


def parse_number(value: Any) -> Any:
    if not isinstance(value, str):
        return value

    text = value.strip()
    if not text:
        return 0.0

    if "," in text:
        integer_part, _, fraction_part = text.partition(",")
        text = f"{integer_part.replace('.', '')}.{fraction_part}"

    try:
        return float(text)
    except ValueError:
        return math.nan


def flatten_categories(tree: Any) -> list[dict] | Unset:
    if not isinstance(tree, list):
        return UNSET

    categories = []
    for node in tree:
        categories += _flatten_category_node(node, [])
    return categories


def _flatten_category_node(node: Any, parent_labels: list[str]) -> list[dict]:
    if not isinstance(node, dict) or not node.get(CATEGORY_LABEL_FIELD):
        return []

    labels = parent_labels + [node[CATEGORY_LABEL_FIELD]]
    children = node.get(CATEGORY_CHILDREN_FIELD)

    if not isinstance(children, list) or len(children) == 0:
        path = labels[0] if len(labels) == 1 else labels
        return [{"category": path}]

    categories = []
    for child in children:
        categories += _flatten_category_node(child, labels)
    return categories


def normalize_product(raw: dict) -> Product:
    values = {}
    for name in PRODUCT_FIELDS:
        if name == "categories":
            value = flatten_categories(raw.get(CATEGORY_TREE_FIELD, UNSET))
        elif name in NUMERIC_FIELDS:
            value = parse_number(raw.get(name, UNSET))
        else:
            value = raw.get(name, UNSET)

        if value is not UNSET:
            values[name] = value

    return Product(**values)


def normalize_products(raws: Iterable[dict]) -> Sequence[Product]:
    products = []
    for raw in raws:
        if raw.get("code") is None:
            logger.warning(f"Skipping a product record without a code, "
                           f"count_code {raw.get('count_code')}")
            continue
        products.append(normalize_product(raw))

    logger.debug(f"Normalized {len(products)} product records")
    return products
