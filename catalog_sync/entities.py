from dataclasses import dataclass, field, fields
from enum import StrEnum
from typing import Any, Self


class Unset:
    _instance = None

    def __new__(cls) -> Self:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET = Unset()


class Side(StrEnum):
    A = "A"
    B = "B"

    @property
    def other(self) -> "Side":
        return Side.B if self is Side.A else Side.A


@dataclass(frozen=True, slots=True)
class Product:
    code: str
    count_code: str | Unset = UNSET
    barcode: Any = UNSET
    name: Any = UNSET
    unit: Any = UNSET
    service: Any = UNSET
    sales: Any = UNSET
    activated: Any = UNSET
    purchasing: Any = UNSET
    eshop_sync: Any = UNSET
    height: float | Unset = UNSET
    width: float | Unset = UNSET
    depth: float | Unset = UNSET
    weight: float | Unset = UNSET
    asset: Any = UNSET
    norm: Any = UNSET
    work: Any = UNSET
    categories: list[dict] | Unset = UNSET
    name_desc: Any = UNSET
    customs_fee: Any = UNSET
    country: Any = UNSET
    koli_package_amount: Any = UNSET
    gross_weight: float | Unset = UNSET

    def to_payload(self) -> dict[str, Any]:
        payload = {}
        for name in PRODUCT_FIELDS:
            value = getattr(self, name)
            if value is not UNSET:
                payload[name] = value
        return payload


PRODUCT_FIELDS = tuple(product_field.name for product_field in fields(Product))


@dataclass(slots=True)
class MergeResult:
    changes_a: list[Product] = field(default_factory=list)
    changes_b: list[Product] = field(default_factory=list)
    new_in_a: list[Product] = field(default_factory=list)
    new_in_b: list[Product] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.changes_a or self.changes_b or
                    self.new_in_a or self.new_in_b)


class ApplyPhase(StrEnum):
    UPDATE_A = "update-A"
    UPDATE_B = "update-B"
    ADD_TO_A = "add-to-A"
    ADD_TO_B = "add-to-B"

    @property
    def target(self) -> Side:
        return Side.A if self.value.endswith("A") else Side.B


@dataclass(slots=True)
class ApplyFailure:
    record: dict[str, Any]
    error: Any


@dataclass(slots=True)
class PhaseResult:
    phase: ApplyPhase
    attempted: int
    failures: list[ApplyFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return self.attempted - len(self.failures)
