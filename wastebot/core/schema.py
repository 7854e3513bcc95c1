from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Union


class WasteType(str, enum.Enum):
    YARN_WASTE = "yarn_waste"
    COMBER_NOIL = "comber_noil"
    FLAT_STRIPS = "flat_strips"
    OTHER = "other"


WASTE_TYPE_LABELS = {
    WasteType.YARN_WASTE: "Yarn Waste",
    WasteType.COMBER_NOIL: "Comber Noil",
    WasteType.FLAT_STRIPS: "Flat Strips",
    WasteType.OTHER: "Other",
}


class ErrorKind(str, enum.Enum):
    INVALID_ENUM = "invalid_enum"
    REQUIRED_FIELD = "required_field"
    TOO_SHORT = "too_short"
    INVALID_NUMBER = "invalid_number"
    NOT_POSITIVE = "not_positive"


FIELD_NAMES = ("waste_type", "quantity", "unit_price", "location", "description")

LOCATION_MIN_LENGTH = 3


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str


FieldResult = Union[Ok, Err]
FieldError = Err


class ValidationError(Exception):
    """Raised when a set of raw field values does not form a valid record."""

    def __init__(self, errors: dict[str, FieldError]) -> None:
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid fields: {fields}")


@dataclass(frozen=True)
class InventoryItem:
    waste_type: WasteType
    quantity: float
    unit_price: float
    location: str
    description: str = ""

    def to_record(self) -> dict[str, Any]:
        """Payload for a single create request."""
        return {
            "waste_type": self.waste_type.value,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "location": self.location,
            # empty optional text is stored as NULL
            "description": self.description or None,
        }


# ── Field rules ─────────────────────────────────────────────────────────────

def _waste_type(raw: str) -> FieldResult:
    try:
        return Ok(WasteType(raw))
    except ValueError:
        allowed = ", ".join(w.value for w in WasteType)
        return Err(ErrorKind.INVALID_ENUM, f"Waste type must be one of: {allowed}")


def _positive_number(label: str) -> Callable[[str], FieldResult]:
    def rule(raw: str) -> FieldResult:
        if not raw:
            return Err(ErrorKind.REQUIRED_FIELD, f"{label} is required")
        try:
            value = float(raw)
        except ValueError:
            return Err(ErrorKind.INVALID_NUMBER, f"{label} must be a number")
        if not math.isfinite(value):
            return Err(ErrorKind.INVALID_NUMBER, f"{label} must be a number")
        if value <= 0:
            return Err(ErrorKind.NOT_POSITIVE, f"{label} must be greater than 0")
        return Ok(value)

    return rule


def _location(raw: str) -> FieldResult:
    if len(raw) < LOCATION_MIN_LENGTH:
        return Err(
            ErrorKind.TOO_SHORT,
            f"Location must be at least {LOCATION_MIN_LENGTH} characters",
        )
    return Ok(raw)


def _description(raw: str) -> FieldResult:
    return Ok(raw)


FIELD_RULES: dict[str, Callable[[str], FieldResult]] = {
    "waste_type": _waste_type,
    "quantity": _positive_number("Quantity"),
    "unit_price": _positive_number("Unit price"),
    "location": _location,
    "description": _description,
}


def validate_field(name: str, raw: str | None) -> FieldResult:
    rule = FIELD_RULES.get(name)
    if rule is None:
        raise ValueError(f"Unknown field: {name}")
    return rule(raw or "")


def validate_fields(raw: Mapping[str, str | None]) -> InventoryItem | dict[str, FieldError]:
    """Validate raw string values.

    Returns a typed ``InventoryItem`` when every field passes, otherwise a
    mapping of field name to the error for each failing field.
    """
    values: dict[str, Any] = {}
    errors: dict[str, FieldError] = {}
    for name in FIELD_NAMES:
        result = validate_field(name, raw.get(name))
        if isinstance(result, Err):
            errors[name] = result
        else:
            values[name] = result.value
    if errors:
        return errors
    return InventoryItem(**values)


def parse_inventory_item(raw: Mapping[str, str | None]) -> InventoryItem:
    result = validate_fields(raw)
    if isinstance(result, InventoryItem):
        return result
    raise ValidationError(result)
