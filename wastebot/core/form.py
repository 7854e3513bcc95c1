from __future__ import annotations

from wastebot.core.schema import (
    FIELD_NAMES,
    Err,
    FieldError,
    WasteType,
    validate_field,
)


DEFAULT_VALUES: dict[str, str] = {
    "waste_type": WasteType.YARN_WASTE.value,
    "quantity": "",
    "unit_price": "",
    "location": "",
    "description": "",
}


class FormController:
    """Raw field values and their current errors for one submission form."""

    def __init__(self) -> None:
        self._values: dict[str, str] = dict(DEFAULT_VALUES)
        self._errors: dict[str, FieldError] = {}

    @property
    def values(self) -> dict[str, str]:
        return dict(self._values)

    @property
    def errors(self) -> dict[str, FieldError]:
        return dict(self._errors)

    def error_for(self, name: str) -> FieldError | None:
        return self._errors.get(name)

    def set_field(self, name: str, value: str | None) -> FieldError | None:
        """Update one field and re-validate it. Returns the field's error, if any."""
        if name not in DEFAULT_VALUES:
            raise ValueError(f"Unknown field: {name}")
        self._values[name] = value or ""
        result = validate_field(name, self._values[name])
        if isinstance(result, Err):
            self._errors[name] = result
            return result
        self._errors.pop(name, None)
        return None

    def validate(self) -> bool:
        self._errors = {}
        for name in FIELD_NAMES:
            result = validate_field(name, self._values[name])
            if isinstance(result, Err):
                self._errors[name] = result
        return not self._errors

    def set_errors(self, errors: dict[str, FieldError]) -> None:
        self._errors = dict(errors)

    def reset(self) -> None:
        self._values = dict(DEFAULT_VALUES)
        self._errors = {}

    def is_valid(self) -> bool:
        return not self._errors
