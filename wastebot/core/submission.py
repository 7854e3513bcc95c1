from __future__ import annotations

import enum
import logging
from collections.abc import Awaitable, Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Protocol

from wastebot.core.form import FormController
from wastebot.core.schema import FieldError, ValidationError, parse_inventory_item


INVENTORY_TABLE = "inventory_items"


class SubmissionError(Exception):
    """The data store rejected a create request or could not be reached."""


class NotificationKind(str, enum.Enum):
    SUCCESS = "success"
    DESTRUCTIVE = "destructive"


class SubmitOutcome(str, enum.Enum):
    SUBMITTED = "submitted"
    FAILED = "failed"
    INVALID = "invalid"
    BUSY = "busy"


class RecordStore(Protocol):
    async def insert(self, table: str, records: list[dict[str, Any]]) -> None: ...


class Notifier(Protocol):
    async def notify(self, kind: NotificationKind, title: str, description: str) -> None: ...


@dataclass(frozen=True)
class SubmitResult:
    outcome: SubmitOutcome
    errors: dict[str, FieldError] = field(default_factory=dict)


StartHook = Callable[[], Awaitable[None]]


class SubmissionHandler:
    def __init__(self, store: RecordStore, notifier: Notifier) -> None:
        self.store = store
        self.notifier = notifier
        self._submitting = False

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @contextmanager
    def _hold_flag(self) -> Iterator[None]:
        self._submitting = True
        try:
            yield
        finally:
            self._submitting = False

    async def submit(self, values: Mapping[str, str], on_start: StartHook | None = None) -> SubmitResult:
        """Send one create request for ``values``.

        ``on_start`` is awaited once the submitting flag is held, before the
        request goes out.
        """
        # Flag check and set must not be separated by an await.
        if self._submitting:
            return SubmitResult(SubmitOutcome.BUSY)
        try:
            item = parse_inventory_item(values)
        except ValidationError as e:
            return SubmitResult(SubmitOutcome.INVALID, e.errors)

        with self._hold_flag():
            if on_start is not None:
                await on_start()
            try:
                await self.store.insert(INVENTORY_TABLE, [item.to_record()])
            except Exception as e:
                logging.error(f"Error submitting inventory: {e}")
                await self.notifier.notify(
                    NotificationKind.DESTRUCTIVE,
                    "Error",
                    "Failed to submit inventory. Please try again.",
                )
                return SubmitResult(SubmitOutcome.FAILED)

            logging.info(
                f"Inventory submitted: {item.waste_type.value} "
                f"{item.quantity} kg @ {item.unit_price}/kg, {item.location}"
            )
            await self.notifier.notify(
                NotificationKind.SUCCESS,
                "Success!",
                "Your inventory has been submitted for review.",
            )
            return SubmitResult(SubmitOutcome.SUBMITTED)


class InventorySubmissionForm:
    """A form instance: field state plus its own submission guard."""

    def __init__(self, store: RecordStore, notifier: Notifier) -> None:
        self.controller = FormController()
        self.handler = SubmissionHandler(store, notifier)

    @property
    def is_submitting(self) -> bool:
        return self.handler.is_submitting

    async def submit(self, on_start: StartHook | None = None) -> SubmitOutcome:
        result = await self.handler.submit(self.controller.values, on_start=on_start)
        if result.outcome is SubmitOutcome.SUBMITTED:
            self.controller.reset()
        elif result.outcome is SubmitOutcome.INVALID:
            self.controller.set_errors(result.errors)
        return result.outcome
