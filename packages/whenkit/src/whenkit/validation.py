"""Debounced remote validation of the condition being edited.

Every change to (condition, bucket, entry) restarts a quiet-period timer.
When the timer fires the coordinator either settles locally (missing
bucket/entry, absent condition) or issues one validation call. Calls are
numbered; a result is applied only if no later evaluation happened while
it was in flight.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Protocol

from whenkit.config import EditorConfig
from whenkit.values import Condition, ConditionValue

logger = logging.getLogger(__name__)


class StatusKind(Enum):
    MISSING_BUCKET = "missing_bucket"
    MISSING_ENTRY = "missing_entry"
    MISSING_BOTH = "missing_both"
    LOADING = "loading"
    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class ValidationStatus:
    kind: StatusKind
    reason: str = ""

    @classmethod
    def loading(cls) -> ValidationStatus:
        return cls(kind=StatusKind.LOADING)

    @classmethod
    def valid(cls) -> ValidationStatus:
        return cls(kind=StatusKind.VALID)

    @classmethod
    def invalid(cls, reason: str) -> ValidationStatus:
        return cls(kind=StatusKind.INVALID, reason=reason)

    @classmethod
    def for_prerequisites(cls, bucket: str | None, entry: str | None) -> ValidationStatus | None:
        """The Missing* status for absent bucket/entry, or None when both are set."""
        if not bucket and not entry:
            return cls(kind=StatusKind.MISSING_BOTH)
        if not bucket:
            return cls(kind=StatusKind.MISSING_BUCKET)
        if not entry:
            return cls(kind=StatusKind.MISSING_ENTRY)
        return None

    @property
    def is_missing(self) -> bool:
        return self.kind in (StatusKind.MISSING_BUCKET, StatusKind.MISSING_ENTRY, StatusKind.MISSING_BOTH)

    @property
    def message(self) -> str:
        if self.kind == StatusKind.MISSING_BOTH:
            return "Select bucket and entry to validate condition"
        if self.kind == StatusKind.MISSING_BUCKET:
            return "Select bucket to validate condition"
        if self.kind == StatusKind.MISSING_ENTRY:
            return "Select entry to validate condition"
        if self.kind == StatusKind.LOADING:
            return "Validating..."
        if self.kind == StatusKind.VALID:
            return "Valid condition"
        return self.reason or "Invalid condition"


class ConditionValidator(Protocol):
    """Remote validator; returns an object or mapping with ``valid``/``error``.

    Transport failures are raised.
    """

    async def validate_condition(self, bucket: str, entry: str, condition: Any) -> Any: ...


StatusListener = Callable[[ValidationStatus], Any]


def extract_error_message(exc: BaseException, default: str = "Validation failed") -> str:
    """Best available text for a failed validation call."""
    data = getattr(exc, "data", None)
    if isinstance(data, Mapping):
        message = data.get("message")
        if isinstance(message, str) and message:
            return message
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    text = str(exc)
    return text or default


def _read_result(result: Any) -> tuple[bool, str | None]:
    if isinstance(result, Mapping):
        return bool(result.get("valid")), result.get("error")
    return bool(getattr(result, "valid", False)), getattr(result, "error", None)


def _is_absent(condition: Condition | None) -> bool:
    return condition is None or (isinstance(condition, ConditionValue) and condition.is_null)


_UNSET: Any = object()


class ValidationCoordinator:
    """Drives one validation call per settled (condition, bucket, entry)."""

    def __init__(
        self,
        validator: ConditionValidator,
        *,
        bucket: str | None = None,
        entry: str | None = None,
        condition: Condition | None = None,
        config: EditorConfig | None = None,
        on_status: StatusListener | None = None,
    ) -> None:
        self._validator = validator
        self._config = config or EditorConfig()
        self._bucket = bucket
        self._entry = entry
        self._condition = condition
        self._status = ValidationStatus.for_prerequisites(bucket, entry) or ValidationStatus.valid()
        self._listeners: list[StatusListener] = [on_status] if on_status else []
        self._timer: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[None]] = set()
        self._sequence = 0
        self._closed = False

    @property
    def status(self) -> ValidationStatus:
        return self._status

    @property
    def sequence(self) -> int:
        """Number of the most recent evaluation."""
        return self._sequence

    @property
    def bucket(self) -> str | None:
        return self._bucket

    @property
    def entry(self) -> str | None:
        return self._entry

    @property
    def condition(self) -> Condition | None:
        return self._condition

    @property
    def pending(self) -> bool:
        return bool(self._pending_tasks())

    def on_status(self, callback: StatusListener) -> None:
        """Register a callback invoked on every status change."""
        self._listeners.append(callback)

    def update(
        self,
        *,
        condition: Condition | None = _UNSET,
        bucket: str | None = _UNSET,
        entry: str | None = _UNSET,
    ) -> None:
        """Record an edit and restart the debounce timer."""
        if self._closed:
            logger.debug("Ignoring update on closed coordinator")
            return
        if condition is not _UNSET:
            self._condition = condition
        if bucket is not _UNSET:
            self._bucket = bucket
        if entry is not _UNSET:
            self._entry = entry
        self._schedule()

    def _schedule(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.create_task(self._debounce(self._config.debounce_seconds))

    async def _debounce(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self._evaluate()

    def _evaluate(self) -> None:
        self._sequence += 1
        sequence = self._sequence

        missing = ValidationStatus.for_prerequisites(self._bucket, self._entry)
        if missing is not None:
            self._set_status(missing)
            return
        if _is_absent(self._condition):
            self._set_status(ValidationStatus.valid())
            return

        self._set_status(ValidationStatus.loading())
        logger.debug("Issuing validation #%d for %s/%s", sequence, self._bucket, self._entry)
        task = asyncio.get_running_loop().create_task(
            self._validate(sequence, self._bucket, self._entry, self._condition)
        )
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _validate(self, sequence: int, bucket: str, entry: str, condition: Condition) -> None:
        try:
            result = await self._validator.validate_condition(bucket, entry, condition)
        except Exception as e:
            if sequence != self._sequence:
                logger.debug("Discarding stale failure of validation #%d", sequence)
                return
            logger.warning("Validation call failed: %s", e)
            reason = extract_error_message(e, self._config.default_failure_message)
            self._set_status(ValidationStatus.invalid(reason))
            return

        if sequence != self._sequence:
            logger.debug("Discarding stale result of validation #%d", sequence)
            return
        valid, error = _read_result(result)
        if valid:
            self._set_status(ValidationStatus.valid())
        else:
            self._set_status(ValidationStatus.invalid(error or self._config.default_invalid_message))

    def _set_status(self, status: ValidationStatus) -> None:
        if status == self._status:
            return
        self._status = status
        for callback in self._listeners:
            try:
                callback(status)
            except Exception:
                logger.exception("Status listener failed")

    async def validate_now(self) -> ValidationStatus:
        """Evaluate immediately, skipping the quiet period."""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._evaluate()
        await self.drain()
        return self._status

    async def drain(self) -> None:
        """Wait until no timer or validation call is pending."""
        while True:
            pending = self._pending_tasks()
            if not pending:
                return
            await asyncio.wait(pending)

    async def close(self) -> None:
        """Cancel the pending timer and any in-flight call."""
        self._closed = True
        tasks = self._pending_tasks()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.wait(tasks)

    def _pending_tasks(self) -> list[asyncio.Task[None]]:
        tasks = [t for t in self._inflight if not t.done()]
        if self._timer is not None and not self._timer.done():
            tasks.append(self._timer)
        return tasks
