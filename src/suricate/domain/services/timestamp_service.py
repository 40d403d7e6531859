"""Timestamp merging for document writes.

Inserts and replacements receive ``createdAt`` and ``updatedAt`` set to the
same instant. Updates only refresh ``updatedAt`` through ``$set``; when an
update may insert (upsert), ``createdAt`` is written through
``$setOnInsert`` so it is still set exactly once.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable

from suricate.domain.entities.document import (
    CREATED_AT,
    UPDATED_AT,
    is_reserved_path,
    strip_reserved,
)

Clock = Callable[[], datetime]


class MixedUpdateError(ValueError):
    """Raised when an update mixes ``$`` operators with plain fields."""

    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with milliseconds and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def split_update(update: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize an update into operator form.

    A payload made only of plain field assignments is wrapped in ``$set``.

    Raises:
        MixedUpdateError: If operators and plain fields are combined.
    """
    operators = [key for key in update if key.startswith("$")]
    if not operators:
        return {"$set": dict(update)} if update else {}
    if len(operators) != len(update):
        plain = sorted(key for key in update if not key.startswith("$"))
        raise MixedUpdateError(
            f"Update mixes operators with plain fields: {', '.join(plain)}"
        )
    return {key: value for key, value in update.items()}


class Timestamper:
    """Apply the timestamp policy to write payloads.

    Args:
        clock: Returns the current time. Defaults to UTC now.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or utc_now

    def now(self) -> str:
        return to_iso(self._clock())

    def stamp_new(self, document: Mapping[str, Any], timestamp: str | None = None) -> dict[str, Any]:
        """Return a copy of a new document with both timestamps set."""
        timestamp = timestamp or self.now()
        return {
            **strip_reserved(dict(document)),
            CREATED_AT: timestamp,
            UPDATED_AT: timestamp,
        }

    def stamp_update(
        self,
        operators: Mapping[str, Any],
        timestamp: str | None = None,
        upsert: bool = False,
    ) -> dict[str, Any]:
        """Return a copy of an operator update with timestamps merged in.

        Caller supplied timestamp paths are removed from every operator, and
        ``$rename`` entries targeting them are dropped, so ``createdAt`` is
        never overwritten and ``updatedAt`` has one writer.
        """
        timestamp = timestamp or self.now()
        stamped: dict[str, Any] = {}
        for operator, operand in operators.items():
            if isinstance(operand, Mapping):
                operand = strip_reserved(dict(operand))
                if operator == "$rename":
                    operand = {
                        source: target
                        for source, target in operand.items()
                        if not (isinstance(target, str) and is_reserved_path(target))
                    }
                if not operand:
                    continue
            stamped[operator] = operand

        stamped["$set"] = {**stamped.get("$set", {}), UPDATED_AT: timestamp}
        if upsert:
            stamped["$setOnInsert"] = {**stamped.get("$setOnInsert", {}), CREATED_AT: timestamp}
        return stamped
