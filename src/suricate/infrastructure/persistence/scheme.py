"""Schema-bound collection facade.

A ``Scheme`` wraps one named remote collection. Writes are validated
against the collection schema and stamped with ``createdAt`` /
``updatedAt`` before they are forwarded; reads and deletes pass straight
through. The collection is resolved from the connection on every call.

Failures before the driver is reached (no connection, invalid payload) are
reported to the error observer and then raised. Driver errors propagate
unchanged.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Callable, NoReturn

from suricate.core.exceptions import InitializationError, ValidationError
from suricate.core.logging import get_logger
from suricate.core.observers import ErrorObserver
from suricate.domain.entities.error_event import (
    ErrorEvent,
    InitializationErrorEvent,
    SchemaIssue,
    ValidationErrorEvent,
)
from suricate.domain.entities.options import (
    CountOptions,
    Filter,
    FindOneAndModifyOptions,
    FindOneOptions,
    FindOptions,
    Pipeline,
    Update,
    UpdateOptions,
)
from suricate.domain.services.schema_validator import Schema, SchemaResult
from suricate.domain.services.timestamp_service import (
    Clock,
    MixedUpdateError,
    Timestamper,
    split_update,
)
from suricate.infrastructure.app_services.mongodb import RemoteCollection, RemoteDatabase

logger = get_logger(__name__)

NOT_CONNECTED_MESSAGE = "Please establish a connection to the database first!"

# Operators whose operands are field assignments checked against the schema
_VALIDATED_OPERATORS = ("$set", "$setOnInsert")


class Scheme:
    """CRUD facade over one remote collection.

    Args:
        get_database: Returns the current database handle or None.
        error_observer: Notified before initialization and validation errors are raised.
        collection_name: Name of the remote collection.
        schema: Declared fields. Without a schema, payloads are not validated.
        clock: Source of the current time for timestamps.
    """

    def __init__(
        self,
        get_database: Callable[[], RemoteDatabase | None],
        error_observer: ErrorObserver,
        collection_name: str,
        schema: Schema | None = None,
        clock: Clock | None = None,
    ) -> None:
        if not collection_name:
            raise ValueError("Collection name is required")
        self._get_database = get_database
        self._observer = error_observer
        self._name = collection_name
        self._schema = schema
        self._timestamps = Timestamper(clock)

    @property
    def name(self) -> str:
        return self._name

    @property
    def schema(self) -> Schema | None:
        return self._schema

    def __repr__(self) -> str:
        return f"Scheme(collection={self._name!r}, schema={self._schema!r})"

    # ── FAILURE ROUTING ───────────────────────────────────

    def _fail(self, event: ErrorEvent) -> NoReturn:
        self._observer.on_error(event)
        if isinstance(event, ValidationErrorEvent):
            raise ValidationError(event.message, event.issues)
        raise InitializationError(event.message)

    def _fail_validation(self, issues: tuple[SchemaIssue, ...]) -> NoReturn:
        message = "; ".join(str(issue) for issue in issues)
        logger.warning(
            "Payload failed validation",
            collection=self._name,
            fields=[issue.field for issue in issues],
        )
        self._fail(ValidationErrorEvent(message=message, issues=issues, collection=self._name))

    def _collection(self) -> RemoteCollection:
        database = self._get_database()
        if database is None:
            self._fail(InitializationErrorEvent(message=NOT_CONNECTED_MESSAGE, collection=self._name))
        return database.collection(self._name)

    # ── VALIDATION ────────────────────────────────────────

    def validate(self, payload: Any) -> dict[str, Any]:
        """Validate a complete document and return the declared fields.

        Raises:
            ValidationError: After notifying the observer, if the payload is invalid.
        """
        if self._schema is None:
            return self._require_mapping(payload)
        result = self._schema.validate(payload)
        return self._unwrap(result)

    def validate_partial(self, payload: Any) -> dict[str, Any]:
        """Validate the fields present in an update payload."""
        if self._schema is None:
            return self._require_mapping(payload)
        result = self._schema.validate_partial(payload)
        return self._unwrap(result)

    def _unwrap(self, result: SchemaResult) -> dict[str, Any]:
        if not result.ok:
            self._fail_validation(result.issues)
        return result.data

    def _require_mapping(self, payload: Any) -> dict[str, Any]:
        if not isinstance(payload, Mapping):
            self._fail_validation(
                (SchemaIssue(path=(), message=f"Expected a mapping, got {type(payload).__name__}", code="model_type"),)
            )
        return dict(payload)

    def _prepare_update(self, update: Update, upsert: bool) -> dict[str, Any]:
        update = self._require_mapping(update)
        try:
            operators = split_update(update)
        except MixedUpdateError as e:
            self._fail_validation((SchemaIssue(path=(), message=str(e), code="mixed_update"),))

        for operator in _VALIDATED_OPERATORS:
            if operator in operators:
                operators[operator] = self.validate_partial(operators[operator])

        return self._timestamps.stamp_update(operators, upsert=upsert)

    # ── READ ──────────────────────────────────────────────

    async def count(self, filter: Filter | None = None, options: CountOptions | None = None) -> int:
        return await self._collection().count(filter, options)

    async def find(self, filter: Filter | None = None, options: FindOptions | None = None) -> list[dict[str, Any]]:
        return await self._collection().find(filter, options)

    async def find_one(
        self, filter: Filter | None = None, options: FindOneOptions | None = None
    ) -> dict[str, Any] | None:
        return await self._collection().find_one(filter, options)

    async def aggregate(self, pipeline: Pipeline) -> list[dict[str, Any]]:
        return await self._collection().aggregate(pipeline)

    # ── CREATE ────────────────────────────────────────────

    async def insert_one(self, document: Mapping[str, Any]) -> dict[str, Any]:
        """Validate, stamp and insert one document.

        Both timestamps are set to the same call-time instant.
        """
        collection = self._collection()
        stamped = self._timestamps.stamp_new(self.validate(document))
        logger.debug("insert_one", collection=self._name)
        return await collection.insert_one(stamped)

    async def insert_many(self, documents: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
        """Validate every document, then insert them as one batch.

        If any document is invalid nothing is written. The batch shares a
        single timestamp.
        """
        collection = self._collection()
        documents = list(documents)

        validated: list[dict[str, Any]] = []
        issues: list[SchemaIssue] = []
        for index, document in enumerate(documents):
            if self._schema is None:
                validated.append(self._require_mapping(document))
                continue
            result = self._schema.validate(document)
            if result.ok:
                validated.append(result.data)
            else:
                issues.extend(
                    SchemaIssue(path=(index, *issue.path), message=issue.message, code=issue.code)
                    for issue in result.issues
                )
        if issues:
            self._fail_validation(tuple(issues))

        timestamp = self._timestamps.now()
        stamped = [self._timestamps.stamp_new(document, timestamp) for document in validated]
        logger.debug("insert_many", collection=self._name, count=len(stamped))
        return await collection.insert_many(stamped)

    # ── UPDATE ────────────────────────────────────────────

    async def update_one(
        self, filter: Filter, update: Update, options: UpdateOptions | None = None
    ) -> dict[str, Any]:
        """Validate the update's assignments and refresh ``updatedAt``."""
        collection = self._collection()
        stamped = self._prepare_update(update, upsert=bool((options or {}).get("upsert")))
        logger.debug("update_one", collection=self._name)
        return await collection.update_one(filter, stamped, options)

    async def update_many(
        self, filter: Filter, update: Update, options: UpdateOptions | None = None
    ) -> dict[str, Any]:
        collection = self._collection()
        stamped = self._prepare_update(update, upsert=bool((options or {}).get("upsert")))
        logger.debug("update_many", collection=self._name)
        return await collection.update_many(filter, stamped, options)

    async def find_one_and_update(
        self, filter: Filter, update: Update, options: FindOneAndModifyOptions | None = None
    ) -> dict[str, Any] | None:
        collection = self._collection()
        stamped = self._prepare_update(update, upsert=bool((options or {}).get("upsert")))
        logger.debug("find_one_and_update", collection=self._name)
        return await collection.find_one_and_update(filter, stamped, options)

    async def find_one_and_replace(
        self,
        filter: Filter,
        replacement: Mapping[str, Any],
        options: FindOneAndModifyOptions | None = None,
    ) -> dict[str, Any] | None:
        """Replace a whole document; the replacement gets fresh timestamps."""
        collection = self._collection()
        stamped = self._timestamps.stamp_new(self.validate(replacement))
        logger.debug("find_one_and_replace", collection=self._name)
        return await collection.find_one_and_replace(filter, stamped, options)

    # ── DELETE ────────────────────────────────────────────

    async def delete_one(self, filter: Filter) -> dict[str, Any]:
        return await self._collection().delete_one(filter)

    async def delete_many(self, filter: Filter) -> dict[str, Any]:
        return await self._collection().delete_many(filter)

    async def find_one_and_delete(
        self, filter: Filter | None = None, options: FindOneOptions | None = None
    ) -> dict[str, Any] | None:
        return await self._collection().find_one_and_delete(filter, options)
