"""Schema validation for collection documents.

A ``Schema`` is an ordered list of field declarations. Each declaration is
either a type annotation (constraints go in ``Annotated[..., Field(...)]``)
or an ``(annotation, default)`` tuple. The schema compiles into two pydantic
models: a full one for inserts and replacements, and a partial one for
update payloads where every field is optional.

Validation is a single structural pass: every declared field is checked
against its own value and all failures are reported together.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, create_model
from pydantic import ValidationError as PydanticValidationError

from suricate.core.logging import get_logger
from suricate.domain.entities.error_event import SchemaIssue

logger = get_logger(__name__)

_MODEL_CONFIG = ConfigDict(
    extra="ignore",
    arbitrary_types_allowed=True,
    populate_by_name=False,
)


@dataclass(frozen=True)
class SchemaResult:
    """Outcome of validating one payload.

    Attributes:
        data: Validated values keyed by field name, or None on failure.
        issues: Field-level failures; empty on success.
    """

    data: dict[str, Any] | None = None
    issues: tuple[SchemaIssue, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.issues

    @property
    def message(self) -> str:
        """All issues joined into one human-readable line."""
        return "; ".join(str(issue) for issue in self.issues)


def _split_spec(spec: Any) -> tuple[Any, Any]:
    if isinstance(spec, tuple):
        if len(spec) != 2:
            raise ValueError(
                "Field spec tuples must be (annotation, default), "
                f"got {len(spec)} items"
            )
        return spec
    return spec, ...


def issues_from_pydantic(
    error: PydanticValidationError, prefix: tuple[str | int, ...] = ()
) -> tuple[SchemaIssue, ...]:
    """Convert a pydantic validation error into schema issues."""
    return tuple(
        SchemaIssue(
            path=prefix + tuple(detail["loc"]),
            message=detail["msg"],
            code=detail["type"],
        )
        for detail in error.errors(include_url=False)
    )


class Schema:
    """Declared fields of a collection.

    Args:
        fields: Mapping of field name to field spec, in declaration order.
        name: Name used for the generated pydantic models.

    Raises:
        ValueError: If no fields are declared or a spec is malformed.

    Example:
        schema = Schema({
            "name": str,
            "age": Annotated[int, Field(ge=0)],
            "tags": (list[str], []),
        })
        result = schema.validate({"name": "a", "age": 3})
        assert result.data == {"name": "a", "age": 3, "tags": []}
    """

    def __init__(self, fields: Mapping[str, Any], *, name: str = "Document") -> None:
        if not fields:
            raise ValueError("Schema requires at least one field")

        self._name = name
        self._fields: tuple[tuple[str, Any, Any], ...] = tuple(
            (field_name, *_split_spec(spec)) for field_name, spec in fields.items()
        )
        self._full_model = self._build_model(partial=False)
        self._partial_model = self._build_model(partial=True)

    def _build_model(self, partial: bool) -> type[BaseModel]:
        # Positional attribute names with aliases let any key be declared,
        # including ones pydantic treats as private such as ``_id``.
        definitions: dict[str, Any] = {}
        for index, (field_name, annotation, default) in enumerate(self._fields):
            definitions[f"field_{index}"] = (
                annotation,
                Field(None if partial else default, alias=field_name),
            )

        model_name = f"{self._name}Patch" if partial else self._name
        return create_model(model_name, __config__=_MODEL_CONFIG, **definitions)

    @property
    def name(self) -> str:
        return self._name

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(field_name for field_name, _, _ in self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self.field_names)

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self.field_names

    def __repr__(self) -> str:
        return f"Schema(name={self._name!r}, fields={list(self.field_names)!r})"

    def validate(self, payload: Any) -> SchemaResult:
        """Validate a complete document.

        Returns only declared fields, with defaults applied. Undeclared
        keys are dropped.
        """
        try:
            model = self._full_model.model_validate(payload)
        except PydanticValidationError as e:
            return SchemaResult(issues=issues_from_pydantic(e))
        return SchemaResult(data=model.model_dump(by_alias=True))

    def validate_partial(self, payload: Any) -> SchemaResult:
        """Validate the fields present in an update payload.

        Absent fields are not required. Dotted paths (``address.city``)
        rooted at a declared field are passed through unvalidated; other
        undeclared keys are dropped.
        """
        if not isinstance(payload, Mapping):
            return SchemaResult(
                issues=(
                    SchemaIssue(
                        path=(),
                        message=f"Expected a mapping, got {type(payload).__name__}",
                        code="model_type",
                    ),
                )
            )

        declared = set(self.field_names)
        direct: dict[str, Any] = {}
        nested: dict[str, Any] = {}
        dropped: list[str] = []
        for key, value in payload.items():
            if key in declared:
                direct[key] = value
            elif "." in key and key.split(".", 1)[0] in declared:
                nested[key] = value
            else:
                dropped.append(key)

        if dropped:
            logger.debug("Dropping undeclared update fields", schema=self._name, fields=dropped)

        try:
            model = self._partial_model.model_validate(direct)
        except PydanticValidationError as e:
            return SchemaResult(issues=issues_from_pydantic(e))
        return SchemaResult(data={**model.model_dump(by_alias=True, exclude_unset=True), **nested})
