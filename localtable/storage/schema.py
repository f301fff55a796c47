"""
LocalTable Schema Definition
============================
Declares a table's fields: name, type, default value, required-ness.

Validation never mutates the caller's mapping. Schema.apply() returns a
copy with declared defaults filled in, together with every error found;
all fields are checked before anything is reported.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Union

from localtable.storage.types import DEFAULT_TYPE, FieldType, get_validator, type_name


class _NoDefault:
    """Sentinel: the field declares no default (None is a valid default)."""

    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT: Any = _NoDefault()


@dataclass
class FieldSpec:
    """Definition of a single field in a table schema."""
    name: str
    type: Union[str, FieldType] = DEFAULT_TYPE.value
    default: Any = NO_DEFAULT
    required: bool = True

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"Field name must be a non-empty string, got {self.name!r}")
        # Unknown type names are kept; they are reported at validation time
        self.type = type_name(self.type)

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    def to_dict(self) -> dict:
        d: dict = {
            "name": self.name,
            "type": self.type,
            "required": self.required,
        }
        if self.has_default:
            d["default"] = self.default
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "FieldSpec":
        if "name" not in d:
            raise ValueError(f"Field declaration is missing 'name': {dict(d)!r}")
        return cls(
            name=d["name"],
            type=d.get("type") or DEFAULT_TYPE.value,
            default=d.get("default", NO_DEFAULT),
            required=d.get("required", True) is not False,
        )


FieldLike = Union[FieldSpec, Mapping[str, Any]]


@dataclass
class Schema:
    """
    Ordered list of field declarations with unique names.
    """
    fields: list[FieldSpec] = field(default_factory=list)

    def __post_init__(self):
        seen: set[str] = set()
        for spec in self.fields:
            if spec.name in seen:
                raise ValueError(f"Duplicate field name '{spec.name}' in schema")
            seen.add(spec.name)

    @classmethod
    def from_fields(cls, fields: Optional[Iterable[FieldLike]]) -> "Schema":
        """Build a schema from FieldSpec objects and/or plain dicts."""
        specs = []
        for f in fields or []:
            specs.append(f if isinstance(f, FieldSpec) else FieldSpec.from_dict(f))
        return cls(fields=specs)

    @property
    def field_count(self) -> int:
        return len(self.fields)

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"Field '{name}' not found in schema. "
                       f"Available: {self.field_names()}")

    # ─── Validation ─────────────────────────────────────────────────

    def apply(self, data: Mapping[str, Any]) -> tuple[dict, list[str]]:
        """
        Validate data against the schema.

        Returns (cleaned, errors): cleaned is a shallow copy of data with
        declared defaults injected for missing fields; errors lists every
        problem found (empty = valid). Undeclared keys are carried over.
        """
        cleaned = dict(data)
        errors: list[str] = []

        for spec in self.fields:
            if spec.name not in cleaned:
                if spec.has_default:
                    cleaned[spec.name] = copy.deepcopy(spec.default)
                elif spec.required:
                    errors.append(f"Missing data for {spec.name}")
                continue

            try:
                validator = get_validator(spec.type)
            except ValueError:
                errors.append(f"Invalid field type provided: {spec.type}")
                continue

            value = cleaned[spec.name]
            if validator is not None and not validator(value):
                errors.append(f"Invalid data type provided for '{spec.name}': {value!r}")

        return cleaned, errors

    def validate(self, data: Mapping[str, Any]) -> list[str]:
        """Return the list of validation errors for data (empty = valid)."""
        _, errors = self.apply(data)
        return errors

    def to_dict(self) -> dict:
        return {"fields": [f.to_dict() for f in self.fields]}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Schema":
        return cls.from_fields(d.get("fields", []))
