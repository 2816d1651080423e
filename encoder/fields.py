"""
Field configuration for aggregates.

An aggregate is either a dataclass instance whose fields carry a
``multipart`` entry in their metadata, or an instance of a class that
declares ``__multipart_fields__`` (attribute name -> form field name).
The configuration is resolved once per class into a tuple of ``FieldPlan``.
"""
import dataclasses
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Iterator, Optional, Tuple

MULTIPART_KEY = "multipart"
JSON_KEY = "json"
EXCLUDE = "-"


@dataclass(frozen=True)
class FieldPlan:
    attribute: str
    name: str


def multipart_field(name: str, json: Optional[str] = None, **kwargs: Any) -> Any:
    """
    Declare a dataclass field with its form field name.

    Args:
        name: Form field name, or "-" to exclude the field from the form
        json: Name used when the owning aggregate is serialized to JSON
        **kwargs: Passed through to ``dataclasses.field``

    Returns:
        A ``dataclasses.field`` carrying the names in its metadata
    """
    metadata: Dict[str, Any] = dict(kwargs.pop("metadata", None) or {})
    metadata[MULTIPART_KEY] = name
    if json is not None:
        metadata[JSON_KEY] = json
    return dataclasses.field(metadata=metadata, **kwargs)


def is_aggregate(value: Any) -> bool:
    if isinstance(value, type):
        return False
    return dataclasses.is_dataclass(value) or hasattr(type(value), "__multipart_fields__")


def _is_public(attribute: str) -> bool:
    return not attribute.startswith("_")


@lru_cache(maxsize=None)
def field_plan(cls: type) -> Tuple[FieldPlan, ...]:
    """Resolve the form fields of an aggregate class, in declaration order."""
    declared = getattr(cls, "__multipart_fields__", None)
    if declared is not None:
        entries = list(declared.items())
    else:
        entries = [
            (f.name, f.metadata.get(MULTIPART_KEY, ""))
            for f in dataclasses.fields(cls)
        ]

    plans = []
    for attribute, name in entries:
        if not _is_public(attribute):
            continue
        if not name or name == EXCLUDE:
            continue
        plans.append(FieldPlan(attribute, name))
    return tuple(plans)


def iter_form_fields(value: Any) -> Iterator[Tuple[str, Any]]:
    """Yield (form field name, value) for every configured field."""
    for plan in field_plan(type(value)):
        yield plan.name, getattr(value, plan.attribute)


def iter_json_fields(value: Any) -> Iterator[Tuple[str, Any]]:
    """Yield (JSON name, value) pairs used when serializing an aggregate."""
    if not dataclasses.is_dataclass(value):
        # Plain classes serialize their public instance attributes
        for attribute, item in vars(value).items():
            if _is_public(attribute):
                yield attribute, item
        return

    for f in dataclasses.fields(value):
        name = f.metadata.get(JSON_KEY, f.name)
        if name == EXCLUDE or not _is_public(f.name):
            continue
        yield name, getattr(value, f.name)
