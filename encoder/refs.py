"""
Boxed values and the unwrapping step applied before dispatch.
"""
import weakref
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Ref(Generic[T]):
    """An explicit box around a value that may be absent.

    ``Ref(None)`` behaves like a nil reference: the field holding it is
    skipped. Boxes may be nested, ``Ref(Ref(x))`` unwraps to ``x``.
    """

    value: Optional[T] = None


def is_reference(value: Any) -> bool:
    return isinstance(value, (Ref, weakref.ReferenceType))


def unwrap(value: Any) -> Any:
    """Strip every reference layer around ``value``.

    Returns None when a layer holds nothing (including a dead weak
    reference).
    """
    while value is not None and is_reference(value):
        if isinstance(value, Ref):
            value = value.value
        else:
            value = value()
    return value
