"""
Value types, zero values and raw allocation.

Value types
- ValueType is an ABC: bool/int/float/complex/str/bytes/tuple/frozenset and Decimal
  are registered, frozen dataclasses are detected by __subclasshook__, and any
  class can opt in with @valuetype.
- A value type always supports zero-initialization, even without a declared
  initializer.

Zero values
- builtin scalars: the solid base __new__ without payload (0, 0.0, "", b"", ()).
- named tuples: every field at its zero.
- other value types: raw allocation, every annotated field at its zero.
- the zero of a field is the zero value of its annotation when that annotation is a
  value type, None otherwise (unions, generics, reference classes, cycles).

Raw allocation
- allocate(cls) calls the __new__ of the nearest class in the MRO implementing it
  in C, so no Python-level __new__ or __init__ runs.
- blank(cls) is allocate(cls) with every annotated field at its zero; alternate
  initializers and uninitialized reference instances start from it.
"""
import dataclasses
import decimal
import typing
from abc import ABC
from typing import ClassVar

from .faults import IncompatibleResultTypeError, trigger, describe_type
from .signatures import assignable
from .utils import Unset, hints


class ValueType(ABC):
    """
    Virtual base of every value type.

        >>> issubclass(int, ValueType)
        True
        >>> @dataclasses.dataclass(frozen=True)
        ... class Point:
        ...     x: int
        ...     y: int
        >>> issubclass(Point, ValueType)
        True
    """

    @classmethod
    def __subclasshook__(cls, subclass):
        if cls is ValueType and dataclasses.is_dataclass(subclass) and subclass.__dataclass_params__.frozen:
            return True
        return NotImplemented


for _scalar in (bool, int, float, complex, str, bytes, tuple, frozenset, decimal.Decimal):
    ValueType.register(_scalar)
del _scalar


def valuetype(cls, /):
    """
    Class decorator registering cls as a value type.
    """
    if not isinstance(cls, type):
        raise TypeError("@valuetype must be applied to a class")
    ValueType.register(cls)
    return cls


def isvaluetype(cls, /):
    return isinstance(cls, type) and issubclass(cls, ValueType)


def _solid(cls):
    # nearest class whose __new__ is implemented in C (Python-level ones are staticmethods)
    for base in cls.__mro__:
        if (new := vars(base).get("__new__")) is not None and not isinstance(new, staticmethod):
            return base
    return object


def allocate(cls, /):
    """
    Raw instance of cls: no initializer, no field assignment.
    """
    return _solid(cls).__new__(cls)


def _fields(cls):
    """
    annotated instance fields of cls (ClassVar and InitVar excluded).
    """
    fields = {}
    for name, hint in hints(cls).items():
        if hint is ClassVar or typing.get_origin(hint) is ClassVar:
            continue
        if isinstance(hint, dataclasses.InitVar) or hint is dataclasses.InitVar:
            continue
        if isinstance(hint, str) and hint.startswith(("ClassVar", "typing.ClassVar", "InitVar")):
            continue
        fields[name] = hint
    return fields


def _zero(annotation, seen):
    if not isvaluetype(annotation) or annotation in seen:
        return None
    seen = seen | {annotation}
    if issubclass(annotation, tuple) and hasattr(annotation, "_fields"):
        fields = _fields(annotation)
        return tuple.__new__(annotation, [_zero(fields.get(name), seen) for name in annotation._fields])
    instance = allocate(annotation)
    _clear(instance, seen)
    return instance


def _clear(instance, seen):
    for name, hint in _fields(type(instance)).items():
        object.__setattr__(instance, name, _zero(hint, seen))


def blank(cls, /):
    """
    Raw instance of cls with every annotated field at its zero: the state an
    alternate initializer body starts from.
    """
    instance = allocate(cls)
    _clear(instance, frozenset((cls,)))
    return instance


def zero_value(annotation, /):
    """
    Zero value of an annotation: a value type's zero, None for anything else.
    """
    return _zero(annotation, frozenset())


def create_uninitialized(cls, /, result=Unset):
    """
    Create an instance of cls without running any initializer.

    - value types: their zero value.
    - reference types: raw allocation with every annotated field at its zero,
      shadowing class-level defaults (field initializers never run).

    Parameters
    - cls: the class to allocate.
    - result: optional declared result type; must be assignable from cls.

    Errors
    - TypeError when cls is not a class.
    - IncompatibleResultTypeError when result is given and not assignable.
    """
    if not isinstance(cls, type):
        raise TypeError(f"create_uninitialized() argument must be a class, not {type(cls).__name__!r}")
    if result is not Unset and not assignable(result, cls):
        trigger(
            IncompatibleResultTypeError(f"{describe_type(cls)} is not assignable to {describe_type(result)}"),
            type=cls,
            hint="use the class itself, one of its bases, or object as the result type",
        )
    if isvaluetype(cls):
        return zero_value(cls)
    return blank(cls)


__all__ = (
    "ValueType",
    "valuetype",
    "isvaluetype",
    "allocate",
    "blank",
    "zero_value",
    "create_uninitialized",
)
