"""
Call signatures requested from the engine.

A Signature is the shape of the callable a caller wants back: an ordered tuple of
parameter annotations plus a result annotation. Together with the constructed class
it forms the activation cache key, so it must be hashable and compare by the
identity of the classes it names.

Python has no by-reference or output parameters. Ref[T] and Out[T] stand for them
so that callers porting signatures from such languages get a precise
UnsupportedParameterModeError instead of a silent mismatch.
"""
import collections.abc
import types
import typing
from typing import Any, Generic, NamedTuple, TypeVar

from .faults import UnsupportedParameterModeError, IncompatibleResultTypeError, trigger, describe_type
from .utils import typename

_T = TypeVar("_T")


class Ref(Generic[_T]):
    """
    by-reference parameter (or result) marker: Ref[int].
    """
    __slots__ = ()


class Out(Generic[_T]):
    """
    output parameter marker: Out[int].
    """
    __slots__ = ()


class Signature(NamedTuple):
    parameters: tuple
    result: Any

    def __repr__(self):
        return f"({", ".join(map(typename, self.parameters))}) -> {typename(self.result)}"

    def __rich_repr__(self):
        yield "parameters", self.parameters
        yield "result", self.result


def mode(annotation, /):
    """
    Return the parameter-mode marker class (Ref or Out) wrapped around an
    annotation, or None for a plain by-value annotation.
    """
    origin = typing.get_origin(annotation)
    return origin if origin in (Ref, Out) else None


def assignable(result, cls, /):
    """
    True when an instance of `cls` may be returned where `result` is declared.

    Accepted: object, typing.Any, any superclass or registered ABC of cls,
    generic aliases whose origin accepts cls (list[int] accepts a list subclass),
    and unions with at least one accepting member (Person | None).
    Protocols without @runtime_checkable cannot be checked and never accept.
    """
    if result is object or result is Any:
        return True
    if (origin := typing.get_origin(result)) in (typing.Union, types.UnionType):
        return any(assignable(member, cls) for member in typing.get_args(result))
    if origin is not None:
        result = origin
    if not isinstance(result, type):
        return False
    try:
        return issubclass(cls, result)
    except TypeError:
        return False


def signature(parameters, result, /):
    """
    Normalize a requested (parameters, result) pair into a Signature.
    """
    if isinstance(parameters, str) or not isinstance(parameters, collections.abc.Iterable):
        raise TypeError("signature parameters must be an iterable of types")
    return Signature(tuple(parameters), result)


def from_callable(annotation, /):
    """
    Build a Signature from a callable annotation: Callable[[str, int], Point].

    Errors
    - TypeError when the annotation is not a parametrized Callable or uses an
      ellipsis / ParamSpec parameter list.
    """
    if typing.get_origin(annotation) is not collections.abc.Callable:
        raise TypeError(f"{typename(annotation)} is not a parametrized Callable")
    parameters, result = typing.get_args(annotation)
    if not isinstance(parameters, list):
        raise TypeError(f"{typename(annotation)} must declare an explicit parameter list")
    return Signature(tuple(parameters), result)


def validate(cls, signature, /):
    """
    Reject signatures that cannot be bound to an initializer of `cls`.

    Order
    1. by-reference result
    2. result not assignable from cls
    3. by-reference / output parameters
    """
    if mode(signature.result) is not None:
        trigger(
            UnsupportedParameterModeError(
                f"activator for {describe_type(cls)} cannot return by reference"
            ),
            type=cls,
            signature=signature,
            hint="request the plain result type instead of Ref[...]",
        )
    if not assignable(signature.result, cls):
        trigger(
            IncompatibleResultTypeError(
                f"{describe_type(cls)} is not assignable to {describe_type(signature.result)}"
            ),
            type=cls,
            signature=signature,
            hint="use the class itself, one of its bases, or object as the result type",
        )
    for index, parameter in enumerate(signature.parameters):
        if marker := mode(parameter):
            trigger(
                UnsupportedParameterModeError(
                    f"parameter {index} of the activator for {describe_type(cls)} is declared {marker.__name__}[...]"
                ),
                type=cls,
                signature=signature,
                hint="initializers only accept by-value parameters",
            )


__all__ = (
    "Signature",
    "Ref",
    "Out",
    "assignable",
    "signature",
    "from_callable",
)
