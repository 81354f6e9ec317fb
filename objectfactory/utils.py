"""
objectfactory utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the descriptor, synthesis and activator layers.

Overview
- UnsetType / Unset
  • Singleton sentinel for "argument not provided" where None is a meaningful value
    (e.g. a result type that defaults to the constructed class).

- coalesce(value, default=None)
  • Replace Unset with a concrete default, preserving legitimate falsey values.

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated activators so tracebacks and
    reprs read "activate_Point" instead of "<lambda>" or "activator".

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr).

- typename(object)
  • Human-friendly qualified name of a class or annotation for messages.

Stability and contract
- Names in __all__ are supported; anything else may change without notice.
"""
import builtins
import functools
import inspect
import typing
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., type | UnsetType).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, otherwise `object` unchanged.

    None, 0, "" and other falsey values are preserved as-is.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name)           -> decorator

    Errors
    - TypeError for a non-callable target, a non-string name, a callable whose
      names cannot be updated (built-ins), or a wrong argument count.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Shallow read-only view of a container (tuple / MappingProxyType / frozenset).
    """
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(object)
    elif isinstance(object, Mapping):
        return MappingProxyType(object)
    elif isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private backing attribute
    "_{name}", freezing containers on the way out.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


def typename(object, /):
    """
    Return a readable name for a class or annotation.

    - classes           → "module.QualName" ("QualName" for builtins)
    - typing constructs → their repr with the "typing." prefix removed
    - anything else     → repr(object)
    """
    if isinstance(object, type) and not typing.get_args(object):
        if object.__module__ == "builtins":
            return object.__qualname__
        return f"{object.__module__}.{object.__qualname__}"
    return repr(object).replace("typing.", "")


def hints(object, /, localns=None):
    """
    Resolved annotations of a function or class (MRO merged for classes).

    Forward references that cannot be resolved leave every annotation as written
    (strings), which never compare equal to a class.
    """
    try:
        return typing.get_type_hints(object, localns=localns)
    except NameError:
        bases = reversed(object.__mro__) if isinstance(object, type) else (object,)
        return {name: hint for base in bases for name, hint in _annotations(base).items()}


def _annotations(object):
    try:
        return inspect.get_annotations(object)
    except NameError:
        # deferred annotations (3.14+) are evaluated on access
        import annotationlib
        return annotationlib.get_annotations(object, format=annotationlib.Format.FORWARDREF)


Unset = UnsetType()
"""
Internal sentinel for "not provided".

Typical pattern: value = coalesce(user_value, default) to materialize a fallback
only when user_value is Unset (None and other falsey values are preserved).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "typename",
    "hints",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
