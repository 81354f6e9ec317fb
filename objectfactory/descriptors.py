"""
Type descriptors: the engine's read-only view of a class and its initializers.

What this module provides
- @initializer: marks a method as an initializer (an overloaded constructor body)
  and/or sets the visibility of __init__/__new__.
- Initializer: one initialization procedure of a class (kind, parameter list,
  visibility) with a generic, reflection-style invoke().
- TypeDescriptor / describe(cls): the initializers of a class, its category
  (value or reference type) and its parameterless initializer, computed once per
  class and memoized for the process lifetime.

Initializer discovery
- PRIMARY: the Python-level __init__ resolved through the MRO, or __new__ when
  only __new__ is overridden (typing.NamedTuple). Invoked through cls(...).
- ALTERNATE: methods declared on the class itself with @initializer. Invoked on
  a raw allocation whose annotated fields are zeroed, like a constructor body.
- IMPLICIT: reference classes declaring no initializer at all get a public
  parameterless one, invoked through cls().
- ZERO: the synthetic zero-value construction of value types (never listed
  among initializers; see TypeDescriptor.zero).

Parameter lists
- the positional parameters after self/cls, typed by their resolved annotations
  (object when unannotated). Parameters with defaults still belong to the list.
- *args, **kwargs or a keyword-only parameter without a default make the
  initializer unsupported: it is described but never matched.

Visibility
- explicit: @initializer(public=False) / @initializer(public=True)
- implicit: a leading underscore (non-dunder) means non-public.
"""
import functools
import inspect
import re
import sys
from enum import Enum, auto
from inspect import Parameter
from types import MappingProxyType

from .allocation import blank, isvaluetype, zero_value
from .utils import *


class DescriptorType(type):
    """
    Metaclass giving descriptor-like records read-only fields and stable reprs.

    - every name in __introspectable__ becomes a mirror() property over "_{name}".
    - __typename__ is the hyphenated class name ("type-descriptor").
    - __repr__ / __rich_repr__ list the __displayable__ (or __introspectable__) fields.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(f"{name}={value!r}" for name, value in self.__rich_repr__())
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class InitializerKind(Enum):
    PRIMARY = auto()
    ALTERNATE = auto()
    IMPLICIT = auto()
    ZERO = auto()

    def __repr__(self):
        return self.name


def initializer(function=Unset, /, *, public=Unset):
    """
    Mark a method as an initializer, or set the visibility of __init__/__new__.

    Forms
    - @initializer                      visibility from the name
    - @initializer(public=False)        explicit visibility

    Example
        class Account:
            owner: str

            @initializer(public=False)
            def __init__(self, owner: str):
                self.owner = owner

            @initializer
            def _from_id(self, id: int):  # non-public alternate initializer
                self.owner = f"user-{id}"
    """
    if not isinstance(public, bool | Unset):
        raise TypeError("@initializer() 'public' must be a boolean")
    if function is Unset:
        return rename(functools.partial(initializer, public=public), "initializer")
    if not inspect.isfunction(function):
        raise TypeError("@initializer must be applied to a plain function")
    function.__initializer__ = MappingProxyType({"public": public})
    return function


def _ispublic(name, function):
    options = getattr(function, "__initializer__", None)
    if options is not None and options["public"] is not Unset:
        return options["public"]
    dunder = name.startswith("__") and name.endswith("__")
    return dunder or not name.startswith("_")


def _parameters(cls, function):
    """
    Positional parameter annotations after self/cls, or None when unsupported.
    """
    module = sys.modules.get(cls.__module__)
    namespace = dict(vars(module)) if module is not None else {}
    annotations = hints(function, localns=namespace | {cls.__name__: cls})

    parameters = []
    for parameter in list(inspect.signature(function).parameters.values())[1:]:
        if parameter.kind in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD):
            return None
        if parameter.kind is Parameter.KEYWORD_ONLY:
            if parameter.default is Parameter.empty:
                return None
            continue
        parameters.append(annotations.get(parameter.name, object))
    return tuple(parameters)


class Initializer(metaclass=DescriptorType):
    """
    One initialization procedure of a class.

    Fields
    - type: the class it constructs.
    - name: "__init__", "__new__", the method name, or "<zero>".
    - kind: InitializerKind.
    - function: the underlying function (None for IMPLICIT and ZERO).
    - parameters: tuple of annotations, or None when the initializer is unsupported.
    - public: visibility flag.
    """
    __introspectable__ = ("type", "name", "kind", "function", "parameters", "public")
    __displayable__ = ("type", "name", "kind", "parameters", "public")

    __slots__ = ("_type", "_name", "_kind", "_function", "_parameters", "_public")

    def __init__(self, type, name, kind, function, parameters, public):
        self._type = type
        self._name = name
        self._kind = kind
        self._function = function
        self._parameters = parameters
        self._public = public

    @property
    def supported(self):
        return self._parameters is not None

    def invoke(self, *arguments):
        """
        Generic invocation path: no code generation, one dispatch per call.
        """
        match self._kind:
            case InitializerKind.PRIMARY | InitializerKind.IMPLICIT:
                return self._type(*arguments)
            case InitializerKind.ALTERNATE:
                instance = blank(self._type)
                self._function(instance, *arguments)
                return instance
            case InitializerKind.ZERO:
                return zero_value(self._type)
        raise RuntimeError("unreachable")


def _primary(cls):
    if inspect.isfunction(function := cls.__init__):
        return Initializer(cls, "__init__", InitializerKind.PRIMARY, function,
                           _parameters(cls, function), _ispublic("__init__", function))
    if inspect.isfunction(function := cls.__new__):
        return Initializer(cls, "__new__", InitializerKind.PRIMARY, function,
                           _parameters(cls, function), _ispublic("__new__", function))
    return None


class TypeDescriptor(metaclass=DescriptorType):
    """
    Read-only description of a class as seen by the engine.

    Fields
    - type: the described class.
    - valuetype: True for value types (see allocation.ValueType).
    - initializers: declared initializers, primary first, then alternates in
      declaration order, or the single IMPLICIT one.
    """
    __introspectable__ = ("type", "valuetype", "initializers")

    __slots__ = ("_type", "_valuetype", "_initializers", "_zero")

    def __init__(self, cls):
        self._type = cls
        self._valuetype = isvaluetype(cls)

        initializers = [primary] if (primary := _primary(cls)) is not None else []
        for name, member in vars(cls).items():
            if name in ("__init__", "__new__"):
                continue
            if inspect.isfunction(member) and hasattr(member, "__initializer__"):
                initializers.append(Initializer(cls, name, InitializerKind.ALTERNATE, member,
                                                _parameters(cls, member), _ispublic(name, member)))
        if not initializers and not self._valuetype:
            initializers.append(Initializer(cls, "__init__", InitializerKind.IMPLICIT, None, (), True))

        seen = {}
        for initializer in initializers:
            if not initializer.supported:
                continue
            if (other := seen.setdefault(initializer.parameters, initializer)) is not initializer:
                raise TypeError(
                    f"{typename(cls)} declares initializers {other.name!r} and {initializer.name!r} "
                    f"with the same parameter list"
                )

        self._initializers = tuple(initializers)
        self._zero = Initializer(cls, "<zero>", InitializerKind.ZERO, None, (), True) if self._valuetype else None

    @property
    def default(self):
        """
        the declared parameterless initializer (IMPLICIT included), or None.
        """
        for initializer in self._initializers:
            if initializer.parameters == ():
                return initializer
        return None

    @property
    def zero(self):
        """
        the synthetic zero-value initializer for value types, None otherwise.
        """
        return self._zero


@functools.cache
def describe(cls, /):
    """
    Return the memoized TypeDescriptor of a class.

    Errors
    - TypeError when cls is not a class or declares two initializers with the
      same parameter list.
    """
    if not isinstance(cls, type):
        raise TypeError(f"describe() argument must be a class, not {type(cls).__name__!r}")
    return TypeDescriptor(cls)


__all__ = (
    "initializer",
    "Initializer",
    "InitializerKind",
    "TypeDescriptor",
    "describe",
)
