"""
Activation cache and default activators.

Activation cache
- process-wide dict: (cls, Signature) -> Activation(activator, public).
- publication: read the entry; on a miss synthesize without holding any lock and
  publish with dict.setdefault, so racing callers may synthesize more than once but
  every caller returns the single published activator.
- failures raise before publication and leave no entry behind.
- the visibility check runs on every request, hit or miss: an entry synthesized for
  a permissive caller never leaks to a restrictive one.

Default activators
- one DefaultActivator per class, selected on first use and never replaced:
  • NATIVE       value types: declared parameterless initializer, else the zero value.
  • GENERIC      no dynamic code and a public parameterless initializer: the
                 initializer's generic invoke (cls() for __init__ classes).
  • SYNTHESIZED  anything else: the activation cache with an empty parameter list.
- a class without a usable parameterless initializer keeps a failed activator (and
  warns once); requests for it raise NoDefaultInitializerError every time.
"""
from enum import Enum, auto

from . import runtime
from . import synthesis
from .descriptors import DescriptorType, describe
from .faults import *
from .faults import describe_type
from .signatures import signature, from_callable
from .utils import *

_activations = {}
_defaults = {}


def _require_class(cls, caller):
    if not isinstance(cls, type):
        raise TypeError(f"{caller}() argument must be a class, not {type(cls).__name__!r}")


def _deny(cls, hint):
    trigger(
        NonPublicInitializerError(f"requested initializer of {describe_type(cls)} is not public"),
        type=cls,
        hint=hint,
    )


def _activate(cls, signature, allow_nonpublic):
    key = (cls, signature)
    try:
        activation = _activations[key]
    except KeyError:
        activation = _activations.setdefault(key, synthesis.synthesize(cls, signature))
    if not allow_nonpublic and not activation.public:
        _deny(cls, "pass allow_nonpublic=True to use non-public initializers")
    return activation.activator


def get_activator(cls, /, parameters=(), result=Unset, allow_nonpublic=False):
    """
    Return a cached callable constructing `cls` through the initializer whose
    parameter annotations are exactly `parameters`.

    Parameters
    - cls: class to construct.
    - parameters: ordered parameter annotations of the wanted callable.
    - result: declared result type (defaults to cls); must be assignable from cls.
    - allow_nonpublic: permit non-public initializers.

    Errors
    - NoMatchingInitializerError (NoDefaultInitializerError for an empty list)
    - IncompatibleResultTypeError, UnsupportedParameterModeError
    - NonPublicInitializerError

    Example
        >>> activate = get_activator(Account, [str])
        >>> activate("ana").owner
        'ana'
    """
    _require_class(cls, "get_activator")
    return _activate(cls, signature(parameters, coalesce(result, cls)), allow_nonpublic)


def get_activator_by_callable(cls, annotation, /, allow_nonpublic=False):
    """
    Same as get_activator, with the wanted shape given as a callable annotation:

        get_activator_by_callable(Account, Callable[[str], object])
    """
    _require_class(cls, "get_activator_by_callable")
    return _activate(cls, from_callable(annotation), allow_nonpublic)


class Strategy(Enum):
    NATIVE = auto()
    GENERIC = auto()
    SYNTHESIZED = auto()

    def __repr__(self):
        return self.name


class DefaultActivator(metaclass=DescriptorType):
    """
    Creates instances of one class through its parameterless initializer.

    Obtain instances through get_default_activator(); an activator built directly
    has no strategy and raises ActivatorStateError when used.

    Fields
    - type: constructed class.
    - strategy: Strategy, or Unset when selection failed or never ran.
    - public: whether the selected initializer is public.
    """
    __introspectable__ = ("type", "strategy", "public")

    __slots__ = ("_type", "_strategy", "_public", "_callable", "_fault")

    def __init__(self, type=Unset, strategy=Unset, callable=Unset, public=False, fault=Unset):
        self._type = type
        self._strategy = strategy
        self._callable = callable
        self._public = public
        self._fault = fault

    def invoke(self):
        """
        Create a new instance.
        """
        if self._callable is Unset:
            trigger(ActivatorStateError("activator was not properly initialized"), type=self._type)
        return self._callable()

    __call__ = invoke

    def as_callable(self):
        """
        Return the underlying zero-argument callable (invoking the activator
        directly skips one call).
        """
        if self._callable is Unset:
            trigger(ActivatorStateError("activator was not properly initialized"), type=self._type)
        return self._callable


def _select(cls):
    descriptor = describe(cls)

    if descriptor.valuetype:
        initializer = descriptor.default or descriptor.zero
        return DefaultActivator(cls, Strategy.NATIVE, initializer.invoke, initializer.public)

    initializer = descriptor.default
    if not runtime.dynamic_code_supported() and initializer is not None and initializer.public:
        return DefaultActivator(cls, Strategy.GENERIC, initializer.invoke, True)

    try:
        activator = _activate(cls, signature((), cls), True)
    except NoMatchingInitializerError as fault:
        trigger(
            DefaultActivatorWarning(f"failed to create a default activator for {describe_type(cls)}"),
            type=cls,
            hint="instances can still be created with create_uninitialized()",
            stacklevel=6,
        )
        return DefaultActivator(cls, fault=fault)
    return DefaultActivator(cls, Strategy.SYNTHESIZED, activator, initializer.public)


def _default(cls, allow_nonpublic, caller):
    # public entry points call this directly: the stacklevel of the warning in _select relies on it
    _require_class(cls, caller)
    try:
        activator = _defaults[cls]
    except KeyError:
        activator = _defaults.setdefault(cls, _select(cls))

    if activator._callable is Unset:
        trigger(
            activator._fault,
            type=cls,
            hint="fall back to create_uninitialized() or get_formattable_factory()",
        )
    if not allow_nonpublic and not activator.public:
        _deny(cls, "pass allow_nonpublic=True to call a non-public parameterless initializer")
    return activator


def get_default_activator(cls, /, allow_nonpublic=False):
    """
    Return the process-wide DefaultActivator of cls.

    Errors
    - NoDefaultInitializerError when cls has no parameterless initializer.
    - NonPublicInitializerError when it is non-public and allow_nonpublic is False.
    """
    return _default(cls, allow_nonpublic, "get_default_activator")


__all__ = (
    "Strategy",
    "DefaultActivator",
    "get_activator",
    "get_activator_by_callable",
    "get_default_activator",
)
