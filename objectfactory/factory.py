"""
Entry points most callers need.

- create_instance(cls): one-shot construction through the default activator.
- create_uninitialized(cls): allocation without any initializer (re-exported).
- get_formattable_factory(cls): a zero-argument factory for serializers and
  formatters that must materialize a class whether or not it declares a
  parameterless initializer.
"""
import functools

from . import activators
from .allocation import create_uninitialized
from .faults import NoDefaultInitializerError, IncompatibleResultTypeError, trigger, describe_type
from .signatures import assignable
from .utils import Unset, rename


def create_instance(cls, /, allow_nonpublic=False):
    """
    Create an instance of cls through its parameterless initializer.

        >>> create_instance(int)
        0

    Errors
    - NoDefaultInitializerError, NonPublicInitializerError (see get_default_activator).
    """
    return activators._default(cls, allow_nonpublic, "create_instance").invoke()


def get_formattable_factory(cls, /, result=Unset):
    """
    Return a zero-argument callable producing instances of cls.

    Non-public parameterless initializers are accepted. A class without any
    parameterless initializer gets a factory producing uninitialized instances
    instead; every other failure propagates.
    """
    if not isinstance(cls, type):
        raise TypeError(f"get_formattable_factory() argument must be a class, not {type(cls).__name__!r}")
    if result is not Unset and not assignable(result, cls):
        trigger(
            IncompatibleResultTypeError(f"{describe_type(cls)} is not assignable to {describe_type(result)}"),
            type=cls,
            hint="use the class itself, one of its bases, or object as the result type",
        )
    try:
        return activators._default(cls, True, "get_formattable_factory").as_callable()
    except NoDefaultInitializerError:
        return rename(functools.partial(create_uninitialized, cls), "create_uninitialized_" + cls.__name__)


__all__ = (
    "create_instance",
    "create_uninitialized",
    "get_formattable_factory",
)
