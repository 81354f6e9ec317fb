"""
Signature matching and activator synthesis.

resolve(descriptor, parameters)
- exact match of the requested parameter annotations against the declared ones:
  no overload resolution, no conversion, no variadics. Public and non-public
  initializers are both considered; visibility is enforced by the callers.
- a value type asked for an empty parameter list resolves to its declared
  parameterless initializer when there is one, otherwise to its zero value.

synthesize(cls, signature)
- validates the signature (parameter modes, result assignability), resolves the
  initializer and builds an activator for it:
  • with dynamic code, a trampoline is emitted through exec so that the activator has
    a real positional-only signature annotated with the requested types and calls the
    initializer directly.
  • without it, a closure over Initializer.invoke carrying an equivalent
    __signature__.
- returns Activation(activator, public); nothing is cached here.
"""
import inspect
import textwrap
from inspect import Parameter
from typing import Any, NamedTuple

from . import runtime
from .allocation import blank, zero_value
from .descriptors import InitializerKind, describe
from .faults import NoMatchingInitializerError, NoDefaultInitializerError, trigger, describe_type
from .signatures import validate
from .utils import rename, typename


class Activation(NamedTuple):
    activator: Any
    public: bool


def resolve(descriptor, parameters, /):
    """
    Return the initializer of descriptor.type whose parameter list equals `parameters`.

    Errors
    - NoDefaultInitializerError for an empty request with no parameterless initializer.
    - NoMatchingInitializerError otherwise.
    """
    if descriptor.valuetype and parameters == ():
        return descriptor.default or descriptor.zero
    for initializer in descriptor.initializers:
        if initializer.supported and initializer.parameters == parameters:
            return initializer

    cls = descriptor.type
    if not parameters:
        trigger(
            NoDefaultInitializerError(f"{describe_type(cls)} declares no parameterless initializer"),
            type=cls,
            parameters=parameters,
            hint="fall back to create_uninitialized() or request a parameterized activator",
        )
    trigger(
        NoMatchingInitializerError(
            f"{describe_type(cls)} declares no initializer accepting ({", ".join(map(typename, parameters))})"
        ),
        type=cls,
        parameters=parameters,
        hint="parameter annotations must match the initializer's exactly and in order",
    )


def _activator_name(cls):
    return "activate_" + cls.__name__


def _emit(initializer, signature):
    """
    Generate the activator source and run it through exec.
    """
    names = ["p" + str(index) for index in range(len(signature.parameters))]
    header = ", ".join(f"{name}: _t{index}" for index, name in enumerate(names))
    if names:
        header += ", /"
    arguments = ", ".join(names)

    match initializer.kind:
        case InitializerKind.PRIMARY | InitializerKind.IMPLICIT:
            body = [f"return _type({arguments})"]
        case InitializerKind.ALTERNATE:
            body = [
                "self = _blank(_type)",
                f"_function(self{", " if names else ""}{arguments})",
                "return self",
            ]
        case InitializerKind.ZERO:
            body = ["return _zero(_type)"]
        case _:
            raise RuntimeError("unreachable")

    namespace = {
        "rename": rename,
        "_type": initializer.type,
        "_function": initializer.function,
        "_blank": blank,
        "_zero": zero_value,
        "_result": signature.result,
    } | {
        "_t" + str(index): parameter for index, parameter in enumerate(signature.parameters)
    }

    exec(textwrap.dedent(f"""
        @rename({_activator_name(initializer.type)!r})
        def activator({header}) -> _result:
            {"\n            ".join(body)}
    """), namespace)

    namespace["activator"].__doc__ = textwrap.dedent(f"""
        Generated activator for {typename(initializer.type)}.

        Signature
        - {signature!r}

        Initializer
        - {initializer.name} ({initializer.kind.name.lower()}, {"public" if initializer.public else "non-public"})
    """)
    return namespace["activator"]


def _bind(initializer, signature):
    """
    Wrap Initializer.invoke for hosts that forbid run-time code generation.
    """
    invoke = initializer.invoke
    arity = len(signature.parameters)
    name = _activator_name(initializer.type)

    @rename(name)
    def activator(*arguments):
        if len(arguments) != arity:
            raise TypeError(f"{name}() takes {arity} positional arguments but {len(arguments)} were given")
        return invoke(*arguments)

    activator.__signature__ = inspect.Signature(
        [
            Parameter("p" + str(index), Parameter.POSITIONAL_ONLY, annotation=parameter)
            for index, parameter in enumerate(signature.parameters)
        ],
        return_annotation=signature.result,
    )
    return activator


def synthesize(cls, signature, /):
    """
    Validate, resolve and build the activator for (cls, signature).

    Errors
    - UnsupportedParameterModeError, IncompatibleResultTypeError (before resolution).
    - NoMatchingInitializerError / NoDefaultInitializerError.
    """
    validate(cls, signature)
    initializer = resolve(describe(cls), signature.parameters)
    build = _emit if runtime.dynamic_code_supported() else _bind
    return Activation(build(initializer, signature), initializer.public)


__all__ = (
    "Activation",
    "resolve",
    "synthesize",
)
