"""
Host capability detection.

The engine prefers generated activators (source emitted and run through exec) and
falls back to generic invocation when the interpreter forbids run-time code
generation, e.g. under an audit hook that rejects compile/exec events.

Resolution order (first hit wins, decided once per process)
1. OBJECTFACTORY_DYNAMIC_CODE environment variable ("0", "false", "no", "off" and
   the empty string disable; anything else enables).
2. a __dynamic_code__ attribute on __main__ (truthiness is used).
3. a trial compiling and executing an empty module.
"""
import functools
import os

from .utils import Unset

ENVIRONMENT_VARIABLE = "OBJECTFACTORY_DYNAMIC_CODE"

_FALSY = frozenset(("", "0", "false", "no", "off"))


def _try_exec():
    try:
        exec(compile("pass", "<objectfactory-check>", "exec"), {})
    except (RuntimeError, PermissionError, SystemError):
        return False
    return True


@functools.cache
def dynamic_code_supported():
    """
    Return True when activators may be generated at run time.

    The answer is memoized for the process lifetime; strategy selection relies on
    it never changing once observed.
    """
    if (value := os.environ.get(ENVIRONMENT_VARIABLE)) is not None:
        return value.strip().lower() not in _FALSY
    if (value := getattr(__import__("__main__"), "__dynamic_code__", Unset)) is not Unset:
        return bool(value)
    return _try_exec()


__all__ = (
    "ENVIRONMENT_VARIABLE",
    "dynamic_code_supported",
)
