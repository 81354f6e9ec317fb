"""
Signature module behavioral tests (keys, parameter modes, result assignability).

Scope
- Validate Signature equality and hashing (it is half of the activation cache key).
- Validate Ref/Out detection, result assignability and validate() ordering.
- Validate normalization from parameter iterables and callable annotations.

Conventions
- Test method names follow CamelCase per project convention.
"""
import collections.abc
import unittest
from collections.abc import Callable, Sequence
from typing import Any, Optional, Protocol, Union, runtime_checkable
from unittest import TestCase

from objectfactory import Signature, Ref, Out, assignable, signature, from_callable
from objectfactory import UnsupportedParameterModeError, IncompatibleResultTypeError
from objectfactory.signatures import mode, validate


class Shape:
    pass


class Circle(Shape):
    def draw(self):
        return "circle"


class Named(Protocol):
    name: str


@runtime_checkable
class Drawable(Protocol):
    def draw(self): ...


class TestSignature(TestCase):
    """Behavioral tests for Signature values."""

    def testEqualityAndHash(self):
        first = signature([str, int], Shape)
        second = signature((str, int), Shape)
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))
        self.assertEqual(len({first, second}), 1)

    def testOrderMatters(self):
        self.assertNotEqual(signature([str, int], Shape), signature([int, str], Shape))

    def testResultMatters(self):
        self.assertNotEqual(signature([str], Shape), signature([str], Circle))

    def testGenericAliasesCompareStructurally(self):
        self.assertEqual(signature([list[int]], object), signature([list[int]], object))
        self.assertNotEqual(signature([list[int]], object), signature([list[str]], object))

    def testRepr(self):
        self.assertEqual(repr(signature([str, int], int)), "(str, int) -> int")

    def testRejectsStringsAndScalars(self):
        with self.assertRaises(TypeError):
            signature("str", int)
        with self.assertRaises(TypeError):
            signature(int, int)

    def testFromCallable(self):
        self.assertEqual(from_callable(Callable[[str, int], Shape]), Signature((str, int), Shape))
        self.assertEqual(from_callable(Callable[[], Shape]), Signature((), Shape))

    def testFromCallableRejectsEllipsisAndPlainTypes(self):
        with self.assertRaises(TypeError):
            from_callable(Callable[..., Shape])
        with self.assertRaises(TypeError):
            from_callable(int)
        with self.assertRaises(TypeError):
            from_callable(collections.abc.Callable)


class TestModes(TestCase):
    """Behavioral tests for Ref/Out markers."""

    def testMode(self):
        self.assertIs(mode(Ref[int]), Ref)
        self.assertIs(mode(Out[int]), Out)
        self.assertIsNone(mode(int))
        self.assertIsNone(mode(list[int]))


class TestAssignable(TestCase):
    """Behavioral tests for result-type compatibility."""

    def testAccepted(self):
        self.assertTrue(assignable(Circle, Circle))
        self.assertTrue(assignable(Shape, Circle))
        self.assertTrue(assignable(object, Circle))
        self.assertTrue(assignable(Any, Circle))
        self.assertTrue(assignable(Sequence, list))
        self.assertTrue(assignable(list[int], list))

    def testUnionsAcceptAnyMember(self):
        self.assertTrue(assignable(Circle | None, Circle))
        self.assertTrue(assignable(Optional[Shape], Circle))
        self.assertTrue(assignable(Union[int, Shape], Circle))
        self.assertFalse(assignable(int | str, Circle))
        self.assertFalse(assignable(Optional[int], Circle))

    def testProtocolsWithoutRuntimeCheckNeverAccept(self):
        self.assertFalse(assignable(Named, Circle))
        self.assertTrue(assignable(Drawable, Circle))

    def testRejected(self):
        self.assertFalse(assignable(Circle, Shape))
        self.assertFalse(assignable(int, Shape))
        self.assertFalse(assignable("Shape", Shape))


class TestValidate(TestCase):
    """Behavioral tests for validate() and its ordering."""

    def testPlainSignaturePasses(self):
        validate(Circle, signature([str], Shape))

    def testIncompatibleResult(self):
        with self.assertRaises(IncompatibleResultTypeError) as context:
            validate(Shape, signature([], Circle))
        self.assertIs(context.exception.type, Shape)

    def testByReferenceParameter(self):
        for parameter in (Ref[int], Out[int]):
            with self.subTest(parameter=parameter):
                with self.assertRaises(UnsupportedParameterModeError):
                    validate(Circle, signature([str, parameter], Circle))

    def testByReferenceResultIsCheckedFirst(self):
        # Ref[int] is neither by-value nor assignable: the mode is reported
        with self.assertRaises(UnsupportedParameterModeError):
            validate(Circle, signature([], Ref[int]))

    def testProtocolResultIsIncompatible(self):
        with self.assertRaises(IncompatibleResultTypeError):
            validate(Circle, signature([], Named))

    def testResultIsCheckedBeforeParameters(self):
        with self.assertRaises(IncompatibleResultTypeError):
            validate(Circle, signature([Ref[int]], int))


if __name__ == '__main__':
    unittest.main()
