"""
Allocation module behavioral tests (value types, zero values, uninitialized instances).

Scope
- Validate value-type membership (registered scalars, frozen dataclasses, @valuetype).
- Validate zero values for scalars, named tuples, frozen dataclasses and cycles.
- Validate create_uninitialized(): no initializer runs, fields are zeroed.

Conventions
- Test method names follow CamelCase per project convention.
"""
import dataclasses
import unittest
from decimal import Decimal
from typing import ClassVar, NamedTuple
from unittest import TestCase

from objectfactory import ValueType, valuetype, isvaluetype, allocate, blank, zero_value, create_uninitialized
from objectfactory import IncompatibleResultTypeError


@dataclasses.dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str


@dataclasses.dataclass(frozen=True)
class Invoice:
    total: Money
    lines: tuple
    note: list


class Pair(NamedTuple):
    left: int
    right: str


@valuetype
class Ring:
    next: "Ring"
    size: int


class Tracked:
    instances: ClassVar[int] = 0
    label: str = "default"
    items: list[int]

    def __init__(self, label: str):
        raise AssertionError("__init__ must not run")


class TestValueType(TestCase):
    """Behavioral tests for value-type membership."""

    def testRegisteredScalars(self):
        for cls in (bool, int, float, complex, str, bytes, tuple, frozenset, Decimal):
            with self.subTest(cls=cls.__name__):
                self.assertTrue(isvaluetype(cls))
                self.assertTrue(issubclass(cls, ValueType))

    def testFrozenDataclassesAndNamedTuples(self):
        self.assertTrue(isvaluetype(Money))
        self.assertTrue(isvaluetype(Pair))

    def testReferenceTypes(self):
        @dataclasses.dataclass
        class Mutable:
            value: int

        for cls in (object, list, dict, Tracked, Mutable):
            with self.subTest(cls=cls.__name__):
                self.assertFalse(isvaluetype(cls))
        self.assertFalse(isvaluetype(3))

    def testValueTypeDecorator(self):
        class Meter:
            pass

        self.assertIs(valuetype(Meter), Meter)
        self.assertTrue(isvaluetype(Meter))
        with self.assertRaises(TypeError):
            valuetype(3)


class TestZeroValue(TestCase):
    """Behavioral tests for zero values."""

    def testScalars(self):
        expected = {
            bool: False,
            int: 0,
            float: 0.0,
            complex: 0j,
            str: "",
            bytes: b"",
            tuple: (),
            frozenset: frozenset(),
            Decimal: Decimal(0),
        }
        for cls, value in expected.items():
            with self.subTest(cls=cls.__name__):
                zero = zero_value(cls)
                self.assertIs(type(zero), cls)
                self.assertEqual(zero, value)

    def testNamedTuple(self):
        self.assertEqual(zero_value(Pair), Pair(0, ""))
        self.assertIs(type(zero_value(Pair)), Pair)

    def testFrozenDataclass(self):
        self.assertEqual(zero_value(Money), Money(Decimal(0), ""))

    def testNestedFields(self):
        invoice = zero_value(Invoice)
        self.assertEqual(invoice.total, Money(Decimal(0), ""))
        self.assertEqual(invoice.lines, ())
        self.assertIsNone(invoice.note)

    def testCycleIsCut(self):
        ring = zero_value(Ring)
        self.assertIsNone(ring.next)
        self.assertEqual(ring.size, 0)

    def testNonValueTypesHaveNoZero(self):
        self.assertIsNone(zero_value(Tracked))
        self.assertIsNone(zero_value(int | None))
        self.assertIsNone(zero_value("int"))


class TestCreateUninitialized(TestCase):
    """Behavioral tests for create_uninitialized()."""

    def testReferenceTypeSkipsInit(self):
        tracked = create_uninitialized(Tracked)
        self.assertIsInstance(tracked, Tracked)

    def testFieldsAreZeroedOverClassDefaults(self):
        tracked = create_uninitialized(Tracked)
        self.assertEqual(tracked.label, "")
        self.assertIsNone(tracked.items)
        self.assertEqual(Tracked.label, "default")

    def testClassVarsAreLeftAlone(self):
        tracked = create_uninitialized(Tracked)
        self.assertNotIn("instances", vars(tracked))
        self.assertEqual(tracked.instances, 0)

    def testNewOverrideIsSkipped(self):
        class Guarded:
            def __new__(cls):
                raise AssertionError("__new__ must not run")

        self.assertIsInstance(create_uninitialized(Guarded), Guarded)

    def testPostInitIsSkipped(self):
        @dataclasses.dataclass
        class Checked:
            value: int = 5

            def __post_init__(self):
                raise AssertionError("__post_init__ must not run")

        self.assertEqual(create_uninitialized(Checked).value, 0)

    def testValueTypeGivesZero(self):
        self.assertEqual(create_uninitialized(int), 0)
        self.assertEqual(create_uninitialized(Money), Money(Decimal(0), ""))

    def testFreshInstanceEachCall(self):
        self.assertIsNot(create_uninitialized(Tracked), create_uninitialized(Tracked))

    def testResultType(self):
        self.assertIsInstance(create_uninitialized(Tracked, object), Tracked)
        with self.assertRaises(IncompatibleResultTypeError):
            create_uninitialized(Tracked, int)

    def testRejectsNonClasses(self):
        with self.assertRaises(TypeError):
            create_uninitialized("Tracked")

    def testBlankZeroesFieldsWithoutInit(self):
        tracked = blank(Tracked)
        self.assertIsInstance(tracked, Tracked)
        self.assertEqual(tracked.label, "")
        self.assertIsNone(tracked.items)

    def testAllocateUsesSolidBase(self):
        class Counter(int):
            def __new__(cls, value):
                raise AssertionError("__new__ must not run")

        counter = allocate(Counter)
        self.assertIs(type(counter), Counter)
        self.assertEqual(counter, 0)


if __name__ == '__main__':
    unittest.main()
