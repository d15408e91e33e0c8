"""
Schema registry behavioral tests (options, positionals, groups, lookup).

Scope
- Validate register_option refusals (return False, no state change, warning).
- Validate required-set bookkeeping for REQUIRED/INHERIT_GROUP options and groups.
- Validate positional slot registration and group insertion rules.
- Validate lookup by short or long name, including ambiguous names.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argot import ArgumentParser, FaultCode, Key, Requirement, RegistrationWarning, ValueType


class TestRegisterOption(TestCase):
    """Registration rules for options."""

    def setUp(self):
        self.parser = ArgumentParser()

    def testHelpIsImplicit(self):
        self.assertTrue(self.parser.has_option("h"))
        self.assertTrue(self.parser.has_option("help"))
        self.assertIs(self.parser.find_option("h").type, ValueType.BOOL)
        self.assertFalse(self.parser.option_is_set("help"))

    def testRegisterSucceeds(self):
        self.assertTrue(self.parser.register_option(("o", "some-option"), Requirement.OPTIONAL, ValueType.BOOL, ""))
        self.assertTrue(self.parser.has_option("o"))
        self.assertTrue(self.parser.has_option("some-option"))

    def testShortOnlyAndLongOnly(self):
        self.parser.register_option(("s", ""), Requirement.OPTIONAL, ValueType.BOOL, "")
        self.parser.register_option(("", "long"), Requirement.OPTIONAL, ValueType.BOOL, "")
        self.assertTrue(self.parser.has_option("s"))
        self.assertFalse(self.parser.has_option("short"))
        self.assertFalse(self.parser.has_option("l"))
        self.assertTrue(self.parser.has_option("long"))

    def testEmptyKeyRefused(self):
        with self.assertWarns(RegistrationWarning) as caught:
            self.assertFalse(self.parser.register_option(("", ""), Requirement.OPTIONAL, ValueType.BOOL, ""))
        self.assertIs(caught.warning.code, FaultCode.EMPTY_KEY)
        self.assertEqual(len(self.parser.options), 1)

    def testDashedNameRefused(self):
        with self.assertWarns(RegistrationWarning) as caught:
            self.assertFalse(self.parser.register_option(("-v", ""), Requirement.OPTIONAL, ValueType.BOOL, ""))
        self.assertIs(caught.warning.code, FaultCode.MALFORMED_NAME)

    def testInheritWithoutGroupRefused(self):
        with self.assertWarns(RegistrationWarning) as caught:
            self.assertFalse(self.parser.register_option(("a", ""), Requirement.INHERIT_GROUP, ValueType.BOOL, ""))
        self.assertIs(caught.warning.code, FaultCode.ORPHAN_INHERITANCE)
        self.assertFalse(self.parser.has_option("a"))

    def testUnknownGroupRefused(self):
        with self.assertWarns(RegistrationWarning) as caught:
            self.assertFalse(self.parser.register_option(("a", ""), Requirement.OPTIONAL, ValueType.BOOL, "", "nope"))
        self.assertIs(caught.warning.code, FaultCode.UNKNOWN_GROUP)
        self.assertFalse(self.parser.has_option("a"))

    def testDuplicateKeyLeavesFirstUntouched(self):
        self.parser.register_option(("o", "out"), Requirement.OPTIONAL, ValueType.STR, "first")
        with self.assertWarns(RegistrationWarning) as caught:
            self.assertFalse(self.parser.register_option(("o", "out"), Requirement.REQUIRED, ValueType.INT, "second"))
        self.assertIs(caught.warning.code, FaultCode.DUPLICATED_OPTION)
        self.assertEqual(str(caught.warning), "option -o/--out is already registered")
        option = self.parser.find_option("out")
        self.assertEqual(option.desc, "first")
        self.assertIs(option.type, ValueType.STR)
        self.assertNotIn(Key("o", "out"), self.parser.required)

    def testDuplicateHelpRefused(self):
        with self.assertWarns(RegistrationWarning):
            self.assertFalse(self.parser.register_option(("h", "help"), Requirement.OPTIONAL, ValueType.BOOL, ""))

    def testPartiallyOverlappingKeysAreDistinct(self):
        self.assertTrue(self.parser.register_option(("o", "out"), Requirement.OPTIONAL, ValueType.STR, ""))
        self.assertTrue(self.parser.register_option(("o", "output"), Requirement.OPTIONAL, ValueType.STR, ""))

    def testOptionIsSetIffDefault(self):
        self.parser.register_option(("a", ""), Requirement.OPTIONAL, ValueType.STR, "", default="x")
        self.parser.register_option(("b", ""), Requirement.OPTIONAL, ValueType.STR, "")
        self.assertTrue(self.parser.option_is_set("a"))
        self.assertFalse(self.parser.option_is_set("b"))

    def testRequiredJoinsRequiredSet(self):
        self.parser.register_option(("", "input"), Requirement.REQUIRED, ValueType.STR, "")
        self.assertIn(Key("", "input"), self.parser.required)

    def testOptionalStaysOutOfRequiredSet(self):
        self.parser.register_option(("", "input"), Requirement.OPTIONAL, ValueType.STR, "")
        self.assertEqual(self.parser.required, ())

    def testRegistrationOrderIsKept(self):
        self.parser.register_option(("z", ""), Requirement.OPTIONAL, ValueType.BOOL, "")
        self.parser.register_option(("a", ""), Requirement.OPTIONAL, ValueType.BOOL, "")
        self.assertEqual([o.key for o in self.parser.options], [Key("h", "help"), Key("z", ""), Key("a", "")])


class TestGroups(TestCase):
    """Mutually exclusive groups and their coupling with the required set."""

    def setUp(self):
        self.parser = ArgumentParser()

    def testDuplicateGroupRefused(self):
        self.assertTrue(self.parser.add_mutually_exclusive_group("mtx"))
        with self.assertWarns(RegistrationWarning) as caught:
            self.assertFalse(self.parser.add_mutually_exclusive_group("mtx", True))
        self.assertIs(caught.warning.code, FaultCode.DUPLICATED_GROUP)
        self.assertFalse(self.parser.groups[0].mandatory)

    def testInheritInMandatoryGroupIsRequired(self):
        self.parser.add_mutually_exclusive_group("mtx", True)
        self.parser.register_option(("a", ""), Requirement.INHERIT_GROUP, ValueType.BOOL, "", "mtx")
        self.assertIn(Key("a", ""), self.parser.required)
        self.assertEqual(self.parser.find_option("a").group, "mtx")

    def testInheritInOptionalGroupIsNotRequired(self):
        self.parser.add_mutually_exclusive_group("mtx2", False)
        self.parser.register_option(("b", ""), Requirement.INHERIT_GROUP, ValueType.BOOL, "", "mtx2")
        self.assertNotIn(Key("b", ""), self.parser.required)

    def testOptionalInMandatoryGroupIsRequired(self):
        self.parser.add_mutually_exclusive_group("mtx", True)
        self.parser.register_option(("a", ""), Requirement.OPTIONAL, ValueType.BOOL, "", "mtx")
        self.assertIn(Key("a", ""), self.parser.required)

    def testRequiredMemberMakesGroupMandatory(self):
        self.parser.add_mutually_exclusive_group("mtx", False)
        self.parser.register_option(("a", ""), Requirement.INHERIT_GROUP, ValueType.BOOL, "", "mtx")
        self.parser.register_option(("b", ""), Requirement.REQUIRED, ValueType.BOOL, "", "mtx")
        self.assertTrue(self.parser.groups[0].mandatory)
        self.assertIn(Key("a", ""), self.parser.required)
        self.assertIn(Key("b", ""), self.parser.required)

    def testRequiredSetStaysStableAcrossRegistrations(self):
        self.parser.add_mutually_exclusive_group("mtx", True)
        self.parser.register_option(("a", ""), Requirement.INHERIT_GROUP, ValueType.BOOL, "", "mtx")
        before = self.parser.required
        self.parser.register_option(("c", ""), Requirement.OPTIONAL, ValueType.BOOL, "")
        self.parser.register_option(("", "d"), Requirement.REQUIRED, ValueType.STR, "")
        self.assertEqual(self.parser.required[:len(before)], before)

    def testInsertIntoUnknownGroup(self):
        self.parser.register_option(("a", ""), Requirement.OPTIONAL, ValueType.BOOL, "")
        with self.assertWarns(RegistrationWarning):
            self.assertFalse(self.parser.insert_into_group("nope", ("a", "")))

    def testInsertUnregisteredKey(self):
        self.parser.add_mutually_exclusive_group("mtx")
        with self.assertWarns(RegistrationWarning) as caught:
            self.assertFalse(self.parser.insert_into_group("mtx", ("a", "")))
        self.assertIs(caught.warning.code, FaultCode.UNREGISTERED_OPTION)

    def testInsertKeyOnlyOnce(self):
        self.parser.add_mutually_exclusive_group("one")
        self.parser.add_mutually_exclusive_group("two")
        self.parser.register_option(("a", ""), Requirement.OPTIONAL, ValueType.BOOL, "", "one")
        with self.assertWarns(RegistrationWarning) as caught:
            self.assertFalse(self.parser.insert_into_group("two", ("a", "")))
        self.assertIs(caught.warning.code, FaultCode.ALREADY_GROUPED)
        self.assertEqual(len(self.parser.groups[1]), 0)

    def testInsertIntoMandatoryGroupJoinsRequiredSet(self):
        self.parser.add_mutually_exclusive_group("mtx", True)
        self.parser.register_option(("a", ""), Requirement.OPTIONAL, ValueType.BOOL, "")
        self.assertTrue(self.parser.insert_into_group("mtx", ("a", "")))
        self.assertIn(Key("a", ""), self.parser.groups[0])
        self.assertIn(Key("a", ""), self.parser.required)


class TestPositionals(TestCase):
    """Positional slot registration."""

    def setUp(self):
        self.parser = ArgumentParser()

    def testDefaultNames(self):
        self.parser.register_positional(2)
        self.assertEqual([p.name for p in self.parser.positionals], ["ARG_1", "ARG_2"])

    def testPartialNames(self):
        self.parser.register_positional(3, ["SRC"])
        self.assertEqual([p.name for p in self.parser.positionals], ["SRC", "ARG_2", "ARG_3"])

    def testCallsAppend(self):
        self.parser.register_positional(1, ["SRC"])
        self.parser.register_positional(1)
        self.assertEqual([p.name for p in self.parser.positionals], ["SRC", "ARG_2"])
        self.assertEqual([p.index for p in self.parser.positionals], [0, 1])

    def testNegativeCountRejected(self):
        with self.assertRaises(ValueError):
            self.parser.register_positional(-1)


class TestFindOption(TestCase):
    """Lookup by short or long name."""

    def setUp(self):
        self.parser = ArgumentParser()
        self.parser.register_option(("v", "verbose"), Requirement.OPTIONAL, ValueType.BOOL, "")

    def testByShortAndLong(self):
        self.assertIs(self.parser.find_option("v"), self.parser.find_option("verbose"))

    def testMissing(self):
        self.assertIsNone(self.parser.find_option("quiet"))
        self.assertIsNone(self.parser.find_option(""))

    def testAmbiguousNameResolvesToNothing(self):
        self.parser.register_option(("x", "v"), Requirement.OPTIONAL, ValueType.BOOL, "")
        self.assertIsNone(self.parser.find_option("v"))
        self.assertTrue(self.parser.has_option("verbose"))
        self.assertTrue(self.parser.has_option("x"))


if __name__ == "__main__":
    unittest.main()
