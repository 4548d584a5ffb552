"""
Arguments module behavioral tests (descriptor construction and validation).

Scope
- Validate field descriptors (Positional, Flag, FlagsEnum): defaults,
  normalization of metavar/descr, kind shorthands and read-only attributes.
- Validate value kinds (Member, Enumeration): member constraints and the
  flags-mode single-bit rule.
- Validate Command construction rules (ordering, duplicates, names).

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None for any parameter; omit instead.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from rich.text import Text

from flagship import (
    Positional,
    Flag,
    FlagsEnum,
    Enumeration,
    Member,
    Primitive,
    FieldKind,
    Command,
    command,
)


def _build():
    return Enumeration(
        "Build",
        Member("None", 0),
        Member("Verbose", 1, long="verbose", short="v", descr="Verbose output"),
        Member("Debug", 2, long="debug", short="d", descr="Debug symbols"),
        Member("NoCache", 4, descr="Skip the cache"),
        flags=True,
    )


class TestPositional(TestCase):
    """Behavioral tests for Positional fields."""

    def testDefaults(self):
        field = Positional("name")
        self.assertEqual(field.kind, FieldKind.POSITIONAL)
        self.assertIs(field.type, Primitive.STRING)
        self.assertEqual(field.metavar, "name")
        self.assertIsNone(field.descr)
        self.assertFalse(field.nullable)

    def testMetavarDerivedFromName(self):
        self.assertEqual(Positional("source_file").metavar, "source-file")
        self.assertEqual(Positional("Target").metavar, "target")

    def testExplicitMetavar(self):
        self.assertEqual(Positional("src", metavar="SOURCE").metavar, "SOURCE")

    def testShorthandKinds(self):
        self.assertIs(Positional("a", type=str).type, Primitive.STRING)
        self.assertIs(Positional("b", type=int).type, Primitive.INT64)
        self.assertIs(Positional("c", type=float).type, Primitive.FLOAT64)
        self.assertIs(Positional("d", type="int32").type, Primitive.INT32)

    def testSingleValueEnumerationKind(self):
        Color = Enumeration("Color", Member("Red", 1), Member("Green", 2))
        self.assertIs(Positional("color", type=Color).type, Color)

    def testFlagsEnumerationKindRejected(self):
        with self.assertRaises(TypeError):
            Positional("build", type=_build())

    def testUnknownKindRejected(self):
        with self.assertRaises(TypeError):
            Positional("when", type=list)

    def testNameMustBeIdentifier(self):
        with self.assertRaises(ValueError):
            Positional("source file")
        with self.assertRaises(TypeError):
            Positional(3)

    def testDescrNormalization(self):
        self.assertEqual(Positional("name", descr="  the name ").descr, "the name")
        self.assertIsInstance(Positional("name", descr=Text("styled")).descr, Text)
        with self.assertRaises(ValueError):
            Positional("name", descr="   ")
        with self.assertRaises(TypeError):
            Positional("name", descr=None)

    def testAttributesAreReadOnly(self):
        field = Positional("name")
        with self.assertRaises(AttributeError):
            field.name = "other"

    def testRepr(self):
        self.assertTrue(repr(Positional("name")).startswith("positional(name='name', "))


class TestFlag(TestCase):
    """Behavioral tests for Flag fields."""

    def testBoolDefaults(self):
        field = Flag("verbose", long="verbose", short="v")
        self.assertEqual(field.kind, FieldKind.FLAG)
        self.assertIs(field.type, Primitive.BOOL)
        self.assertIs(field.default, False)
        self.assertFalse(field.nullable)

    def testValuedFlagDefaultsToNone(self):
        field = Flag("retries", long="retries", type=Primitive.INT32)
        self.assertIsNone(field.default)
        self.assertTrue(field.nullable)

    def testExplicitDefault(self):
        self.assertEqual(Flag("retries", long="retries", type=int, default=3).default, 3)

    def testAliasDerivedWhenUndeclared(self):
        field = Flag("noCache")
        self.assertIsNone(field.long)
        self.assertIsNone(field.short)
        self.assertEqual(str(field.alias), "--no-cache")

    def testLongAliasMustBeKebabName(self):
        with self.assertRaises(ValueError):
            Flag("verbose", long="--verbose")
        with self.assertRaises(ValueError):
            Flag("verbose", long="very verbose")
        self.assertEqual(Flag("dry_run", long="dry-run").long, "dry-run")

    def testShortAliasMustBeSingleCharacter(self):
        with self.assertRaises(ValueError):
            Flag("verbose", short="vv")
        with self.assertRaises(ValueError):
            Flag("verbose", short="-")
        with self.assertRaises(TypeError):
            Flag("verbose", short=1)

    def testAliasProperty(self):
        self.assertEqual(str(Flag("verbose", long="verbose", short="v").alias), "-v, --verbose")

    def testTypename(self):
        self.assertEqual(type(Flag("q", short="q")).__typename__, "flag")


class TestEnumeration(TestCase):
    """Behavioral tests for Member and Enumeration value kinds."""

    def testMemberValueMustBeInteger(self):
        with self.assertRaises(TypeError):
            Member("Verbose", "1")
        with self.assertRaises(TypeError):
            Member("Verbose", True)

    def testMemberAliasDerived(self):
        self.assertEqual(Member("NoCache", 4).alias.long, "no-cache")

    def testAtLeastOneMember(self):
        with self.assertRaises(TypeError):
            Enumeration("Empty")

    def testDuplicateNamesRejected(self):
        with self.assertRaises(ValueError):
            Enumeration("Color", Member("Red", 1), Member("RED", 2, long="crimson"))

    def testDuplicateValuesRejected(self):
        with self.assertRaises(ValueError):
            Enumeration("Color", Member("Red", 1), Member("Green", 1))

    def testFlagsRequireSingleBits(self):
        with self.assertRaises(ValueError):
            Enumeration("Build", Member("Both", 3), flags=True)
        with self.assertRaises(ValueError):
            Enumeration("Build", Member("Negative", -1), flags=True)

    def testZeroAndBits(self):
        Build = _build()
        self.assertEqual(Build.zero.name, "None")
        self.assertEqual([member.name for member in Build.bits], ["Verbose", "Debug", "NoCache"])
        self.assertEqual(len(Build), 4)
        self.assertIsInstance(Build.members, tuple)

    def testSingleValueBitsKeepEveryMember(self):
        Level = Enumeration("Level", Member("Off", 0), Member("On", 1))
        self.assertEqual(len(Level.bits), 2)

    def testTypename(self):
        self.assertEqual(type(_build()).__typename__, "enumeration")


class TestFlagsEnum(TestCase):
    """Behavioral tests for FlagsEnum fields."""

    def testMembersExcludeZero(self):
        field = FlagsEnum("options", _build())
        self.assertEqual(field.kind, FieldKind.FLAGS_ENUM)
        self.assertEqual(field.default, 0)
        self.assertNotIn("None", [member.name for member in field.members])

    def testRequiresFlagsEnumeration(self):
        Color = Enumeration("Color", Member("Red", 1), Member("Green", 2))
        with self.assertRaises(TypeError):
            FlagsEnum("color", Color)
        with self.assertRaises(TypeError):
            FlagsEnum("color", "Color")

    def testTypename(self):
        self.assertEqual(type(FlagsEnum("options", _build())).__typename__, "flags-enum")


class TestCommandDescriptor(TestCase):
    """Behavioral tests for Command construction rules."""

    def testFieldPartitions(self):
        build = Command(
            "build",
            Positional("project"),
            Flag("jobs", long="jobs", short="j", type=Primitive.INT32),
            FlagsEnum("options", _build()),
        )
        self.assertEqual([field.name for field in build.positionals], ["project"])
        self.assertEqual([field.name for field in build.flags], ["jobs"])
        self.assertEqual([field.name for field in build.enums], ["options"])
        self.assertIsInstance(build.fields, tuple)

    def testPositionalAfterFlagRejected(self):
        with self.assertRaises(ValueError):
            Command("copy", Flag("verbose", short="v"), Positional("source"))

    def testDuplicateFieldNamesRejected(self):
        with self.assertRaises(ValueError):
            Command("copy", Positional("source"), Flag("source", long="source"))

    def testNameRules(self):
        with self.assertRaises(ValueError):
            Command("   ")
        with self.assertRaises(ValueError):
            Command("two words")
        with self.assertRaises(TypeError):
            Command(3)

    def testNonFieldRejected(self):
        with self.assertRaises(TypeError):
            Command("copy", "source")

    def testCallbackMustBeCallable(self):
        with self.assertRaises(TypeError):
            Command("copy", callback="run")

    def testDecoratorDefaults(self):
        @command(Positional("name"))
        def say_hello(args):
            """Greets a person by name"""
            return 0

        self.assertIsInstance(say_hello, Command)
        self.assertEqual(say_hello.name, "say-hello")
        self.assertEqual(say_hello.descr, "Greets a person by name")
        self.assertEqual(say_hello.callback.__name__, "say_hello")

    def testBareDecorator(self):
        @command
        def ping(args):
            pass

        self.assertEqual(ping.name, "ping")
        self.assertIsNone(ping.descr)
        self.assertEqual(ping.fields, ())

    def testDecoratorOverrides(self):
        @command(name="Greet", descr="Says hello")
        def callback(args):
            """Ignored"""

        self.assertEqual(callback.name, "Greet")
        self.assertEqual(callback.descr, "Says hello")

    def testCallForwardsToCallback(self):
        received = []
        ping = Command("ping", callback=lambda arguments: received.append(arguments) or 7)
        self.assertEqual(ping({"x": 1}), 7)
        self.assertEqual(received, [{"x": 1}])
        self.assertIsNone(Command("noop")({}))


if __name__ == '__main__':
    unittest.main()
