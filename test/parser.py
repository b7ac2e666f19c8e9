"""
Parser module behavioral tests (option scanning, command dispatch, positional binding).

Scope
- Validate option binding: flags, values, defaults, aliasing of short/long keys.
- Validate command dispatch and command-local option scanning.
- Validate positional binding for mandatory, optional and trailing arguments.
- Validate user input faults (type, code, message, attached context).
- Validate that one schema can be parsed repeatedly.

Conventions
- Test method names follow CamelCase per project convention.
- Parsing goes through Program.parse(), which never prints and never exits.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argprogram import Program, ParseResult
from argprogram.faults import (
    FaultCode,
    MissingArgumentsError,
    MissingCommandError,
    MissingOptionValueError,
    TooManyArgumentsError,
    UnknownCommandError,
    UnknownOptionError,
)


def _noop(program):
    pass


def _direct():
    program = Program("no-command", "an example program without any command", _noop)
    program.add_flag("", "flag-a", "a long flag")
    program.add_flag("b", "", "a short flag")
    program.add_option("c", "option-c", "value", "foo", "an option with both a short and long name")
    program.add_argument("arg-1", "the first argument")
    program.add_argument("arg-2", "the second argument")
    program.add_optional_argument("arg-opt-1", "the first optional argument")
    program.add_optional_argument("arg-opt-2", "the second optional argument")
    program.add_trailing_argument("arg-trailing", "all trailing arguments")
    return program


def _commands():
    program = Program("commands", "an example program with commands")
    program.add_flag("", "flag-a", "a long flag")
    program.add_option("c", "option-c", "value", "foo", "an option with both a short and long name")
    foo = program.add_command("foo", "foo command", _noop)
    foo.add_flag("d", "flag-d", "a command flag")
    foo.add_argument("a1", "the first argument")
    foo.add_argument("a2", "the second argument")
    foo.add_trailing_argument("a3", "all trailing arguments")
    program.add_command("bar", "bar command", _noop)
    return program


class TestOptionScanning(TestCase):
    """Behavioral tests for option binding."""

    def setUp(self):
        self.program = _direct()

    def testFlagSetWhenPresent(self):
        result = self.program.parse(["--flag-a", "x", "y"])
        self.assertIsInstance(result, ParseResult)
        self.assertTrue(result.is_option_set("flag-a"))

    def testFlagUnsetWhenAbsent(self):
        result = self.program.parse(["x", "y"])
        self.assertFalse(result.is_option_set("flag-a"))
        self.assertFalse(result.is_option_set("b"))

    def testOptionDefaultWhenAbsent(self):
        result = self.program.parse(["x", "y"])
        self.assertFalse(result.is_option_set("option-c"))
        self.assertEqual(result.option_value("option-c"), "foo")

    def testOptionValueConsumed(self):
        result = self.program.parse(["--option-c", "bar", "x", "y"])
        self.assertEqual(result.option_value("option-c"), "bar")
        self.assertEqual(result.argument_value("arg-1"), "x")

    def testOptionValueTakenVerbatimEvenWhenOptionShaped(self):
        result = self.program.parse(["-c", "--flag-a", "x", "y"])
        self.assertEqual(result.option_value("c"), "--flag-a")
        self.assertFalse(result.is_option_set("flag-a"))

    def testShortAndLongKeysAlias(self):
        result = self.program.parse(["-c", "bar", "x", "y"])
        self.assertTrue(result.is_option_set("option-c"))
        self.assertEqual(result.option_value("option-c"), "bar")
        self.assertEqual(result.option_value("c"), "bar")

    def testUnknownOption(self):
        with self.assertRaises(UnknownOptionError) as context:
            self.program.parse(["--nope"])
        self.assertEqual(context.exception.message, "unknown option 'nope'")
        self.assertEqual(context.exception.code, FaultCode.UNKNOWN_OPTION)
        self.assertIs(context.exception.options["program"], self.program)

    def testMissingOptionValue(self):
        with self.assertRaises(MissingOptionValueError) as context:
            self.program.parse(["-c"])
        self.assertIn("missing value for option", context.exception.message)

    def testDoubleDashEndsOptionScanning(self):
        result = self.program.parse(["--", "-b", "--flag-a"])
        self.assertFalse(result.is_option_set("b"))
        self.assertEqual(result.argument_value("arg-1"), "-b")
        self.assertEqual(result.argument_value("arg-2"), "--flag-a")

    def testNonOptionShapedTokensArePositional(self):
        result = self.program.parse(["-", "-bx"])
        self.assertEqual(result.argument_value("arg-1"), "-")
        self.assertEqual(result.argument_value("arg-2"), "-bx")

    def testOptionsAfterPositionalsAreNotScanned(self):
        result = self.program.parse(["x", "y", "-b"])
        self.assertFalse(result.is_option_set("b"))
        self.assertEqual(result.argument_value("arg-opt-1"), "-b")

    def testStringTokensAreSplit(self):
        result = self.program.parse("-c 'a b' x y")
        self.assertEqual(result.option_value("c"), "a b")

    def testUnknownNameIsLookupError(self):
        result = self.program.parse(["x", "y"])
        with self.assertRaises(LookupError):
            result.is_option_set("nope")
        with self.assertRaises(LookupError):
            result.argument_value("nope")

    def testHelpShortCircuits(self):
        result = self.program.parse(["-h"])
        self.assertTrue(result.help)
        self.assertEqual(result.argument_value("arg-1"), "")


class TestPositionalBinding(TestCase):
    """Behavioral tests for positional arguments without commands."""

    def setUp(self):
        self.program = _direct()

    def testMandatoryOnly(self):
        result = self.program.parse(["x", "y"])
        self.assertEqual(result.argument_value("arg-1"), "x")
        self.assertEqual(result.argument_value("arg-2"), "y")
        self.assertEqual(result.argument_value("arg-opt-1"), "")
        self.assertEqual(result.argument_value("arg-opt-2"), "")
        self.assertEqual(result.trailing_argument_values("arg-trailing"), ())

    def testOptionalBoundInOrder(self):
        result = self.program.parse(["x", "y", "z"])
        self.assertEqual(result.argument_value("arg-opt-1"), "z")
        self.assertEqual(result.argument_value("arg-opt-2"), "")

    def testTrailingCapturesRest(self):
        result = self.program.parse(["1", "2", "3", "4", "5", "6"])
        self.assertEqual(result.argument_value("arg-opt-2"), "4")
        self.assertEqual(result.trailing_argument_values("arg-trailing"), ("5", "6"))

    def testMissingArguments(self):
        with self.assertRaises(MissingArgumentsError) as context:
            self.program.parse(["x"])
        self.assertEqual(context.exception.message, "missing argument(s)")

    def testTooManyArguments(self):
        program = Program("tool", "", _noop)
        program.add_argument("file")
        with self.assertRaises(TooManyArgumentsError) as context:
            program.parse(["a", "b"])
        self.assertEqual(context.exception.message, "too many arguments")

    def testTooManyArgumentsWithoutArguments(self):
        with self.assertRaises(TooManyArgumentsError):
            Program("tool", "", _noop).parse(["a"])

    def testRepeatedParsingIsIndependent(self):
        first = self.program.parse(["-b", "x", "y"])
        second = self.program.parse(["p", "q", "r"])
        self.assertTrue(first.is_option_set("b"))
        self.assertFalse(second.is_option_set("b"))
        self.assertEqual(first.argument_value("arg-opt-1"), "")
        self.assertEqual(second.argument_value("arg-opt-1"), "r")

    def testCommandNameWithoutCommands(self):
        with self.assertRaises(LookupError):
            self.program.parse(["x", "y"]).command_name


class TestCommandDispatch(TestCase):
    """Behavioral tests for programs with commands."""

    def setUp(self):
        self.program = _commands()

    def testDispatch(self):
        result = self.program.parse(["--flag-a", "foo", "-d", "x", "y"])
        self.assertEqual(result.command_name, "foo")
        self.assertIs(result.command, self.program.commands["foo"])
        self.assertTrue(result.is_option_set("flag-a"))
        self.assertTrue(result.is_option_set("flag-d"))

    def testGlobalOptionsAcceptedAfterCommand(self):
        result = self.program.parse(["foo", "-c", "bar", "x", "y"])
        self.assertEqual(result.option_value("option-c"), "bar")

    def testCommandOptionsRejectedBeforeCommand(self):
        with self.assertRaises(UnknownOptionError) as context:
            self.program.parse(["-d", "foo", "x", "y"])
        self.assertIsNone(context.exception.options["command"])

    def testTrailingBoundary(self):
        result = self.program.parse(["foo", "x", "y"])
        self.assertEqual(result.argument_value("a1"), "x")
        self.assertEqual(result.argument_value("a2"), "y")
        self.assertEqual(result.trailing_argument_values("a3"), ())

        result = self.program.parse(["foo", "x", "y", "z", "w"])
        self.assertEqual(result.trailing_argument_values("a3"), ("z", "w"))

        with self.assertRaises(MissingArgumentsError) as context:
            self.program.parse(["foo", "x"])
        self.assertIs(context.exception.options["command"], self.program.commands["foo"])

    def testMissingCommand(self):
        with self.assertRaises(MissingCommandError) as context:
            self.program.parse(["--flag-a"])
        self.assertEqual(context.exception.message, "missing command")

    def testUnknownCommand(self):
        with self.assertRaises(UnknownCommandError) as context:
            self.program.parse(["baz"])
        self.assertEqual(context.exception.message, "unknown command 'baz'")
        self.assertEqual(context.exception.code, FaultCode.UNKNOWN_COMMAND)

    def testDoubleDashBeforeCommandSkipsCommandOptions(self):
        result = self.program.parse(["--", "foo", "-d", "x", "--flag-a"])
        self.assertEqual(result.command_name, "foo")
        self.assertFalse(result.is_option_set("flag-d"))
        self.assertFalse(result.is_option_set("flag-a"))
        self.assertEqual(result.argument_value("a1"), "-d")
        self.assertEqual(result.argument_value("a2"), "x")
        self.assertEqual(result.trailing_argument_values("a3"), ("--flag-a",))

    def testDoubleDashAfterCommand(self):
        result = self.program.parse(["foo", "-d", "--", "-c", "x"])
        self.assertTrue(result.is_option_set("flag-d"))
        self.assertFalse(result.is_option_set("option-c"))
        self.assertEqual(result.argument_value("a1"), "-c")

    def testCommandWithoutArgumentsRejectsExtraTokens(self):
        with self.assertRaises(TooManyArgumentsError):
            self.program.parse(["bar", "x"])

    def testHelpBeforeCommand(self):
        result = self.program.parse(["-h"])
        self.assertTrue(result.help)
        self.assertIsNone(result.command)
        self.assertIsNone(result.command_name)

    def testHelpAfterCommandSkipsArguments(self):
        result = self.program.parse(["foo", "--help"])
        self.assertTrue(result.help)
        self.assertEqual(result.command_name, "foo")

    def testHelpCommandSynthesized(self):
        result = self.program.parse(["help", "foo", "bar"])
        self.assertEqual(result.command_name, "help")
        self.assertEqual(result.trailing_argument_values("command"), ("foo", "bar"))

    def testCommandScopedLookupFallsBackToGlobal(self):
        result = self.program.parse(["bar"])
        self.assertFalse(result.is_option_set("flag-a"))
        with self.assertRaises(LookupError):
            result.is_option_set("flag-d")


if __name__ == "__main__":
    unittest.main()
