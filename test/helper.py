"""
Help rendering and invoke() behavioral tests.

Scope
- Validate the generated listing: header, usage, nesting, alignment, arity
  labels and the reserved help row.
- Validate explicit help text, print_help() and the fancy panel.
- Validate the invoke() runner (success, fault exit code, argument checks).

Conventions
- Test method names follow CamelCase per project convention.
- Assertions run on the plain text of the rich renderables.
"""

from __future__ import annotations

import io
import unittest
import warnings
from contextlib import redirect_stderr, redirect_stdout
from unittest import TestCase

from hashparse import Parser, Template, UnknownParentWarning, invoke


class TestFormatHelp(TestCase):

    def setUp(self):
        self.parser = Parser("calc", "hashparse example calculator", "someone", colorful=False)
        self.parser.add("--say", 1, "repeat something")
        self.c = self.parser.add("-c", 0, "open the calculator context")
        self.add = self.parser.add_subcommand(self.c, ("-a", "--add"), 2, "add two numbers")
        self.parser.add_subcommand(self.add, "--round", 0, "round the result")
        self.parser.add_template(Template("--v", arity=2, optional=True))
        self.lines = self.parser.format_help().plain.splitlines()

    def testHeader(self):
        self.assertEqual(self.lines[0], "calc: hashparse example calculator")
        self.assertEqual(self.lines[1], "author: someone")
        self.assertEqual(self.lines[2], "usage:")
        self.assertEqual(self.lines[3], "    $ calc -[-command] [value/s...]")
        self.assertEqual(self.lines[4], "arguments:")

    def testRowsFollowNesting(self):
        rows = self.lines[5:]
        self.assertEqual(len(rows), 6)
        self.assertTrue(rows[0].startswith("    --say [1 values]"))
        self.assertTrue(rows[1].startswith("    -c "))
        self.assertTrue(rows[2].startswith("        -a | --add [2 values]"))
        self.assertTrue(rows[3].startswith("            --round"))
        self.assertEqual(rows[4], "    --v [2 optional values]")
        self.assertTrue(rows[5].startswith("    -h, --help"))

    def testDescriptionsAreAligned(self):
        descrs = (
            "repeat something",
            "open the calculator context",
            "add two numbers",
            "round the result",
            "print this help message and exit",
        )
        columns = {line.index(descr) for line in self.lines[5:] for descr in descrs if descr in line}
        self.assertEqual(len(columns), 1)
        # widest label: "-a | --add [2 values]" at level 1
        self.assertEqual(columns.pop(), 4 + 4 + len("-a | --add [2 values]") + 4)

    def testOrphansAreOmitted(self):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UnknownParentWarning)
            self.parser.add_subcommand(99, "--orphan", 0, "never shown")
        self.assertNotIn("--orphan", self.parser.format_help().plain)

    def testCustomUsage(self):
        parser = Parser("calc", usage="$ calc add 1 2", colorful=False)
        self.assertIn("    $ calc add 1 2", parser.format_help().plain.splitlines())

    def testEmptyParserListsHelpOnly(self):
        lines = Parser("calc").format_help().plain.splitlines()
        self.assertEqual(lines[-2], "arguments:")
        self.assertTrue(lines[-1].startswith("    -h, --help"))

    def testExplicitHelpReplacesListing(self):
        parser = Parser("calc", help="calc ADD|SUB numbers...")
        parser.add("--say", 1, "repeat something")
        self.assertEqual(parser.format_help().plain, "calc ADD|SUB numbers...")

    def testMetadataValidation(self):
        with self.assertRaises(ValueError):
            Parser("  ")
        with self.assertRaises(TypeError):
            Parser(descr=3)


class TestPrintHelp(TestCase):

    def testPrintsListing(self):
        parser = Parser("calc", colorful=False)
        parser.add("--say", 1, "repeat something")
        with redirect_stdout(io.StringIO()) as output:
            parser.print_help()
        self.assertIn("arguments:", output.getvalue())
        self.assertIn("repeat something", output.getvalue())

    def testFancyPanel(self):
        parser = Parser("calc", fancy=True)
        with redirect_stdout(io.StringIO()) as output:
            parser.print_help()
        self.assertIn("CALC HELP", output.getvalue())


class TestInvoke(TestCase):

    def setUp(self):
        self.parser = Parser("calc", colorful=False)
        self.parser.add("--say", 1, "repeat something")

    def testReturnsResult(self):
        result = invoke(self.parser, ["--say", "hi"])
        self.assertEqual(result.get("--say").values, ("hi",))

    def testFaultExitsWithCodeOne(self):
        with redirect_stderr(io.StringIO()) as output:
            with self.assertRaises(SystemExit) as context:
                invoke(self.parser, "--say")
        self.assertEqual(context.exception.code, 1)
        self.assertIn("number of values".title(), output.getvalue())
        self.assertIn("calc", output.getvalue())

    def testRejectsNonParser(self):
        with self.assertRaises(TypeError):
            invoke(["--say"])

    def testCallbackErrorsAreNotCaught(self):
        parser = Parser("calc")

        def explode():
            raise RuntimeError("boom")

        parser.add_template(Template("--boom", callback=explode))
        with self.assertRaises(RuntimeError):
            invoke(parser, ["--boom"])


if __name__ == "__main__":
    unittest.main()
