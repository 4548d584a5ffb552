"""
Executor behavioral tests (routing, exit codes, fault reporting).

Scope
- Validate the dispatcher outcomes: empty invocation, unknown command,
  binding faults paired with the command help, "--help", callback results.
- Validate invoke() with catalogs, single commands and prompt forms.

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured through rich consoles writing to in-memory buffers.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from flagship import (
    Catalog,
    Command,
    Executor,
    Positional,
    Flag,
    Primitive,
    invoke,
    render_command_help,
    render_command_list,
)


def _console():
    return Console(file=io.StringIO(), width=200, color_system=None)


class TestExecutor(TestCase):

    def setUp(self):
        self.calls = []
        self.catalog = Catalog()

        @self.catalog.command(
            Positional("name", descr="The name of the person to greet"),
            Flag("verbose", long="verbose", short="v", descr="Show detailed output"),
        )
        def greet(args):
            """Greets a person by name"""
            self.calls.append(dict(args))

        @self.catalog.command(
            Positional("source"),
            Flag("retries", long="retries", short="r", type=Primitive.INT32),
        )
        def copy(args):
            """Copies a file from source to destination"""
            return 3

        self.greet = greet
        self.stdout = _console()
        self.stderr = _console()
        self.executor = Executor(self.catalog, console=self.stdout, stderr=self.stderr)

    def output(self):
        return self.stdout.file.getvalue(), self.stderr.file.getvalue()

    def testCatalogIsFrozen(self):
        self.assertTrue(self.executor.catalog.frozen)

    def testSuccessfulRun(self):
        self.assertEqual(self.executor.execute(["greet", "Alice", "-v"]), 0)
        self.assertEqual(self.calls, [{"name": "Alice", "verbose": True}])
        self.assertEqual(self.output(), ("", ""))

    def testCommandNameIsCaseInsensitive(self):
        self.assertEqual(self.executor.execute(["GREET", "Bob"]), 0)
        self.assertEqual(self.calls, [{"name": "Bob", "verbose": False}])

    def testCallbackExitCode(self):
        self.assertEqual(self.executor.execute(["copy", "a.txt"]), 3)

    def testEmptyInvocation(self):
        self.assertEqual(self.executor.execute([]), 1)
        stdout, stderr = self.output()
        self.assertEqual(stdout, "")
        self.assertIn("no command specified", stderr)
        self.assertTrue(stderr.endswith("\n" + render_command_list(self.catalog)))

    def testUnknownCommand(self):
        self.assertEqual(self.executor.execute(["gret", "Alice"]), 1)
        stdout, stderr = self.output()
        self.assertEqual(stdout, "")
        self.assertIn("unknown command 'gret'", stderr)
        self.assertIn("did you mean 'greet'?", stderr)
        self.assertTrue(stderr.endswith(render_command_list(self.catalog)))
        self.assertEqual(self.calls, [])

    def testMissingArgumentShowsHelp(self):
        self.assertEqual(self.executor.execute(["greet"]), 1)
        stdout, stderr = self.output()
        self.assertEqual(stdout, "")
        self.assertIn("missing required argument <name>", stderr)
        self.assertIn("Missing Argument", stderr)
        self.assertTrue(stderr.endswith("\n" + render_command_help(self.greet)))
        self.assertEqual(self.calls, [])

    def testInvalidValueShowsHelp(self):
        self.assertEqual(self.executor.execute(["copy", "a.txt", "--retries", "many"]), 1)
        _, stderr = self.output()
        self.assertIn("invalid value 'many' for -r, --retries", stderr)
        self.assertIn("Usage: copy <source> [options]", stderr)

    def testHelpRequest(self):
        for spelling in ("--help", "-h"):
            with self.subTest(spelling=spelling):
                stdout = _console()
                executor = Executor(self.catalog, console=stdout, stderr=self.stderr)
                self.assertEqual(executor.execute(["greet", spelling]), 0)
                self.assertEqual(stdout.file.getvalue(), render_command_help(self.greet))
        self.assertEqual(self.calls, [])

    def testDeclaredHelpFlagIsBound(self):
        received = []
        catalog = Catalog([Command(
            "docs",
            Flag("help", long="help", short="h"),
            callback=lambda args: received.append(args.help),
        )])
        self.assertEqual(Executor(catalog, console=_console(), stderr=_console()).execute(["docs", "-h"]), 0)
        self.assertEqual(received, [True])

    def testFailingCallbackIsReported(self):
        def explode(args):
            raise RuntimeError("disk is full")

        catalog = Catalog([Command("throw", Positional("target"), callback=explode, descr="Always fails")])
        stdout, stderr = _console(), _console()
        self.assertEqual(Executor(catalog, console=stdout, stderr=stderr).execute(["throw", "x"]), 1)
        output = stderr.file.getvalue()
        self.assertEqual(stdout.file.getvalue(), "")
        self.assertIn("error executing command 'throw': disk is full", output)
        self.assertIn("11141 | Command Failed", output)
        self.assertTrue(output.endswith("\n" + render_command_help(catalog.lookup("throw"))))

    def testInterruptsPropagate(self):
        def interrupt(args):
            raise KeyboardInterrupt

        catalog = Catalog([Command("stop", callback=interrupt)])
        with self.assertRaises(KeyboardInterrupt):
            Executor(catalog, console=_console(), stderr=_console()).execute(["stop"])

    def testInvalidCallbackResult(self):
        catalog = Catalog([Command("bad", callback=lambda args: "done")])
        with self.assertRaises(TypeError):
            Executor(catalog, console=_console(), stderr=_console()).execute(["bad"])

    def testStringArgsRejected(self):
        with self.assertRaises(TypeError):
            self.executor.execute("greet Alice")

    def testCatalogRequired(self):
        with self.assertRaises(TypeError):
            Executor({"greet": self.greet})

    def testFancyFaults(self):
        executor = Executor(self.catalog, console=self.stdout, stderr=self.stderr, fancy=True)
        self.assertEqual(executor.execute([]), 1)
        self.assertIn("no command specified", self.stderr.file.getvalue())


class TestInvoke(TestCase):

    def setUp(self):
        self.calls = []
        self.greet = Command(
            "greet",
            Positional("name"),
            Flag("verbose", long="verbose", short="v"),
            callback=lambda args: self.calls.append(dict(args)),
        )

    def testSingleCommandWithString(self):
        self.assertEqual(invoke(self.greet, "'Ada Lovelace' -v", console=_console(), stderr=_console()), 0)
        self.assertEqual(self.calls, [{"name": "Ada Lovelace", "verbose": True}])

    def testSingleCommandWithTokens(self):
        self.assertEqual(invoke(self.greet, ["Ada"], console=_console(), stderr=_console()), 0)
        self.assertEqual(self.calls, [{"name": "Ada", "verbose": False}])

    def testCatalogPromptStartsWithName(self):
        catalog = Catalog([self.greet])
        self.assertEqual(invoke(catalog, "greet Ada --verbose", console=_console(), stderr=_console()), 0)
        self.assertEqual(self.calls, [{"name": "Ada", "verbose": True}])

    def testFaultExitCode(self):
        stderr = _console()
        self.assertEqual(invoke(self.greet, [], console=_console(), stderr=stderr), 1)
        self.assertIn("missing required argument <name>", stderr.file.getvalue())

    def testInvalidTargets(self):
        with self.assertRaises(TypeError):
            invoke(print, "x")
        with self.assertRaises(TypeError):
            invoke(self.greet, ["Ada", 1])
        with self.assertRaises(TypeError):
            invoke(self.greet, 3)


if __name__ == '__main__':
    unittest.main()
