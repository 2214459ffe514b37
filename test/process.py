"""
Process facade tests.

Scope
- Exit codes, captured output, streamed chunks.
- Working directory and environment overrides.
- Timeouts.

Conventions
- Test method names follow CamelCase per project convention.
- Child processes run the current interpreter, quoted for the shell.
"""
import contextlib
import io
import os
import shlex
import sys
import tempfile
import unittest
from unittest import TestCase

from sprig import Process
from sprig.faults import FaultCode, ProcessTimedOutError
from sprig.process import ERR, OUT, run

PYTHON = shlex.quote(sys.executable)


def script(code):
    return f"{PYTHON} -c {shlex.quote(code)}"


class TestProcess(TestCase):
    def testCapturesOutput(self) -> None:
        chunks = []
        process = Process(script("import sys; print('one'); print('two'); print('oops', file=sys.stderr)"))

        self.assertEqual(process.run(lambda kind, chunk: chunks.append((kind, chunk))), 0)
        self.assertTrue(process.successful)
        self.assertEqual(process.output, "one\ntwo\n")
        self.assertEqual(process.error_output, "oops\n")
        self.assertEqual([chunk for kind, chunk in chunks if kind == OUT], ["one\n", "two\n"])
        self.assertEqual([chunk for kind, chunk in chunks if kind == ERR], ["oops\n"])

    def testExitCode(self) -> None:
        process = Process(script("raise SystemExit(3)"))
        self.assertEqual(process.run(lambda kind, chunk: None), 3)
        self.assertEqual(process.exit_code, 3)
        self.assertFalse(process.successful)

    def testWorkingDirectory(self) -> None:
        with tempfile.TemporaryDirectory() as directory:
            process = Process(script("import os; print(os.getcwd())"), cwd=directory)
            process.run(lambda kind, chunk: None)
            self.assertEqual(os.path.realpath(process.output.strip()), os.path.realpath(directory))

    def testEnvironment(self) -> None:
        process = Process(script("import os; print(os.environ['FORGE_STAGE'])"), env={"FORGE_STAGE": "qa"})
        process.run(lambda kind, chunk: None)
        self.assertEqual(process.output, "qa\n")

    def testTimeout(self) -> None:
        """
        the child is killed and the fault carries the process.
        """
        process = Process(script("import time; time.sleep(30)"), timeout=0.5)

        with self.assertRaises(ProcessTimedOutError) as context:
            process.run(lambda kind, chunk: None)
        self.assertEqual(context.exception.options["code"], FaultCode.PROCESS_TIMEOUT)
        self.assertIs(context.exception.options["process"], process)
        self.assertFalse(process.successful)

    def testDefaultCallbackEchoes(self) -> None:
        buffer = io.StringIO()
        with contextlib.redirect_stdout(buffer):
            self.assertEqual(run(script("print('hello')")), 0)
        self.assertEqual(buffer.getvalue(), "hello\n")

    def testValidation(self) -> None:
        with self.assertRaises(TypeError):
            Process("   ")
        with self.assertRaises(ValueError):
            Process("true", timeout=0)
        with self.assertRaises(TypeError):
            Process("true").run("not callable")


if __name__ == "__main__":
    unittest.main()
