"""
Keystroke reader tests.

Scope
- Decoding of control characters and escape sequences.
- ScriptedKeyboard replay and context accounting.
- LineKeyboard over plain text streams.
- TerminalKeyboard over a pseudo-terminal (POSIX only).

Conventions
- Test method names follow CamelCase per project convention.
"""
import io
import os
import unittest
from unittest import TestCase

from sprig.keys import Key, LineKeyboard, ScriptedKeyboard, TerminalKeyboard, keyboard, termios


def drain(keys):
    read = []
    while (key := keys.read()) is not None:
        read.append(key)
    return read


class TestDecoding(TestCase):
    def testControls(self) -> None:
        self.assertEqual(
            drain(ScriptedKeyboard("\r\n\t\x7f\x08")),
            [Key.ENTER, Key.ENTER, Key.TAB, Key.BACKSPACE, Key.BACKSPACE],
        )

    def testArrowSequences(self) -> None:
        self.assertEqual(
            drain(ScriptedKeyboard(["\x1b[A", "\x1b[B", "\x1b[C", "\x1b[D", "\x1bOA", "\x1bOB"])),
            [Key.UP, Key.DOWN, Key.RIGHT, Key.LEFT, Key.UP, Key.DOWN],
        )

    def testLoneEscape(self) -> None:
        self.assertEqual(drain(ScriptedKeyboard("\x1b")), [Key.ESCAPE])
        self.assertEqual(drain(ScriptedKeyboard(["\x1b", Key.ENTER])), [Key.ESCAPE, Key.ENTER])

    def testUnknownSequences(self) -> None:
        """
        unmapped sequences are consumed whole and read as a single unknown key.
        """
        self.assertEqual(drain(ScriptedKeyboard("\x1b[3~a")), [Key.UNKNOWN, "a"])
        self.assertEqual(drain(ScriptedKeyboard("\x1bxa")), [Key.UNKNOWN, "a"])
        self.assertEqual(drain(ScriptedKeyboard("\x01")), [Key.UNKNOWN])

    def testPrintable(self) -> None:
        self.assertEqual(drain(ScriptedKeyboard("aZ é")), ["a", "Z", " ", "é"])

    def testEndOfInput(self) -> None:
        keys = ScriptedKeyboard("a\x04b")
        self.assertEqual(keys.read(), "a")
        self.assertIsNone(keys.read())

    def testInterrupt(self) -> None:
        with self.assertRaises(KeyboardInterrupt):
            ScriptedKeyboard("\x03").read()


class TestScriptedKeyboard(TestCase):
    def testKeyMembersPassThrough(self) -> None:
        self.assertEqual(drain(ScriptedKeyboard([Key.DOWN, "y", Key.ENTER])), [Key.DOWN, "y", Key.ENTER])

    def testSingleKey(self) -> None:
        self.assertEqual(drain(ScriptedKeyboard(Key.ENTER)), [Key.ENTER])

    def testContextCounters(self) -> None:
        keys = ScriptedKeyboard("ab")
        with keys:
            keys.read()
        with self.assertRaises(KeyboardInterrupt):
            with ScriptedKeyboard("\x03") as interrupted:
                interrupted.read()

        self.assertEqual((keys.entered, keys.exited), (1, 1))
        self.assertEqual((interrupted.entered, interrupted.exited), (1, 1))

    def testRejectsOtherTypes(self) -> None:
        with self.assertRaises(TypeError):
            ScriptedKeyboard([1])


class TestLineKeyboard(TestCase):
    def testLinesEndWithEnter(self) -> None:
        keys = LineKeyboard(io.StringIO("ab\ncd"))
        self.assertEqual(drain(keys), ["a", "b", Key.ENTER, "c", "d", Key.ENTER])
        self.assertIsNone(keys.read())

    def testEscapeSequencesInLines(self) -> None:
        self.assertEqual(drain(LineKeyboard(io.StringIO("\x1b[B\n"))), [Key.DOWN, Key.ENTER])

    def testEscapeAtEndOfLine(self) -> None:
        self.assertEqual(drain(LineKeyboard(io.StringIO("\x1b\n"))), [Key.ESCAPE, Key.ENTER])

    def testSelection(self) -> None:
        self.assertIsInstance(keyboard(io.StringIO("")), LineKeyboard)


@unittest.skipUnless(termios is not None and hasattr(os, "openpty"), "requires a POSIX terminal")
class TestTerminalKeyboard(TestCase):
    def setUp(self) -> None:
        self.master, slave = os.openpty()
        self.stream = os.fdopen(slave, "r")

    def tearDown(self) -> None:
        self.stream.close()
        os.close(self.master)

    def testSelection(self) -> None:
        self.assertIsInstance(keyboard(self.stream), TerminalKeyboard)

    def testReadsRawKeys(self) -> None:
        keys = TerminalKeyboard(self.stream)
        with keys:
            os.write(self.master, "x\x1b[Bé\r".encode())
            self.assertEqual([keys.read() for _ in range(4)], ["x", Key.DOWN, "é", Key.ENTER])

    def testRestoresMode(self) -> None:
        before = termios.tcgetattr(self.stream.fileno())
        with TerminalKeyboard(self.stream):
            self.assertFalse(termios.tcgetattr(self.stream.fileno())[3] & termios.ICANON)
        self.assertEqual(termios.tcgetattr(self.stream.fileno()), before)


if __name__ == "__main__":
    unittest.main()
