"""
Argv interpreter tests.

Scope
- Long options: inline values, comma lists, consumed values, bare flags.
- Short options: single letters with a value, grouped letters.
- Flag hints keep the following token positional.
- "--" and "-" handling, last-wins repeats, input validation.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from sprig import Interpretation, interpret


class TestLongOptions(TestCase):
    def testInlineValue(self) -> None:
        self.assertEqual(interpret(["--env=prod"]), Interpretation([], {"env": "prod"}))

    def testInlineCommaList(self) -> None:
        self.assertEqual(interpret(["--tags=a,b,c"]).options, {"tags": ["a", "b", "c"]})

    def testInlineEmptyValue(self) -> None:
        self.assertEqual(interpret(["--env="]).options, {"env": ""})

    def testConsumesFollowingValues(self) -> None:
        """
        one following value stays a string, several become a list.
        """
        self.assertEqual(interpret(["--env", "prod"]).options, {"env": "prod"})
        self.assertEqual(interpret(["--tags", "a", "b", "--fast"]).options, {"tags": ["a", "b"], "fast": True})

    def testBareOption(self) -> None:
        self.assertEqual(interpret(["--fast"]), Interpretation([], {"fast": True}))

    def testUnhintedOptionSwallowsPositional(self) -> None:
        args, options = interpret(["--fast", "myapp"])
        self.assertEqual(args, [])
        self.assertEqual(options, {"fast": "myapp"})

    def testFlagHintKeepsPositional(self) -> None:
        args, options = interpret(["--fast", "myapp"], flags={"fast", "f"})
        self.assertEqual(args, ["myapp"])
        self.assertEqual(options, {"fast": True})


class TestShortOptions(TestCase):
    def testSingleLetterTakesValue(self) -> None:
        self.assertEqual(interpret(["-o", "out.txt"]).options, {"o": "out.txt"})

    def testSingleLetterFlagHint(self) -> None:
        args, options = interpret(["-f", "myapp"], flags={"fast", "f"})
        self.assertEqual(args, ["myapp"])
        self.assertEqual(options, {"f": True})

    def testSingleLetterBeforeOption(self) -> None:
        self.assertEqual(interpret(["-v", "--fast"]).options, {"v": True, "fast": True})

    def testGroupedLetters(self) -> None:
        args, options = interpret(["-abc", "target"])
        self.assertEqual(args, ["target"])
        self.assertEqual(options, {"a": True, "b": True, "c": True})


class TestPositionals(TestCase):
    def testPlainTokens(self) -> None:
        self.assertEqual(interpret(["a", "b"]), Interpretation(["a", "b"], {}))

    def testDoubleDashEndsOptions(self) -> None:
        args, options = interpret(["--fast", "--", "--not-an-option", "-x"], flags={"fast"})
        self.assertEqual(args, ["--not-an-option", "-x"])
        self.assertEqual(options, {"fast": True})

    def testSingleDashIsPositional(self) -> None:
        self.assertEqual(interpret(["-"]).args, ["-"])

    def testInterleaved(self) -> None:
        args, options = interpret(["src", "--fast", "dst"], flags={"fast"})
        self.assertEqual(args, ["src", "dst"])
        self.assertEqual(options, {"fast": True})

    def testLastValueWins(self) -> None:
        self.assertEqual(interpret(["--env=a", "--env=b"]).options, {"env": "b"})

    def testEmpty(self) -> None:
        self.assertEqual(interpret([]), Interpretation([], {}))
        self.assertEqual(interpret(()), Interpretation([], {}))

    def testRejectsString(self) -> None:
        """
        a string is a sequence of characters, never a token list.
        """
        with self.assertRaises(TypeError):
            interpret("--fast")


if __name__ == "__main__":
    unittest.main()
