"""
Tag markup tests.

Scope
- parse(): spans for known tags, nesting, literal unknown and stray tags.
- render(): plain and colored output.
- tags(): custom tags.

Conventions
- Test method names follow CamelCase per project convention.
"""
import io
import unittest
from unittest import TestCase

from rich.console import Console
from rich.style import Style

from sprig import style


class TestParse(TestCase):
    def testKnownTag(self) -> None:
        text = style.parse("<info>built</info> 3 targets")
        self.assertEqual(text.plain, "built 3 targets")
        span, = text.spans
        self.assertEqual((span.start, span.end), (0, 5))
        self.assertEqual(span.style, Style.parse("bold blue"))

    def testNestedTags(self) -> None:
        text = style.parse("<comment>a <b>b</b> c</comment>")
        self.assertEqual(text.plain, "a b c")
        self.assertEqual(sorted((span.start, span.end) for span in text.spans), [(0, 5), (2, 3)])

    def testUnknownTagIsLiteral(self) -> None:
        text = style.parse("<foo>x</foo> <3")
        self.assertEqual(text.plain, "<foo>x</foo> <3")
        self.assertEqual(text.spans, [])

    def testStrayClosingTagIsLiteral(self) -> None:
        self.assertEqual(style.parse("x</info>").plain, "x</info>")

    def testUnclosedTagRunsToEnd(self) -> None:
        text = style.parse("ok <error>broken")
        self.assertEqual(text.plain, "ok broken")
        span, = text.spans
        self.assertEqual((span.start, span.end), (3, 9))

    def testRejectsNonString(self) -> None:
        with self.assertRaises(TypeError):
            style.parse(None)


class TestRender(TestCase):
    def testPlain(self) -> None:
        self.assertEqual(style.render("<info>built</info> <b>3</b>", colorful=False), "built 3")

    def testColored(self) -> None:
        rendered = style.render("<b>x</b>")
        self.assertIn("\x1b[1m", rendered)
        self.assertIn("x", rendered)

    def testWriteToConsole(self) -> None:
        buffer = io.StringIO()
        console = Console(file=buffer, color_system=None)
        style.write("<info>a</info>", console=console)
        style.writeln("<comment>b</comment>", console=console)
        self.assertEqual(buffer.getvalue(), "ab\n")


class TestCustomTags(TestCase):
    def testAddTag(self) -> None:
        names = style.tags(success="bold green")
        self.assertIn("success", names)
        self.assertEqual(style.parse("<success>ok</success>").spans[0].style, Style.parse("bold green"))

    def testInvalidTagName(self) -> None:
        with self.assertRaises(ValueError):
            style.tags({"bad name": "bold"})


if __name__ == "__main__":
    unittest.main()
