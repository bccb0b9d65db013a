"""
Helper module behavioral tests (usage line and help sections).

Scope
- Validate the usage line: help keys first, bracketed optional declarations, multi markers.
- Validate the options and positional arguments sections and their hanging indent.
- Validate fancy (panel) rendering and host program-name override.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured on a fixed-width, non-terminal console.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from argosy import Parser


def capture(parser, width=80):
    console = Console(file=io.StringIO(), width=width)
    console.print(parser.render(width=width))
    return console.file.getvalue()


class TestUsage(TestCase):
    """Usage line layout."""

    def testHelpKeysListedFirst(self):
        parser = Parser("tool")
        parser.flag("-v")
        self.assertTrue(capture(parser).startswith("usage: tool [-h | --help] [ -v ]"))

    def testNoHelpKeys(self):
        parser = Parser("tool")
        parser.help_keys()
        parser.cardinal("PATH", required=True)
        self.assertEqual(capture(parser).splitlines()[0], "usage: tool PATH")

    def testRequiredAndOptionalDeclarations(self):
        parser = Parser("tool")
        parser.help_keys()
        parser.option("-s", "--string", required=True)
        parser.option("-n", "--number", type=int, metavar="N")
        parser.multi_option("-t", metavar="TAG")
        parser.cardinal("PATH", required=True)
        parser.multi_cardinal("FILES")
        self.assertEqual(
            capture(parser, width=120).splitlines()[0],
            "usage: tool -s VALUE [ -n N ] [ -t TAG... ] PATH [ FILES... ]",
        )

    def testUsageWrapsUnderProgramName(self):
        parser = Parser("tool")
        parser.help_keys()
        for letter in "abcdefghijklmnop":
            parser.option("--%s-option" % letter, metavar="VALUE")
        lines = capture(parser, width=60).split("\n\n")[0].splitlines()
        self.assertGreater(len(lines), 1)
        for line in lines[1:]:
            self.assertTrue(line.startswith(" " * len("usage: tool ")))
        for line in lines:
            self.assertLessEqual(len(line), 60)

    def testHostProgramNameWins(self):
        parser = Parser("tool")
        with mock.patch("__main__.__prog__", "host", create=True):
            self.assertTrue(capture(parser).startswith("usage: host"))


class TestSections(TestCase):
    """Options and positional arguments sections."""

    def testOptionsSection(self):
        parser = Parser("tool")
        parser.help_keys()
        parser.option("-n", "--number", type=int, metavar="N", descr="how many")
        parser.flag("-v", descr="talk")
        output = capture(parser)
        self.assertIn("options:", output)
        self.assertIn("  -n, --number N\n               how many", output)
        self.assertIn("  -v           talk", output)

    def testPositionalSection(self):
        parser = Parser("tool")
        parser.help_keys()
        parser.cardinal("PATH", descr="where to look")
        output = capture(parser)
        self.assertIn("positional arguments:", output)
        self.assertIn("  PATH         where to look", output)
        self.assertNotIn("options:", output)

    def testDescriptionWrapsOnIndent(self):
        parser = Parser("tool")
        parser.help_keys()
        parser.flag("-v", descr="word " * 30)
        lines = capture(parser, width=50).splitlines()
        start = next(index for index, line in enumerate(lines) if line.startswith("  -v"))
        self.assertTrue(lines[start + 1].startswith(" " * 15 + "word"))

    def testFancyRenderingUsesPanel(self):
        parser = Parser("tool", fancy=True)
        output = capture(parser)
        self.assertIn("[ TOOL HELP ]", output)
        self.assertIn("╭", output)


if __name__ == "__main__":
    unittest.main()
