"""
Tests for CommandParser — Raw input to ParsedCommand
"""

import pytest

from gulp.shell import CommandParser, ParsedCommand


class TestParse:
    """Test whitespace splitting."""

    @pytest.mark.parametrize("line, name, args", [
        ("help", "help", ()),
        ("echo a b c", "echo", ("a", "b", "c")),
        ("  mode\tdecode  ", "mode", ("decode",)),
        ("encode base64   hello   world", "encode", ("base64", "hello", "world")),
    ])
    def test_tokens(self, line, name, args):
        """First token is the name; the rest are args, in order."""
        parsed = CommandParser.parse(line)
        assert parsed == ParsedCommand(name, args)

    @pytest.mark.parametrize("line", ["", "   ", "\t\n", None])
    def test_blank_is_none(self, line):
        """Empty or whitespace-only input yields no command."""
        assert CommandParser.parse(line) is None

    def test_immutable(self):
        parsed = CommandParser.parse("echo hi")
        with pytest.raises(AttributeError):
            parsed.name = "other"

    def test_arg_default(self):
        parsed = CommandParser.parse("log")
        assert parsed.arg(0) is None
        assert parsed.arg(0, "20") == "20"
