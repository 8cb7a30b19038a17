#!/usr/bin/env python3
"""
Tests for CommandLine: declaration rules, the two-phase parse algorithm,
positional arguments, help text and the non-raising entry point.
"""

from io import StringIO
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from result import Err, Ok

from tagged_argparser import (
    CommandLine,
    ConversionError,
    DeclarationError,
    InvalidArgumentError,
    NoValueError,
)


@pytest.fixture
def cli():
    return CommandLine("cli")


@pytest.fixture
def mixed(cli):
    """A flag, a value argument and an integer positional, in that order."""
    flag = cli.add_flag("flag", "-f")
    value = cli.add_value("some integer", "-i", kind=int)
    positional = cli.add_positional("int", kind=int)
    return SimpleNamespace(cli=cli, flag=flag, value=value, positional=positional)


class TestDeclaration:
    """Test suite for declaration-time rules."""

    def test_tag_argument_after_positional_raises(self, cli):
        cli.add_positional("int", kind=int)
        with pytest.raises(DeclarationError):
            cli.add_flag("flag", "-f")
        with pytest.raises(DeclarationError):
            cli.add_value("value", "-v")
        with pytest.raises(DeclarationError):
            cli.add_multi_value("values", "-m")

    def test_positional_after_tag_arguments_succeeds(self, cli):
        cli.add_flag("flag", "-f")
        cli.add_positional("int", kind=int)
        assert len(cli.tag_arguments) == 1
        assert len(cli.positional_arguments) == 1

    def test_duplicate_tag_raises(self, cli):
        cli.add_flag("verbose", "-v").set_alternate_tag("--verbose")
        with pytest.raises(DeclarationError) as exc:
            cli.add_value("version", "--verbose")
        assert "Tag conflict" in str(exc.value)

    def test_alternate_tag_conflict_raises(self, cli):
        cli.add_flag("all", "-a")
        other = cli.add_flag("brief", "-b")
        with pytest.raises(DeclarationError) as exc:
            other.set_alternate_tag("-a")
        assert "argument 'all'" in str(exc.value)
        assert other.alternate_tag == ""
        assert cli.find("-a").name == "all"

    def test_alternate_tag_conflicting_with_alternate_tag_raises(self, cli):
        cli.add_value("input", "-i").set_alternate_tag("--in")
        with pytest.raises(DeclarationError):
            cli.add_value("include", "-I").set_alternate_tag("--in")

    def test_alternate_tag_may_repeat_own_tag(self, cli):
        flag = cli.add_flag("verbose", "-v").set_alternate_tag("--verbose")
        flag.set_alternate_tag("--verbose")
        flag.set_alternate_tag("-v")
        assert cli.find("-v") is flag

    def test_find(self, cli):
        flag = cli.add_flag("flag", "-f").set_alternate_tag("--flag")
        assert cli.find("--flag") is flag
        assert cli.find("-x") is None

    def test_declaration_errors_are_not_usage_errors(self, cli):
        cli.add_positional("int", kind=int)
        with pytest.raises(DeclarationError):
            cli.add_flag("flag", "-f")
        assert not isinstance(DeclarationError("x"), InvalidArgumentError)


class TestParseAlgorithm:
    """Test suite for the tag and positional phases."""

    def test_tags_then_separator_then_positional(self, mixed):
        mixed.cli.parse(["prog", "-i", "4", "-f", "--", "3"])
        assert mixed.value.get_value() == 4
        assert mixed.flag.get_value() is True
        assert mixed.positional.get_value() == 3

    def test_positional_without_tags_or_separator(self, mixed):
        mixed.cli.parse(["prog", "3"])
        assert mixed.positional.get_value() == 3
        assert mixed.flag.get_value() is False

    def test_positional_interleaved_with_tags(self, mixed):
        mixed.cli.parse(["prog", "3", "-i", "4"])
        assert mixed.positional.get_value() == 3
        assert mixed.value.get_value() == 4

    def test_missing_positional_fails(self, mixed):
        with pytest.raises(InvalidArgumentError) as exc:
            mixed.cli.parse(["prog", "-f"])
        assert exc.value.argument == "int"

    def test_missing_positional_after_separator_fails(self, mixed):
        with pytest.raises(InvalidArgumentError):
            mixed.cli.parse(["prog", "-i", "4", "--"])

    def test_negative_positional(self, mixed):
        mixed.cli.parse(["prog", "-5"])
        assert mixed.positional.get_value() == -5

    def test_unknown_tag_is_skipped(self, mixed):
        mixed.cli.parse(["prog", "-x", "-f", "3"])
        assert mixed.flag.get_value() is True
        assert mixed.positional.get_value() == 3

    def test_tag_like_token_after_separator_is_positional(self, cli):
        name = cli.add_positional("name")
        cli.parse(["prog", "--", "-x"])
        assert name.get_value() == "-x"

    def test_tokens_before_separator_are_not_positional(self, mixed):
        mixed.cli.parse(["prog", "9", "--", "3"])
        assert mixed.positional.get_value() == 3

    def test_positionals_consumed_in_declaration_order(self, cli):
        first = cli.add_positional("first")
        second = cli.add_positional("second", kind=int)
        cli.parse(["prog", "a", "2", "surplus"])
        assert first.get_value() == "a"
        assert second.get_value() == 2

    def test_fewer_tokens_than_positionals_fails(self, cli):
        cli.add_positional("first")
        second = cli.add_positional("second")
        with pytest.raises(InvalidArgumentError) as exc:
            cli.parse(["prog", "a"])
        assert exc.value.argument == "second"
        with pytest.raises(NoValueError):
            second.get_value()

    def test_positional_validator(self, cli):
        positional = cli.add_positional("int", kind=int).set_validator(lambda i: i > 0)
        with pytest.raises(InvalidArgumentError):
            cli.parse(["prog", "0"])
        positional.set_validator(lambda i: i == 0)
        assert positional.is_valid()

    def test_unconvertible_positional_raises(self, mixed):
        with pytest.raises(ConversionError):
            mixed.cli.parse(["prog", "three"])

    def test_conversion_error_aborts_parse(self, cli):
        value = cli.add_value("some integer", "-i", kind=int)
        flag = cli.add_flag("flag", "-f")
        with pytest.raises(ConversionError):
            cli.parse(["prog", "-i", "x", "-f"])
        assert flag.get_value() is False
        assert not value.has_parsed_value()

    def test_tag_arguments_checked_before_positionals(self, cli):
        cli.add_value("required", "-r").set_required(True)
        cli.add_positional("int", kind=int)
        with pytest.raises(InvalidArgumentError) as exc:
            cli.parse(["prog"])
        assert exc.value.argument == "required"

    def test_first_invalid_in_declaration_order(self, cli):
        cli.add_value("a", "-a").set_required(True)
        cli.add_value("b", "-b").set_required(True)
        with pytest.raises(InvalidArgumentError) as exc:
            cli.parse(["prog"])
        assert "'a'" in str(exc.value)

    def test_value_argument_claims_token_first(self, cli):
        """A value token is consumed even if it equals another tag."""
        value = cli.add_value("name", "-n")
        flag = cli.add_flag("flag", "-f")
        cli.parse(["prog", "-n", "-f"])
        assert value.get_value() == "-f"
        assert flag.get_value() is False

    def test_reparse_is_idempotent_for_scalars(self, mixed):
        args = ["prog", "-i", "4", "-f", "--", "3"]
        mixed.cli.parse(args)
        first = (mixed.value.get_value(), mixed.flag.get_value(), mixed.positional.get_value())
        mixed.cli.parse(args)
        second = (mixed.value.get_value(), mixed.flag.get_value(), mixed.positional.get_value())
        assert first == second == (4, True, 3)

    def test_empty_token_list(self, cli):
        flag = cli.add_flag("flag", "-f")
        cli.parse([])
        assert flag.get_value() is False

    def test_program_name_is_skipped(self, cli):
        flag = cli.add_flag("flag", "-f")
        cli.parse(["-f"])
        assert flag.get_value() is False

    def test_parse_argv(self, mixed):
        argv = ["prog", "-i", "4", "3", "ignored"]
        mixed.cli.parse_argv(4, argv)
        assert mixed.value.get_value() == 4
        assert mixed.positional.get_value() == 3

    def test_parse_defaults_to_sys_argv(self, mixed):
        with patch("sys.argv", ["prog", "-f", "3"]):
            mixed.cli.parse()
        assert mixed.flag.get_value() is True
        assert mixed.positional.get_value() == 3

    def test_bound_positional(self, cli):
        options = {}
        cli.add_positional("int", kind=int).bind(options, "int")
        cli.parse(["prog", "3"])
        assert options["int"] == 3


class TestSafeParseAndValues:
    """Test suite for safe_parse and values."""

    def test_safe_parse_ok(self, mixed):
        result = mixed.cli.safe_parse(["prog", "3"])
        assert isinstance(result, Ok)
        assert result.ok_value is mixed.cli

    def test_safe_parse_err(self, mixed):
        result = mixed.cli.safe_parse(["prog", "-i", "abc", "3"])
        assert isinstance(result, Err)
        assert "abc" in result.err_value

    def test_safe_parse_err_on_invalid(self, mixed):
        result = mixed.cli.safe_parse(["prog"])
        assert isinstance(result, Err)
        assert result.err_value == "argument 'int' invalid after parsing"

    def test_values(self, cli):
        cli.add_flag("flag", "-f")
        cli.add_value("some integer", "-i", kind=int)
        cli.add_value("with default", "-d", kind=int).set_default(2)
        cli.add_multi_value("strings", "-s")
        cli.add_positional("name")
        cli.parse(["prog", "-s", "a", "b", "--", "kitten"])
        assert cli.values() == {
            "flag": False,
            "with default": 2,
            "strings": ["a", "b"],
            "name": "kitten",
        }


class TestHelp:
    """Test suite for help rendering."""

    def test_header_with_description(self):
        cli = CommandLine("kittens", "shows kittens")
        assert cli.format_help().startswith("kittens - shows kittens\n")

    def test_header_without_description(self, cli):
        assert cli.format_help() == "cli\n\n"

    def test_tag_line_layout(self, cli):
        cli.add_flag("help", "-h").set_alternate_tag("--help").set_description(
            "show this message"
        )
        cli.add_value("path", "-p").set_required(True).set_description("the path")
        lines = cli.format_help().splitlines()
        assert lines[1] == "   -h, --help" + " " * 7 + "show this message"
        assert lines[2] == "   -p" + " " * 15 + "(required) the path"

    def test_default_is_shown(self, cli):
        cli.add_value("count", "-c", kind=int).set_default(1).set_description("count")
        assert "count (default: 1)" in cli.format_help()

    def test_positional_line(self, cli):
        cli.add_flag("flag", "-f")
        cli.add_positional("input").set_description("the input file")
        assert cli.format_help().endswith("   input the input file\n\n")

    def test_print_help_to_stdout(self, cli):
        cli.add_flag("verbose", "-v").set_description("Enable verbose")
        with patch("sys.stdout", new_callable=StringIO) as mock_stdout:
            cli.print_help()
            help_output = mock_stdout.getvalue()
        assert "-v" in help_output
        assert "Enable verbose" in help_output

    def test_print_help_to_sink(self, cli):
        sink = StringIO()
        cli.print_help(sink)
        assert sink.getvalue() == cli.format_help()
