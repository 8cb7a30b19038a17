"""
Exception hierarchy for tagged_argparser.

Errors fall into two families. ``UsageError`` and its subclasses describe bad
user input found while parsing a command line; callers are expected to catch
them, print the message with the help text, and exit non-zero.
``DeclarationError`` signals a mistake in how arguments were declared and is
not meant to be caught.
"""

import typing
from typing import Any, Optional

__all__: typing.Sequence[str] = (
    "ArgParserError",
    "UsageError",
    "ConversionError",
    "MissingValueError",
    "InvalidArgumentError",
    "ConfigFileError",
    "DeclarationError",
    "NoValueError",
)


def _kind_name(kind: Any) -> str:
    return getattr(kind, "__name__", repr(kind))


class ArgParserError(Exception):
    """Base class for every error raised by tagged_argparser."""


class UsageError(ArgParserError):
    """The command line given by the user could not be accepted."""


class ConversionError(UsageError, ValueError):
    """A token could not be fully converted to the argument's type."""

    def __init__(self, token: str, kind: Any, cause: Optional[Exception] = None) -> None:
        self.token = token
        self.kind = kind
        self.cause = cause
        super().__init__(f"could not parse {_kind_name(kind)} from '{token}'")


class MissingValueError(UsageError):
    """A value argument's tag was the last token, with nothing to consume."""

    def __init__(self, argument: str, tag: str) -> None:
        self.argument = argument
        self.tag = tag
        super().__init__(f"argument '{argument}' expects a value after '{tag}'")


class InvalidArgumentError(UsageError):
    """An argument is missing or rejected by its validator after parsing."""

    def __init__(self, argument: str) -> None:
        self.argument = argument
        super().__init__(f"argument '{argument}' invalid after parsing")


class ConfigFileError(UsageError):
    """The configuration file named on the command line could not be used."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"configuration file '{path}': {reason}")


class DeclarationError(ArgParserError, ValueError):
    """Arguments were declared or configured in a contradictory way."""


class NoValueError(ArgParserError, LookupError):
    """A value was requested from an argument that has none."""
