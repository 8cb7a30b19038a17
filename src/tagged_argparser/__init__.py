"""
tagged_argparser - declare tag and positional command-line arguments, then parse.

This package provides flags, single-value and multi-value arguments identified
by a short tag and an optional alternate tag, plus positional arguments bound
after all tags (or after a ``--`` separator). Parsed values can be validated
with caller-supplied predicates, written into caller-owned objects, and
supplemented from YAML or JSON configuration files.
"""

from .arguments import (
    Argument,
    FlagArgument,
    MultiValueArgument,
    PositionalArgument,
    TagArgument,
    ValueArgument,
)
from .command_line import CommandLine
from .config import load_config_file
from .errors import (
    ArgParserError,
    ConfigFileError,
    ConversionError,
    DeclarationError,
    InvalidArgumentError,
    MissingValueError,
    NoValueError,
    UsageError,
)
from .tokens import looks_like_tag

__version__ = "1.0.0"
__all__ = [
    "CommandLine",
    "Argument",
    "TagArgument",
    "FlagArgument",
    "ValueArgument",
    "MultiValueArgument",
    "PositionalArgument",
    "load_config_file",
    "looks_like_tag",
    "ArgParserError",
    "UsageError",
    "ConversionError",
    "MissingValueError",
    "InvalidArgumentError",
    "ConfigFileError",
    "DeclarationError",
    "NoValueError",
]
