"""
The command line: declared arguments and the two-phase parse algorithm.

Parsing walks the token list twice. The tag phase offers every token after
the program name to the declared tag arguments in declaration order, until
the ``--`` separator or the end of input. The positional phase then binds the
declared positional arguments, in order, to the tokens after the separator,
or, when there is none, to the tokens the tag phase left unclaimed. Finally
every argument is checked, tag arguments first.
"""

import itertools
import logging
import sys
import typing
from typing import Any, Mapping, Optional, Sequence, TextIO, Union

from result import Err, Ok, Result

from .arguments import (
    Argument,
    FlagArgument,
    MultiValueArgument,
    PositionalArgument,
    TagArgument,
    ValueArgument,
)
from .config import load_config_file
from .errors import (
    DeclarationError,
    InvalidArgumentError,
    NoValueError,
    UsageError,
)
from .tokens import is_separator, looks_like_tag

__all__: typing.Sequence[str] = ("CommandLine", "CONFIG_ARGUMENT_NAME")

_LOGGER = logging.getLogger(__name__)

CONFIG_ARGUMENT_NAME = "config"


class CommandLine:
    """
    A set of declared arguments and the parser that fills them in.

    Tag arguments (flags, values, multi-values) must all be declared before
    the first positional argument. Handles returned by the ``add_*`` methods
    stay owned by the command line and remain valid for its lifetime.

    Supports loading argument values from a YAML or JSON file through an
    optional config flag; values given on the command line take precedence.

    Example:
        cli = CommandLine("kittens", "shows kittens")
        verbose = cli.add_flag("verbose", "-v").set_alternate_tag("--verbose")
        count = cli.add_value("count", "-c", kind=int).set_default(1)
        path = cli.add_positional("path", kind=pathlib.Path)

        cli.parse(["kittens", "-v", "-c", "3", "--", "/tmp/out"])
        count.get_value()  # 3

        # Or load values from a file:
        # CommandLine("kittens", config_flag=["-C", "--config"])
    """

    def __init__(
        self,
        program_name: str,
        description: str = "",
        config_flag: Union[str, Sequence[str], None] = None,
    ) -> None:
        """
        Initialize an empty command line.

        Args:
            program_name: Name shown at the top of the help text.
            description: Optional one-line description shown next to it.
            config_flag: A tag, or a ``[tag, alternate_tag]`` pair, for a
                string argument naming a configuration file.
        """
        self.program_name = program_name
        self.description = description
        self._tag_arguments: list[TagArgument[Any]] = []
        self._positional_arguments: list[PositionalArgument[Any]] = []
        self._config_argument: Optional[ValueArgument[str]] = None
        if config_flag is not None:
            self._add_config_argument(config_flag)

    def set_description(self, description: str) -> "CommandLine":
        self.description = description
        return self

    @property
    def tag_arguments(self) -> tuple[TagArgument[Any], ...]:
        return tuple(self._tag_arguments)

    @property
    def positional_arguments(self) -> tuple[PositionalArgument[Any], ...]:
        return tuple(self._positional_arguments)

    def _add_config_argument(self, config_flag: Union[str, Sequence[str]]) -> None:
        if isinstance(config_flag, str):
            names: tuple[str, ...] = (config_flag,)
        else:
            names = tuple(config_flag)
        if not 1 <= len(names) <= 2:
            raise DeclarationError(
                "config_flag must be a tag or a (tag, alternate_tag) pair"
            )

        argument = self.add_value(CONFIG_ARGUMENT_NAME, names[0]).set_description(
            "Path to configuration file (YAML or JSON format)"
        )
        if len(names) == 2:
            argument.set_alternate_tag(names[1])
        self._config_argument = argument

    def add_flag(self, name: str, tag: str) -> FlagArgument:
        """
        Declare a flag: ``True`` if its tag is present, ``False`` otherwise.

        Raises:
            DeclarationError: If a positional argument was already declared,
                or the tag is already in use.
        """
        return self._add_tag_argument(FlagArgument(name, tag))

    def add_value(self, name: str, tag: str, kind: Any = str) -> ValueArgument[Any]:
        """
        Declare an argument taking the single token after its tag.

        Args:
            name: Human-readable name, used in errors and config files.
            tag: The token identifying the argument, e.g. ``-i``.
            kind: Value type (``int``, ``float``, ``str``, ``bool``,
                ``pathlib.Path``) or any callable converting the token text.

        Raises:
            DeclarationError: If a positional argument was already declared,
                or the tag is already in use.
        """
        return self._add_tag_argument(ValueArgument(name, tag, kind))

    def add_multi_value(
        self, name: str, tag: str, kind: Any = str
    ) -> MultiValueArgument[Any]:
        """
        Declare an argument taking every token after its tag up to the next
        tag-like token or separator. Repeated tags append to the same list.

        Raises:
            DeclarationError: If a positional argument was already declared,
                or the tag is already in use.
        """
        return self._add_tag_argument(MultiValueArgument(name, tag, kind))

    def add_positional(self, name: str, kind: Any = str) -> PositionalArgument[Any]:
        """Declare a mandatory argument bound by position, after all tag arguments."""
        argument: PositionalArgument[Any] = PositionalArgument(name, kind)
        self._positional_arguments.append(argument)
        return argument

    def _add_tag_argument(self, argument: Any) -> Any:
        self._prevent_tag_args_after_positional_args()
        self._check_tag(argument, argument.tag)
        argument.on_tag_change(self._check_tag)
        self._tag_arguments.append(argument)
        return argument

    def _check_tag(self, argument: TagArgument[Any], tag: str) -> None:
        owner = self.find(tag) if tag else None
        if owner is not None and owner is not argument:
            raise DeclarationError(
                f"Tag conflict: {tag} is already used by argument '{owner.name}'"
            )

    def _prevent_tag_args_after_positional_args(self) -> None:
        if self._positional_arguments:
            raise DeclarationError(
                "tag arguments cannot be given after positional arguments"
            )

    def find(self, token: str) -> Optional[TagArgument[Any]]:
        """Return the first declared tag argument answering to ``token``."""
        for argument in self._tag_arguments:
            if argument.matches(token):
                return argument
        return None

    def parse(self, args: Optional[Sequence[str]] = None) -> None:
        """
        Parse a token list into the declared arguments.

        Args:
            args: The full argument vector, program name first. If None, uses
                sys.argv.

        Raises:
            ConversionError: If a token cannot be converted to its argument's
                type. Parsing stops at the first such token.
            MissingValueError: If a value argument's tag is the last token.
            ConfigFileError: If the named configuration file cannot be used.
            InvalidArgumentError: Naming the first argument, tag arguments
                before positional ones, that is invalid after parsing.
        """
        tokens = list(sys.argv if args is None else args)
        _LOGGER.debug("Parsing %d token(s) for %s", len(tokens), self.program_name)

        if tokens:
            claimed, separator = self._parse_tag_arguments(tokens)
            self._parse_positional_arguments(tokens, claimed, separator)

        self._apply_config_file()
        self._throw_on_invalid()

    def parse_argv(self, argc: int, argv: Sequence[str]) -> None:
        """Parse the conventional ``(argc, argv)`` pair of process arguments."""
        self.parse(list(argv[:argc]))

    def safe_parse(
        self, args: Optional[Sequence[str]] = None
    ) -> Result["CommandLine", str]:
        """
        Parse without raising on bad user input.

        Args:
            args (Optional[Sequence[str]]): As for ``parse``.

        Returns:
            Result[CommandLine, str]:
                - Ok with this command line if parsing succeeded,
                - Err with the error message for any ``UsageError``.

        Declaration errors are not caught.
        """
        try:
            self.parse(args)
        except UsageError as e:
            return Err(str(e))
        return Ok(self)

    def _parse_tag_arguments(
        self, tokens: Sequence[str]
    ) -> tuple[set[int], Optional[int]]:
        """
        Run the tag phase.

        Returns:
            The positions consumed by tag arguments, and the position of the
            separator if one was found.
        """
        claimed: set[int] = set()
        position = 1
        while position < len(tokens):
            if is_separator(tokens[position]):
                return claimed, position

            next_position = position
            for argument in self._tag_arguments:
                next_position = argument.parse(tokens, position)
                if next_position != position:
                    break

            if next_position == position:
                _LOGGER.debug("No tag argument answers to %r", tokens[position])
                position += 1
            else:
                claimed.update(range(position, next_position))
                position = next_position
        return claimed, None

    def _parse_positional_arguments(
        self,
        tokens: Sequence[str],
        claimed: set[int],
        separator: Optional[int],
    ) -> None:
        if not self._positional_arguments:
            return

        if separator is not None:
            candidates = list(range(separator + 1, len(tokens)))
        else:
            candidates = []
            for position in range(1, len(tokens)):
                if position in claimed:
                    continue
                if looks_like_tag(tokens[position]):
                    _LOGGER.debug(
                        "Unrecognized tag %r is not bound positionally", tokens[position]
                    )
                    continue
                candidates.append(position)

        for argument, position in zip(self._positional_arguments, candidates):
            argument.parse(tokens, position)

        surplus = candidates[len(self._positional_arguments) :]
        if surplus:
            _LOGGER.debug(
                "Ignoring %d surplus positional token(s): %r",
                len(surplus),
                [tokens[p] for p in surplus],
            )

    def _apply_config_file(self) -> None:
        if self._config_argument is None or not self._config_argument.has_parsed_value():
            return

        self.apply_config(load_config_file(str(self._config_argument.get_value())))

    def apply_config(self, config_data: Mapping[str, Any]) -> None:
        """
        Store configured values into arguments that received none from the
        command line.

        Args:
            config_data: Mapping of argument name to value.

        Raises:
            ConversionError: If a configured value does not fit its argument.
        """
        known = set()
        for argument in self._all_arguments():
            if argument is self._config_argument or argument.name not in config_data:
                continue
            known.add(argument.name)
            if argument.apply_configured(config_data[argument.name]):
                _LOGGER.debug("Argument %r taken from configuration", argument.name)

        for name in config_data:
            if name not in known:
                _LOGGER.debug("Ignoring configuration for undeclared argument %r", name)

    def _all_arguments(self) -> typing.Iterator[Argument]:
        return itertools.chain(self._tag_arguments, self._positional_arguments)

    def _throw_on_invalid(self) -> None:
        for argument in self._all_arguments():
            if not argument.is_valid():
                raise InvalidArgumentError(argument.name)

    def values(self) -> dict[str, Any]:
        """Return a mapping of argument name to value for every argument that has one."""
        result = {}
        for argument in self._all_arguments():
            try:
                result[argument.name] = argument.get_value()
            except NoValueError:
                continue
        return result

    def format_help(self) -> str:
        header = self.program_name
        if self.description:
            header += f" - {self.description}"
        lines = [header + "\n"]
        lines.extend(argument.format_help() for argument in self._all_arguments())
        return "".join(lines) + "\n"

    def print_help(self, output: Optional[TextIO] = None) -> None:
        """Write the help text to ``output`` (default: sys.stdout)."""
        (output or sys.stdout).write(self.format_help())
