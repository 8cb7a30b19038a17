"""
Argument declarations.

``TagArgument`` is identified on the command line by a tag (``-i``) or an
alternate tag (``--integer``) and composes one of the storage strategies from
``tagged_argparser.storage``. Its three concrete handles are ``FlagArgument``,
``ValueArgument`` and ``MultiValueArgument``. ``PositionalArgument`` is
identified by its position among the tokens left over after tag parsing.

Every configuration method returns the handle it was called on, so
declarations can be chained:

    count = (
        cli.add_value("integer", "-i", kind=int)
        .set_alternate_tag("--integer")
        .set_validator(lambda i: 0 < i <= 5)
    )
"""

import abc
import logging
import sys
import typing
from collections.abc import MutableMapping
from typing import Any, Callable, Generic, Optional, Sequence, TextIO, TypeVar, Union

from .errors import DeclarationError, MissingValueError, NoValueError
from .storage import BooleanScalar, MultiScalar, Scalar

__all__: typing.Sequence[str] = (
    "Argument",
    "TagArgument",
    "FlagArgument",
    "ValueArgument",
    "MultiValueArgument",
    "PositionalArgument",
)

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
ArgumentT = TypeVar("ArgumentT", bound="Argument")
TagArgumentT = TypeVar("TagArgumentT", bound="TagArgument[Any]")

Validator = Callable[[Any], bool]
Storage = Union[Scalar[Any], BooleanScalar, MultiScalar[Any]]
TagCheck = Callable[["TagArgument[Any]", str], None]

_ALTERNATE_TAG_WIDTH = 15
_INDENT = "   "


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


_MISSING: Any = _Missing()


def _accept_all(value: Any) -> bool:
    return True


class Argument(abc.ABC):
    """
    Common identity and parsing contract of every declared argument.

    ``parse`` is offered the full token list and a cursor position and returns
    the position after the tokens it consumed; returning the same position
    means the argument declined the token.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.description = ""
        self._binding: Optional[tuple[Any, str]] = None

    def set_description(self: ArgumentT, description: str) -> ArgumentT:
        self.description = description
        return self

    def bind(self: ArgumentT, target: Any, attribute: str) -> ArgumentT:
        """
        Write this argument's value into a caller-owned location.

        Every time the argument's value changes it is stored as
        ``target[attribute]`` if ``target`` is a mutable mapping, and as
        ``setattr(target, attribute, value)`` otherwise. The target is never
        read.

        Args:
            target: An object or mapping owned by the caller.
            attribute: The attribute name or key to write.
        """
        self._binding = (target, attribute)
        return self

    def _write_bound(self, value: Any) -> None:
        if self._binding is None:
            return
        target, attribute = self._binding
        if isinstance(value, list):
            value = list(value)
        if isinstance(target, MutableMapping):
            target[attribute] = value
        else:
            setattr(target, attribute, value)

    @abc.abstractmethod
    def parse(self, tokens: Sequence[str], position: int) -> int:
        ...

    @abc.abstractmethod
    def is_valid(self) -> bool:
        ...

    @abc.abstractmethod
    def get_value(self) -> Any:
        ...

    @abc.abstractmethod
    def has_parsed_value(self) -> bool:
        """Whether a value was taken from the command line or a config file."""

    @abc.abstractmethod
    def apply_configured(self, value: Any) -> bool:
        """
        Store a value loaded from a configuration file.

        The value is only used when the argument has no parsed value.

        Returns:
            True if the value was stored.
        """

    @abc.abstractmethod
    def format_help(self) -> str:
        ...

    def print_help(self, output: Optional[TextIO] = None) -> None:
        (output or sys.stdout).write(self.format_help())

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self.name}>"


class TagArgument(Argument, Generic[T]):
    """
    An argument identified by a tag and an optional alternate tag.

    Holds the required/default/validator policy and delegates value storage
    and token consumption to its storage strategy.
    """

    def __init__(self, name: str, tag: str, storage: Storage) -> None:
        super().__init__(name)
        self.tag = tag
        self.alternate_tag = ""
        self._storage = storage
        self._required = False
        self._default: Any = _MISSING
        self._validator: Validator = _accept_all
        self._tag_check: Optional[TagCheck] = None

    def on_tag_change(self, check: TagCheck) -> None:
        """Register a check run before a new tag is accepted; it raises to refuse."""
        self._tag_check = check

    def set_alternate_tag(self: TagArgumentT, tag: str) -> TagArgumentT:
        if self._tag_check is not None:
            self._tag_check(self, tag)
        self.alternate_tag = tag
        return self

    def matches(self, token: str) -> bool:
        return bool(
            (self.tag and token == self.tag)
            or (self.alternate_tag and token == self.alternate_tag)
        )

    @property
    def required(self) -> bool:
        return self._required

    def set_required(self: TagArgumentT, required: bool = True) -> TagArgumentT:
        if required and self.has_default():
            raise DeclarationError(
                f"argument '{self.name}' has a default value and cannot be required"
            )
        self._required = required
        return self

    def has_default(self) -> bool:
        return self._default is not _MISSING

    @property
    def default(self) -> Any:
        if not self.has_default():
            raise NoValueError(f"argument '{self.name}' does not have a default value")
        return self._default

    def set_default(self: TagArgumentT, value: Any) -> TagArgumentT:
        if self._required:
            raise DeclarationError(
                f"argument '{self.name}' is required and cannot have a default value"
            )
        self._default = value
        self._write_bound(value)
        return self

    def set_validator(self: TagArgumentT, validator: Validator) -> TagArgumentT:
        self._validator = validator
        return self

    def bind(self: TagArgumentT, target: Any, attribute: str) -> TagArgumentT:
        super().bind(target, attribute)
        if self.has_default():
            self._write_bound(self._default)
        return self

    def parse(self, tokens: Sequence[str], position: int) -> int:
        if position >= len(tokens) or not self.matches(tokens[position]):
            return position
        value_position = position + 1
        if self._storage.requires_token and value_position >= len(tokens):
            raise MissingValueError(self.name, tokens[position])
        next_position = self._storage.parse(tokens, value_position)
        self._write_bound(self._storage.get_value())
        return next_position

    def is_valid(self) -> bool:
        if self._storage.has_value():
            return bool(self._validator(self._storage.get_value()))
        return not self._required

    def has_parsed_value(self) -> bool:
        return self._storage.has_value()

    def get_value(self) -> Any:
        """
        Return the parsed value, falling back to the default.

        Raises:
            NoValueError: If the argument is invalid, or is optional and has
                neither a parsed nor a default value.
        """
        if not self.is_valid():
            raise NoValueError(f"getting value from invalid argument '{self.name}'")
        if self._storage.has_value():
            return self._storage.get_value()
        return self._fallback_value()

    def _fallback_value(self) -> Any:
        if self.has_default():
            return self._default
        raise NoValueError(f"argument '{self.name}' does not have a value")

    def apply_configured(self, value: Any) -> bool:
        if self.has_parsed_value():
            return False
        self._storage.assign(self._storage.coerce(value))
        self._write_bound(self._storage.get_value())
        return True

    def format_help(self) -> str:
        if self.alternate_tag:
            tags = f"{self.tag}, {self.alternate_tag.ljust(_ALTERNATE_TAG_WIDTH - 2)}"
        else:
            tags = self.tag + " " * _ALTERNATE_TAG_WIDTH
        description = self.description
        if self.has_default():
            suffix = f"(default: {self._default})"
            description = f"{description} {suffix}" if description else suffix
        required = "(required) " if self._required else ""
        return f"{_INDENT}{tags}{required}{description}\n"


class FlagArgument(TagArgument[bool]):
    """A tag argument whose value is whether its tag was present."""

    def __init__(self, name: str, tag: str) -> None:
        super().__init__(name, tag, BooleanScalar())

    def has_parsed_value(self) -> bool:
        return self._storage.get_value()

    def set_required(self, required: bool = True) -> "FlagArgument":
        raise DeclarationError(f"flag '{self.name}' cannot be required")

    def set_default(self, value: Any) -> "FlagArgument":
        raise DeclarationError(f"flag '{self.name}' cannot have a default value")

    def set_validator(self, validator: Validator) -> "FlagArgument":
        raise DeclarationError(f"flag '{self.name}' cannot have a validator")


class ValueArgument(TagArgument[T]):
    """A tag argument followed by exactly one value token."""

    def __init__(self, name: str, tag: str, kind: Any = str) -> None:
        super().__init__(name, tag, Scalar(kind))


class MultiValueArgument(TagArgument[list[T]]):
    """A tag argument followed by a run of value tokens."""

    def __init__(self, name: str, tag: str, kind: Any = str) -> None:
        super().__init__(name, tag, MultiScalar(kind))

    def set_default(self, value: Sequence[Any]) -> "MultiValueArgument[T]":
        return super().set_default(list(value))

    def _fallback_value(self) -> list[T]:
        if self.has_default():
            return list(self._default)
        return self._storage.get_value()


class PositionalArgument(Argument, Generic[T]):
    """
    An argument identified by its position among the leftover tokens.

    Positional arguments are always mandatory: one without a value is invalid.
    """

    def __init__(self, name: str, kind: Any = str) -> None:
        super().__init__(name)
        self._storage: Scalar[T] = Scalar(kind)
        self._validator: Validator = _accept_all

    def set_validator(self, validator: Validator) -> "PositionalArgument[T]":
        self._validator = validator
        return self

    def parse(self, tokens: Sequence[str], position: int) -> int:
        next_position = self._storage.parse(tokens, position)
        _LOGGER.debug("Positional argument %r took %r", self.name, tokens[position])
        self._write_bound(self._storage.get_value())
        return next_position

    def is_valid(self) -> bool:
        return self._storage.has_value() and bool(
            self._validator(self._storage.get_value())
        )

    def has_parsed_value(self) -> bool:
        return self._storage.has_value()

    def get_value(self) -> T:
        if not self._storage.has_value():
            raise NoValueError(f"getting value from invalid argument '{self.name}'")
        return self._storage.get_value()

    def apply_configured(self, value: Any) -> bool:
        if self.has_parsed_value():
            return False
        self._storage.assign(self._storage.coerce(value))
        self._write_bound(self._storage.get_value())
        return True

    def format_help(self) -> str:
        return f"{_INDENT}{self.name} {self.description}\n"
