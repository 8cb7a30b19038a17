"""
Storage strategies composed into tag arguments.

A storage owns the parsed value of one argument and knows how many tokens it
consumes. ``parse`` receives the full token list and the position of the
first token after the tag, and returns the position just past the last token
it consumed.
"""

import typing
from typing import Any, Generic, Optional, Sequence, TypeVar

from .errors import NoValueError
from .tokens import coerce_value, convert_scalar, is_separator, looks_like_tag

__all__: typing.Sequence[str] = ("Scalar", "BooleanScalar", "MultiScalar")

T = TypeVar("T")


class Scalar(Generic[T]):
    """Holds at most one value; parsing again replaces it."""

    requires_token = True

    def __init__(self, kind: Any = str) -> None:
        self.kind = kind
        self._value: Optional[T] = None
        self._has_value = False

    def has_value(self) -> bool:
        return self._has_value

    def get_value(self) -> T:
        if not self._has_value:
            raise NoValueError("does not have value")
        return typing.cast(T, self._value)

    def parse(self, tokens: Sequence[str], position: int) -> int:
        self.assign(convert_scalar(tokens[position], self.kind))
        return position + 1

    def coerce(self, value: Any) -> T:
        return coerce_value(value, self.kind)

    def assign(self, value: T) -> None:
        self._value = value
        self._has_value = True


class BooleanScalar:
    """
    Flag storage: ``False`` until the tag is seen, then ``True``.

    A flag always has a value, since its absence is meaningful too.
    """

    requires_token = False
    kind = bool

    def __init__(self) -> None:
        self._value = False

    def has_value(self) -> bool:
        return True

    def get_value(self) -> bool:
        return self._value

    def parse(self, tokens: Sequence[str], position: int) -> int:
        # presence is the signal, nothing after the tag is consumed
        self._value = True
        return position

    def coerce(self, value: Any) -> bool:
        return coerce_value(value, bool)

    def assign(self, value: bool) -> None:
        self._value = value


class MultiScalar(Generic[T]):
    """
    Holds an ordered list of values.

    Each parse appends the run of tokens up to the next tag-like token, the
    separator, or the end of input. Values accumulate across repeated tags and
    repeated parse calls.
    """

    requires_token = False

    def __init__(self, kind: Any = str) -> None:
        self.kind = kind
        self._values: list[T] = []

    def has_value(self) -> bool:
        return bool(self._values)

    def get_value(self) -> list[T]:
        return list(self._values)

    def parse(self, tokens: Sequence[str], position: int) -> int:
        end = len(tokens)
        while (
            position < end
            and not looks_like_tag(tokens[position])
            and not is_separator(tokens[position])
        ):
            self._values.append(convert_scalar(tokens[position], self.kind))
            position += 1
        return position

    def coerce(self, value: Any) -> list[T]:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            value = [value]
        return [coerce_value(item, self.kind) for item in value]

    def assign(self, value: Sequence[T]) -> None:
        self._values = list(value)
