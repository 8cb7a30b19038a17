"""
Token classification and textual-to-typed conversion.

These helpers are shared by the storage strategies and the command line: the
tag predicate decides where a multi-value run ends and which leftover tokens
are eligible for positional binding, and ``convert_scalar`` turns one token
into a typed value.
"""

import typing
from typing import Any

from .errors import ConversionError

__all__: typing.Sequence[str] = (
    "SEPARATOR",
    "is_separator",
    "looks_like_tag",
    "convert_scalar",
    "coerce_value",
)

SEPARATOR = "--"


def is_separator(token: str) -> bool:
    """Return True if ``token`` is the ``--`` separator."""
    return token == SEPARATOR


def _is_short_tag(token: str) -> bool:
    # "-5" is a negative number, not a tag
    return len(token) > 1 and token[0] == "-" and not token[1].isdigit()


def _is_alternate_tag(token: str) -> bool:
    return len(token) > 2 and token.startswith("--") and not token[2].isdigit()


def looks_like_tag(token: str) -> bool:
    """
    Decide whether a token has the shape of a tag.

    A token is tag-like if it is non-empty, is not the separator, and starts
    with ``-`` or ``--`` followed by a non-digit character. Tags are never
    checked against declared arguments here; this is purely about shape.
    """
    return (
        bool(token)
        and not is_separator(token)
        and (_is_short_tag(token) or _is_alternate_tag(token))
    )


def _strict_bool(value: str) -> bool:
    """
    Parse a string to a boolean value strictly.

    Only accepts 'True', 'true', 'False', 'false', '1', '0' as valid values.
    """
    if value in ("True", "true", "1"):
        return True
    elif value in ("False", "false", "0"):
        return False
    else:
        raise ValueError(
            f"Invalid boolean value: '{value}'. Must be one of: True, true, False, false, 1, 0"
        )


def convert_scalar(token: str, kind: Any) -> Any:
    """
    Convert a single token to ``kind``.

    Args:
        token: The raw command-line token.
        kind: Target type, or any callable taking the token text.

    Returns:
        The converted value. ``str`` tokens are returned verbatim.

    Raises:
        ConversionError: If the token cannot be fully converted.
    """
    if kind is str:
        return token
    converter = _strict_bool if kind is bool else kind
    try:
        if kind in (int, float) and (token != token.strip() or "_" in token):
            # int()/float() tolerate surrounding whitespace and digit separators
            raise ValueError("unconverted characters")
        return converter(token)
    except (ValueError, TypeError, ArithmeticError) as e:
        raise ConversionError(token, kind, e) from e


def coerce_value(value: Any, kind: Any) -> Any:
    """
    Coerce an already-loaded value (e.g. from a YAML or JSON file) to ``kind``.

    Strings go through ``convert_scalar``; integers widen to floats; booleans
    are never accepted where an integer or float is expected.

    Raises:
        ConversionError: If the value does not fit ``kind``.
    """
    if isinstance(value, str):
        return convert_scalar(value, kind)
    if kind in (int, float) and isinstance(value, bool):
        raise ConversionError(repr(value), kind, TypeError("bool is not a number"))
    if kind is float and isinstance(value, int):
        return float(value)
    if isinstance(kind, type) and isinstance(value, kind):
        return value
    raise ConversionError(
        repr(value), kind, TypeError(f"got {type(value).__name__}: {value!r}")
    )
