#!/usr/bin/env python3
"""
Example script demonstrating the usage of CommandLine.

Shows a help flag, a validated integer bound into a namespace, and a required
path that must name an existing file. Bad input prints the error followed by
the help text and exits non-zero.
"""

import sys
from pathlib import Path
from types import SimpleNamespace

from tagged_argparser import CommandLine, UsageError


def show_kittens(count: int) -> None:
    print(f"showing {count} kitten(s)")


def store_kittens(path: Path) -> None:
    print(f"storing kittens in {path}")


def main() -> int:
    """Main function demonstrating the parser."""
    options = SimpleNamespace(count=1, path=None)

    cli = CommandLine("kittens", "shows and stores kittens")
    help_arg = (
        cli.add_flag("help", "-h")
        .set_alternate_tag("--help")
        .set_description("show this message")
    )
    cli.add_value("integer", "-i", kind=int).set_description(
        "the number of kittens to show; must be larger than 0 and 5 at most"
    ).set_validator(lambda i: 0 < i <= 5).bind(options, "count")
    cli.add_value("path", "-p", kind=Path).set_required(True).set_description(
        "the path to use for storage of the shown kittens (must be an existing file)"
    ).bind(options, "path").set_validator(lambda p: p.exists() and p.is_file())

    try:
        cli.parse()
    except UsageError as e:
        if help_arg.get_value():
            cli.print_help()
            return 0
        print(f"{e}\n", file=sys.stderr)
        cli.print_help(sys.stderr)
        return 1

    show_kittens(options.count)
    store_kittens(options.path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
