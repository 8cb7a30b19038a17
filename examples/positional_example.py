#!/usr/bin/env python3
"""
Example demonstrating multi-value and positional arguments.

Positional arguments are declared after all tag arguments and are bound either
to the tokens after a ``--`` separator or, without one, to whatever the tag
arguments left over.
"""

from tagged_argparser import CommandLine


if __name__ == "__main__":
    cli = CommandLine("sum", "adds numbers to a base value")
    verbose = cli.add_flag("verbose", "-v").set_alternate_tag("--verbose")
    numbers = (
        cli.add_multi_value("numbers", "-n", kind=int)
        .set_alternate_tag("--numbers")
        .set_required(True)
        .set_description("numbers to add")
    )
    base = cli.add_positional("base", kind=int).set_description("starting value")

    # Simulate parsing arguments (replace with `None` to use CLI args)
    args = ["sum", "--numbers", "1", "2", "-3", "-v", "--numbers", "4", "--", "10"]

    result = cli.safe_parse(args)
    if result.is_err():
        print(result.err_value)
        cli.print_help()
    else:
        total = base.get_value() + sum(numbers.get_value())
        if verbose.get_value():
            print(f"{base.get_value()} + {numbers.get_value()} = {total}")
        else:
            print(total)
        print(cli.values())
