#!/usr/bin/env python3
"""
Example demonstrating loading argument values from a configuration file.

Values given on the command line take precedence over the file, which in turn
takes precedence over declared defaults.
"""

import json
import os
import tempfile

from tagged_argparser import CommandLine


if __name__ == "__main__":
    config = {"workers": 8, "timeout": 30, "hosts": ["alpha", "beta"]}
    with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
        json.dump(config, f)
        config_path = f.name

    try:
        cli = CommandLine("deploy", config_flag=["-C", "--config"])
        workers = cli.add_value("workers", "-w", kind=int).set_default(4)
        timeout = cli.add_value("timeout", "-t", kind=float).set_default(300.0)
        hosts = cli.add_multi_value("hosts", "-H").set_required(True)

        cli.parse(["deploy", "--config", config_path, "-t", "12.5"])

        print(f"workers: {workers.get_value()}")  # 8, from the file
        print(f"timeout: {timeout.get_value()}")  # 12.5, from the command line
        print(f"hosts: {hosts.get_value()}")  # ['alpha', 'beta']
    finally:
        os.unlink(config_path)
