#!/usr/bin/env python3
"""
E-Commerce Docker Management CLI

Wraps docker compose for the development and production deployments.
Make-style assignments after the command are accepted as well:

  python ecom_orcha_cli.py up backend MODE=prod ARGS="--build"
  python ecom_orcha_cli.py logs SERVICE=gateway
"""

import sys
from typing import List

from ecom_orcha.cli.commands import app


# Assignment tokens and the options they stand for
ASSIGNMENT_OPTIONS = {
    'MODE': '--mode',
    'SERVICE': '--service',
    'ARGS': '--args',
}


def normalize_argv(argv: List[str]) -> List[str]:
    """
    Rewrite ``NAME=value`` tokens into the matching options.

    Only the exact upper-case names are rewritten; every other token is
    kept in place.
    """
    normalized = []
    for token in argv:
        name, sep, value = token.partition('=')
        if sep and name in ASSIGNMENT_OPTIONS:
            normalized.append(f"{ASSIGNMENT_OPTIONS[name]}={value}")
        else:
            normalized.append(token)
    return normalized


def main():
    """Main entry point for the CLI."""
    app(args=normalize_argv(sys.argv[1:]), prog_name="ecom-orcha")


if __name__ == '__main__':
    main()
