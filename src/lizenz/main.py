# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the main unit so this responsibility stays isolated, testable, and easy to evolve.

Command line entry point for lizenz.
Includes logging setup, configuration and grammar loading, and the
verify/fix subcommands.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from lizenz.core.config import DEFAULT_CONFIG_PATH, load_config
from lizenz.services.exceptions import LizenzError, iter_error_chain
from lizenz.services.grammars.grammar_registry import load_grammars
from lizenz.services.headers.header_ops import HeaderContext, fix_files, verify_files

GRAMMARS_ENV = "TREE_SITTER_GRAMMARS"
LOG_LEVEL_ENV = "LIZENZ_LOG"

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build Arg Parser."""
    parser = argparse.ArgumentParser(
        prog="lizenz",
        description="Verify and fix license headers in source files",
    )
    parser.add_argument(
        "-t",
        "--tree-sitter-grammars",
        default=os.getenv(GRAMMARS_ENV),
        help=f"Directory containing tree-sitter grammar shared objects (env: {GRAMMARS_ENV})",
    )
    parser.add_argument(
        "-c",
        "--config-path",
        default=None,
        help=f"Path to the configuration file (default: ./{DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv(LOG_LEVEL_ENV, "warning"),
        choices=["critical", "error", "warning", "info", "debug"],
        help=f"Log level (default: warning, env: {LOG_LEVEL_ENV})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    verify = subparsers.add_parser(
        "verify", help="Check the license header of the given files"
    )
    verify.add_argument("files", nargs="*", help="Files to check their license on")
    fix = subparsers.add_parser(
        "fix", help="Check the given files and add missing license headers"
    )
    fix.add_argument(
        "files", nargs="*", help="Files to check their licenses and try to fix them"
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )


def report_error(exc: LizenzError) -> None:
    chain = list(iter_error_chain(exc))
    print(f"error: {chain[0]}", file=sys.stderr)
    for cause in chain[1:]:
        print(f"  caused by: {cause}", file=sys.stderr)


def run(args: argparse.Namespace) -> int:
    if not args.tree_sitter_grammars:
        raise LizenzError(
            f"No grammar directory given, pass --tree-sitter-grammars or set {GRAMMARS_ENV}",
            exit_code=2,
        )

    grammars = load_grammars(args.tree_sitter_grammars)
    logger.debug("Loaded %d grammars: %s", len(grammars), ", ".join(grammars))
    config = load_config(args.config_path)
    context = HeaderContext(
        license=config.license, languages=config.languages, grammars=grammars
    )

    if args.command == "verify":
        results = verify_files(args.files, context)
        for result in results:
            status = "ok" if result.conforming else "missing license header"
            print(f"{result.path}: {status}")
        return 0 if all(r.conforming for r in results) else 1

    results = fix_files(args.files, context)
    for result in results:
        if result.fixed:
            print(f"{result.path}: added license header")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Examples:
      lizenz -t grammars/ verify src/main.rs Cargo.toml
      TREE_SITTER_GRAMMARS=grammars/ lizenz -c lizenz.toml fix src/*.rs
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        return run(args)
    except LizenzError as exc:
        report_error(exc)
        return exc.exit_code


if __name__ == "__main__":
    sys.exit(main())
