"""
Module 05 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m hashtree_cli build [-d ITEM ...] [--items-file PATH] [--json]
    python -m hashtree_cli tree [-d ITEM ...] [--items-file PATH]
    python -m hashtree_cli prove (--index N | --item ITEM) [--out PATH] [--json]
    python -m hashtree_cli verify <proof_path> [--item ITEM] [--root HEX] [--json]
    python -m hashtree_cli contains <item> [-d ITEM ...] [--items-file PATH] [--json]
    python -m hashtree_cli config --init

Environment Variables:
    HASHTREE_HASH_ALGORITHM     Hash function: sha256, blake2b, rolling32 (default: sha256)
    HASHTREE_SHORT_DIGEST_CHARS Hex characters shown for short digests (default: 16)
    HASHTREE_LOG_LEVEL          Log level (default: INFO)
    HASHTREE_LOG_FILE           Optional log file
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

import yaml

from core.crypto.hashing import available_hash_functions
from core.schemas.errors import MerkleException
from hashtree_cli import __version__
from hashtree_cli.commands import prove, tree, verify
from hashtree_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _items_parent() -> argparse.ArgumentParser:
    """Shared item-source options."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--data", "-d",
        action="append",
        default=None,
        metavar="ITEM",
        help="Item to include (repeatable, appended after --items-file)",
    )
    parent.add_argument(
        "--items-file", "-f",
        type=str,
        default=None,
        help="File with one item per line ('-' for stdin)",
    )
    return parent


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="hashtree",
        description="Build Merkle trees, generate inclusion proofs and verify them.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./hashtree.yaml, ./hashtree.json or ~/.config/hashtree/)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--algorithm", "-a",
        type=str,
        default=None,
        choices=available_hash_functions(),
        help="Hash function (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    items_parent = _items_parent()

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        parents=[items_parent],
        help="Build a tree and print its summary",
        description="Build a tree from items (default items when none given) and print root, depth and leaves.",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output the full summary (every level) as JSON",
    )
    build_parser.set_defaults(func=tree.build_cmd)

    # --- tree command ---
    tree_parser = subparsers.add_parser(
        "tree",
        parents=[items_parent],
        help="Render every level of a tree",
    )
    tree_parser.set_defaults(func=tree.tree_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        parents=[items_parent],
        help="Generate an inclusion proof",
        description="Generate an inclusion proof for a leaf, selected by index or by item.",
    )
    target = prove_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--index", "-i", type=int, default=None, help="Leaf index (0-based)")
    target.add_argument("--item", type=str, default=None, help="Item to prove (first occurrence)")
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write proof JSON to this file",
    )
    prove_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output proof, validity and size as JSON",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof file offline",
        description=(
            "Recompute the root from a proof file; optionally bind an item and pin a trusted root. "
            "Uses the proof's algorithm tag unless the global --algorithm pins one."
        ),
    )
    verify_parser.add_argument("proof_path", type=str, help="Path to proof JSON")
    verify_parser.add_argument("--item", type=str, default=None, help="Item the proof should authenticate")
    verify_parser.add_argument("--root", type=str, default=None, help="Trusted root (0x hex)")
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- contains command ---
    contains_parser = subparsers.add_parser(
        "contains",
        parents=[items_parent],
        help="Check whether an item is in a tree",
    )
    contains_parser.add_argument("item", type=str, help="Item to look for")
    contains_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    contains_parser.set_defaults(func=tree.contains_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="hashtree.json",
        help="Path for config file (default: hashtree.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (HASHTREE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: hashtree config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.algorithm:
        config.tree = dataclasses.replace(config.tree, hash_algorithm=args.algorithm)

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except MerkleException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except OSError as e:
        if args.log_level == "DEBUG":
            traceback.print_exc()
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
