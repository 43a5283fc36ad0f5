"""
Module 05 - CLI Tree Commands

Build a tree and show it:
- build: summary (root, counts, leaves)
- tree: every level rendered
- contains: containment check for one item

Usage:
    hashtree build -d "T1" -d "T2" [--json]
    hashtree tree --items-file items.txt
    hashtree contains "T2" --items-file items.txt [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from hashtree_cli.formatting import render_summary, render_tree
from hashtree_cli.inputs import open_session


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def build_cmd(args: Namespace) -> int:
    """Execute the build command."""
    session = open_session(args)
    response = session.get_tree_info()
    if not response.ok:
        print(f"Error: {response.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = response.data
    logger.info(f"Built tree with {summary.leaf_count} leaves")

    if args.json:
        print(json.dumps(summary.model_dump(mode="json"), indent=2))
    else:
        display = args.cli_config.display
        print(render_summary(summary, display.short_digest_chars, display.max_leaves_shown))
    return EXIT_SUCCESS


def tree_cmd(args: Namespace) -> int:
    """Execute the tree command."""
    session = open_session(args)
    response = session.get_tree_info()
    if not response.ok:
        print(f"Error: {response.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    print(render_tree(response.data, args.cli_config.display.short_digest_chars))
    return EXIT_SUCCESS


def contains_cmd(args: Namespace) -> int:
    """
    Execute the contains command.

    Returns:
        EXIT_SUCCESS when the item is present, EXIT_VERIFICATION_FAILED when not
    """
    session = open_session(args)
    response = session.verify_item(args.item)
    if not response.ok:
        print(f"Error: {response.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    info = response.data
    if args.json:
        print(json.dumps(info.model_dump(mode="json"), indent=2))
    elif info.exists:
        print(f"exists: true (index {info.index})")
    else:
        print("exists: false")

    return EXIT_SUCCESS if info.exists else EXIT_VERIFICATION_FAILED
