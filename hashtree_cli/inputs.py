"""
Module 05 - CLI Item Sources

Resolve the item list for a command from --data / --items-file options,
falling back to the configured default items.
"""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path

from core.config.runtime import RuntimeConfig
from core.service import TreeSession


def read_items_file(path: str) -> list[str]:
    """
    One item per line. "-" reads standard input.

    Blank lines are kept so that tree validation reports their position.
    """
    if path == "-":
        text = sys.stdin.read()
    else:
        text = Path(path).read_text(encoding="utf-8")
    return text.splitlines()


def resolve_items(args: Namespace, config: RuntimeConfig) -> list[str]:
    items: list[str] = []
    if getattr(args, "items_file", None):
        items.extend(read_items_file(args.items_file))
    if getattr(args, "data", None):
        items.extend(args.data)
    if not items and not getattr(args, "items_file", None):
        items = list(config.tree.default_items)
    return items


def open_session(args: Namespace) -> TreeSession:
    """
    Build a session over the command's items.

    Raises:
        InvalidInputException: If the resolved list is empty or has blank items
    """
    config: RuntimeConfig = args.cli_config
    return TreeSession.from_items(resolve_items(args, config), config)
