"""
Module 05 - CLI Prove Command

Generate an inclusion proof for one leaf, by index or by item.

Usage:
    hashtree prove --items-file items.txt --index 1 [--out proof.json]
    hashtree prove -d T1 -d T2 -d T3 --item T3 [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from hashtree_cli.formatting import render_proof
from hashtree_cli.inputs import open_session


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    With --out the proof JSON is written to a file and a short report is
    printed; otherwise the proof is printed (JSON with --json).
    """
    session = open_session(args)
    response = session.generate_proof(index=args.index, item=args.item)
    if not response.ok:
        print(f"Error: {response.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    info = response.data
    proof_json = json.dumps(info.proof.to_dict(), indent=2)

    if args.out:
        out_path = Path(args.out)
        out_path.write_text(proof_json + "\n", encoding="utf-8")
        logger.info(f"Wrote proof for leaf {info.proof.leaf_index} to {out_path}")

    if args.json:
        print(json.dumps(info.model_dump(mode="json"), indent=2))
    elif args.out:
        print(f"proof: {args.out}")
        print(f"leaf_index: {info.proof.leaf_index}")
        print(f"path_length: {info.proof.path_length}")
        print(f"valid: {str(info.is_valid).lower()}")
        print(f"size: {info.proof_size} bytes")
    else:
        print(render_proof(info.proof))
        print(f"Valid: {str(info.is_valid).lower()}")
        print(f"Estimated size: {info.proof_size} bytes")

    return EXIT_SUCCESS
