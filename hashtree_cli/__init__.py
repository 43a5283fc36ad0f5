"""
Module 05 - Hashtree CLI

Command-line interface for building Merkle trees and checking inclusion proofs.

Usage:
    python -m hashtree_cli build -d "T1" -d "T2" -d "T3"
    python -m hashtree_cli tree --items-file items.txt
    python -m hashtree_cli prove --items-file items.txt --index 1 --out proof.json
    python -m hashtree_cli verify proof.json --item "T2"
    python -m hashtree_cli contains "T2" --items-file items.txt
"""

__version__ = "0.1.0"
