"""
Tree Session

Boundary wrapper that owns one MerkleTree and exposes it to presentation
or transport collaborators.

- Every operation runs under a single lock, so callers observe either the
  complete pre-mutation or complete post-mutation tree.
- Every operation returns a ServiceResponse envelope; tree exceptions are
  converted to structured errors instead of propagating.
- Sessions are explicit values. There is no shared process-wide tree.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Sequence

from core.config.runtime import RuntimeConfig
from core.merkle.merkle_tree import Item, MerkleTree, is_blank, item_text
from core.schemas.errors import (
    InvalidInputException,
    MerkleException,
    ProofDecodeException,
)
from core.schemas.proof import InclusionProof

from .models import ContainsInfo, ProofInfo, ServiceResponse, VerificationInfo


logger = logging.getLogger(__name__)


class TreeSession:
    """
    Serialized access to one tree.

    Example:
        >>> session = TreeSession()
        >>> response = session.add_item("Transaction 5: Alice -> Eve")
        >>> response.ok, response.data.leaf_count
        (True, 5)
    """

    def __init__(
        self,
        tree: MerkleTree | None = None,
        config: RuntimeConfig | None = None,
    ) -> None:
        self.config = config or RuntimeConfig()
        if tree is None:
            tree = MerkleTree(self.config.tree.default_items, self.config.hash_function())
        self._tree = tree
        self._lock = threading.Lock()

    @classmethod
    def from_items(
        cls,
        items: Sequence[Item],
        config: RuntimeConfig | None = None,
    ) -> "TreeSession":
        """
        Start a session over explicit items.

        Raises:
            InvalidInputException: If items is empty or has a blank item
        """
        config = config or RuntimeConfig()
        return cls(MerkleTree.from_items(items, config.hash_function()), config)

    @property
    def tree(self) -> MerkleTree:
        return self._tree

    def _run(
        self,
        action: str,
        operation: Callable[[], Any],
        success_message: str,
    ) -> ServiceResponse:
        with self._lock:
            try:
                data = operation()
            except MerkleException as e:
                logger.info(f"{action} failed: {e.message}")
                return ServiceResponse.failure(f"{action} failed: {e.message}", e.to_error_model())
        return ServiceResponse.success(success_message, data)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def get_tree_info(self) -> ServiceResponse:
        return self._run("Get tree info", self._tree.summary, "Tree info loaded")

    def add_item(self, item: Item) -> ServiceResponse:
        def operation():
            self._tree.add(item)
            return self._tree.summary()

        return self._run("Add item", operation, "Item added")

    def generate_proof(
        self,
        index: int | None = None,
        item: Item | None = None,
    ) -> ServiceResponse:
        """Proof by item when `item` is given, otherwise by index."""
        def operation():
            if item is not None:
                proof = self._tree.prove_by_item(item)
            elif index is not None:
                proof = self._tree.prove_by_index(index)
            else:
                raise InvalidInputException("Either an item or an index is required")
            return ProofInfo(
                proof=proof,
                is_valid=self._tree.verify(proof),
                proof_size=proof.estimated_size,
            )

        return self._run("Generate proof", operation, "Proof generated")

    def verify_proof(
        self,
        proof: InclusionProof | dict[str, Any],
        item: Item | None = None,
    ) -> ServiceResponse:
        """
        Verify a proof, optionally binding it to `item`.

        Undecodable proofs are reported as invalid rather than as errors.
        """
        def operation():
            decoded: InclusionProof | None
            if isinstance(proof, InclusionProof):
                decoded = proof
            else:
                try:
                    decoded = InclusionProof.from_dict(proof)
                except ProofDecodeException as e:
                    logger.debug(f"Treating undecodable proof as invalid: {e.message}")
                    decoded = None

            has_item = item is not None and not is_blank(item)
            return VerificationInfo(
                proof_valid=self._tree.verify(decoded),
                item_valid=self._tree.verify_item(item, decoded) if has_item else False,
                item=item_text(item) if item is not None else "",
            )

        return self._run("Verify proof", operation, "Verification complete")

    def rebuild(self, items: Sequence[Item]) -> ServiceResponse:
        def operation():
            self._tree.rebuild(items)
            return self._tree.summary()

        return self._run("Rebuild tree", operation, "Tree rebuilt")

    def verify_item(self, item: Item) -> ServiceResponse:
        """Containment check."""
        def operation():
            if is_blank(item):
                raise InvalidInputException("Item must not be empty or blank")
            index = self._tree.index_of_item(item)
            return ContainsInfo(exists=index is not None, item=item_text(item), index=index)

        return self._run("Verify item", operation, "Verification complete")

    def current_items(self) -> list[Item]:
        with self._lock:
            return list(self._tree.items)

    def reset_to_default(self) -> ServiceResponse:
        def operation():
            self._tree.rebuild(self.config.tree.default_items)
            return self._tree.summary()

        return self._run("Reset", operation, "Tree reset to default items")


__all__ = [
    "TreeSession",
]
