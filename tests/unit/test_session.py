"""
Tree Session Unit Tests
Tests for core/service/session.py

Covers:
- Response envelopes for every operation
- Error conversion (no exceptions escape the session)
- Default items and reset
- Serialized access from several threads
"""
import threading

import pytest

from core.config.runtime import DEFAULT_ITEMS, RuntimeConfig, TreeConfig
from core.schemas.errors import ErrorCodes, InvalidInputException
from core.service import ContainsInfo, ProofInfo, ServiceResponse, TreeSession, VerificationInfo

from fixtures import flip_bit_in_step


@pytest.fixture
def session():
    return TreeSession.from_items(["T1", "T2", "T3", "T4"])


class TestConstruction:
    """Tests for session setup."""

    def test_default_items(self):
        session = TreeSession()
        assert session.current_items() == list(DEFAULT_ITEMS)
        assert session.tree.depth() == 3

    def test_configured_algorithm(self):
        config = RuntimeConfig(tree=TreeConfig(hash_algorithm="rolling32"))
        session = TreeSession(config=config)
        assert session.tree.hash_function.name == "rolling32"

    def test_from_items_rejects_empty(self):
        with pytest.raises(InvalidInputException):
            TreeSession.from_items([])


class TestEnvelopes:
    """Every operation returns a ServiceResponse."""

    def test_get_tree_info(self, session):
        response = session.get_tree_info()
        assert isinstance(response, ServiceResponse)
        assert response.ok
        assert response.error is None
        assert response.data.leaf_count == 4

    def test_add_item(self, session):
        response = session.add_item("T5")
        assert response.ok
        assert response.message == "Item added"
        assert response.data.leaf_count == 5
        assert session.current_items()[-1] == "T5"

    def test_add_blank_item(self, session):
        response = session.add_item("   ")
        assert not response.ok
        assert response.data is None
        assert response.error.code == ErrorCodes.INVALID_INPUT
        assert response.message.startswith("Add item failed")
        assert len(session.current_items()) == 4

    def test_add_unicode_blank_item(self, session):
        response = session.add_item("\u3000")
        assert response.error.code == ErrorCodes.INVALID_INPUT
        assert len(session.current_items()) == 4

    def test_generate_proof_by_index(self, session):
        response = session.generate_proof(index=1)
        assert response.ok
        info = response.data
        assert isinstance(info, ProofInfo)
        assert info.is_valid
        assert info.proof_size == 134
        assert info.proof.leaf_index == 1

    def test_generate_proof_by_item(self, session):
        response = session.generate_proof(item="T3")
        assert response.ok
        assert response.data.proof.leaf_index == 2

    def test_generate_proof_item_wins_over_index(self, session):
        response = session.generate_proof(index=0, item="T4")
        assert response.data.proof.leaf_index == 3

    def test_generate_proof_out_of_range(self, session):
        response = session.generate_proof(index=9)
        assert not response.ok
        assert response.error.code == ErrorCodes.INDEX_OUT_OF_RANGE
        assert response.error.details == {"index": 9, "leaf_count": 4}

    def test_generate_proof_missing_item(self, session):
        response = session.generate_proof(item="nope")
        assert response.error.code == ErrorCodes.ITEM_NOT_FOUND

    def test_generate_proof_without_target(self, session):
        response = session.generate_proof()
        assert response.error.code == ErrorCodes.INVALID_INPUT

    def test_rebuild(self, session):
        response = session.rebuild(["A", "B"])
        assert response.ok
        assert response.data.leaf_count == 2

    def test_rebuild_blank_reports_position(self, session):
        response = session.rebuild(["A", "", "C"])
        assert not response.ok
        assert response.error.details["position"] == 1
        assert session.current_items() == ["T1", "T2", "T3", "T4"]

    def test_rebuild_empty(self, session):
        response = session.rebuild([])
        assert response.error.code == ErrorCodes.INVALID_INPUT

    def test_reset_to_default(self, session):
        response = session.reset_to_default()
        assert response.ok
        assert session.current_items() == list(DEFAULT_ITEMS)


class TestVerification:
    """Tests for verify_proof and verify_item."""

    def test_verify_proof_object(self, session):
        proof = session.generate_proof(index=1).data.proof
        response = session.verify_proof(proof, item="T2")
        info = response.data
        assert isinstance(info, VerificationInfo)
        assert info.proof_valid
        assert info.item_valid
        assert info.item == "T2"

    def test_verify_proof_dict(self, session):
        proof = session.generate_proof(index=2).data.proof
        response = session.verify_proof(proof.to_dict())
        assert response.ok
        assert response.data.proof_valid
        assert response.data.item_valid is False

    def test_verify_proof_wrong_item(self, session):
        proof = session.generate_proof(index=1).data.proof
        info = session.verify_proof(proof, item="T1").data
        assert info.proof_valid
        assert not info.item_valid

    def test_verify_tampered_proof(self, session):
        proof = session.generate_proof(index=1).data.proof
        info = session.verify_proof(flip_bit_in_step(proof), item="T2").data
        assert not info.proof_valid
        assert not info.item_valid

    def test_undecodable_proof_is_invalid(self, session):
        response = session.verify_proof({"leaf_index": "zero"})
        assert response.ok
        assert not response.data.proof_valid

    def test_verify_item_present(self, session):
        info = session.verify_item("T3").data
        assert isinstance(info, ContainsInfo)
        assert info.exists
        assert info.index == 2

    def test_verify_item_absent(self, session):
        info = session.verify_item("T9").data
        assert not info.exists
        assert info.index is None

    @pytest.mark.parametrize("item", ["", "\u3000", "\u00a0\t"])
    def test_verify_item_blank(self, session, item):
        response = session.verify_item(item)
        assert not response.ok
        assert response.error.code == ErrorCodes.INVALID_INPUT


class TestConcurrency:
    """Tests for serialized access."""

    def test_concurrent_adds(self, session):
        def worker(start):
            for i in range(start, start + 10):
                session.add_item(f"item-{i}")

        threads = [threading.Thread(target=worker, args=(n * 10,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        items = session.current_items()
        assert len(items) == 44
        assert len(set(items)) == 44
        assert session.tree.root_digest() == type(session.tree).from_items(items).root_digest()
